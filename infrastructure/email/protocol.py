"""EmailProvider protocol: services depend on this, not on ZeptoMail."""

from typing import Optional, Protocol


class EmailProvider(Protocol):
    async def send_otp_email(
        self, email: str, user_name: Optional[str], otp_code: str, expires_minutes: int
    ) -> bool: ...

    async def send_password_reset_email(
        self, email: str, user_name: Optional[str], otp_code: str, expires_minutes: int
    ) -> bool: ...
