"""IdentityProvider protocol for Google / Apple sign-in and account removal."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class VerifiedIdentity:
    uid: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
    provider: Optional[str] = None


class IdentityProvider(Protocol):
    async def verify_id_token(self, id_token: str) -> Optional[VerifiedIdentity]:
        """Return the identity behind *id_token*, or None if it is not valid."""
        ...

    async def delete_user(self, uid: str) -> None: ...
