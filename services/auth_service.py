"""
Credential checks and session lifecycle.

Every login failure (unknown identifier, inactive account, wrong password,
non-admin on the admin login) is the same InvalidCredentials error so the
response never reveals which accounts exist.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from config import OtpSettings
from errors import (
    AuthenticationError,
    ExternalServiceError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from infrastructure.email.protocol import EmailProvider
from infrastructure.identity.protocol import IdentityProvider
from repositories.token_repository import PasswordResetRepository
from repositories.user_repository import UserRepository
from schemas.models.base import parse_object_id
from schemas.models.token import PasswordResetDoc
from schemas.models.user import ROLE_USER, UserDoc
from services.token_service import AuthContext, TokenPair, TokenService
from shared import messages
from shared.crypto import hash_password, hash_token, token_matches, verify_password
from shared.datetime_utils import ensure_utc, utcnow
from shared.generators import generate_otp_code
from shared.logging import get_logger

log = get_logger(__name__)


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        password_resets: PasswordResetRepository,
        tokens: TokenService,
        email_provider: EmailProvider,
        identity: Optional[IdentityProvider],
        settings: OtpSettings,
    ) -> None:
        self._users = users
        self._password_resets = password_resets
        self._tokens = tokens
        self._email = email_provider
        self._identity = identity
        self._settings = settings

    async def _resolve_identifier(self, identifier: str) -> Optional[UserDoc]:
        identifier = identifier.strip().lower()
        if "@" in identifier:
            return await self._users.get_by_email(identifier)
        return await self._users.get_by_username(identifier)

    async def login(
        self, identifier: str, password: str, *, require_admin: bool = False
    ) -> tuple[UserDoc, TokenPair]:
        user = await self._resolve_identifier(identifier)
        if (
            user is None
            or not user.status
            or (require_admin and not user.is_admin)
            or not verify_password(password, user.password_hash)
        ):
            log.info("login_failed", admin=require_admin)
            raise AuthenticationError(messages.INVALID_CREDENTIALS)

        tokens = await self._tokens.issue_pair(user)
        log.info("login_success", user_id=str(user.id), admin=require_admin)
        return user, tokens

    async def refresh(self, refresh_token: str) -> str:
        """Return a new access token. The refresh token itself is not rotated."""
        payload = self._tokens.decode_refresh_token(refresh_token)
        if payload is None or not await self._tokens.is_refresh_token_active(
            payload["uid"], refresh_token
        ):
            raise ForbiddenError(messages.INVALID_REFRESH_TOKEN)

        user_id = parse_object_id(payload["uid"])
        user = await self._users.get_by_id(user_id) if user_id else None
        if user is None or not user.status:
            raise ForbiddenError(messages.INVALID_REFRESH_TOKEN)
        return self._tokens.issue_access_token(user)

    async def logout(self, auth: AuthContext, refresh_token: str) -> None:
        payload = self._tokens.decode_refresh_token(refresh_token)
        if payload is None:
            raise ForbiddenError(messages.INVALID_REFRESH_TOKEN)
        if payload["uid"] != auth.uid:
            raise ForbiddenError(messages.TOKEN_USER_MISMATCH)
        removed = await self._tokens.revoke_refresh_token(auth.uid, refresh_token)
        log.info("logout", user_id=auth.uid, revoked=removed)

    async def social_sign_in(self, provider: str, id_token: str) -> tuple[UserDoc, TokenPair]:
        """Sign in with a Google / Apple ID token, creating the user on first use."""
        if self._identity is None:
            raise ExternalServiceError(messages.SOCIAL_SIGN_IN_FAILED)
        identity = await self._identity.verify_id_token(id_token)
        if identity is None:
            raise AuthenticationError(messages.SOCIAL_SIGN_IN_FAILED)

        user = await self._users.get_by_email(identity.email)
        if user is None:
            now = utcnow()
            user = UserDoc(
                name=identity.name or identity.email.split("@")[0],
                email=identity.email,
                username=None,
                profile_pic_url=identity.picture,
                status=True,
                role=ROLE_USER,
                auth_provider=provider,
                auth_provider_uid=identity.uid,
                created_at=now,
                updated_at=now,
            )
            user.id = await self._users.insert(user)
            log.info("social_user_created", user_id=str(user.id), provider=provider)
        elif not user.status:
            raise AuthenticationError(messages.ACCOUNT_INACTIVE)
        elif user.auth_provider_uid is None:
            await self._users.update_fields(
                user.id, {"auth_provider": provider, "auth_provider_uid": identity.uid}
            )

        tokens = await self._tokens.issue_pair(user)
        log.info("social_sign_in", user_id=str(user.id), provider=provider)
        return user, tokens

    async def forgot_password(self, email: str) -> None:
        """Email a reset code. Silent for unknown, inactive or password-less accounts."""
        user = await self._users.get_by_email(email)
        if user is None or not user.status or not user.password_hash:
            log.info("password_reset_skipped", email=email)
            return

        otp = generate_otp_code()
        now = utcnow()
        await self._password_resets.replace(
            PasswordResetDoc(
                email=email,
                user_id=user.id,
                otp_hash=hash_token(otp),
                expires_at=now + timedelta(minutes=self._settings.otp_expiration_time),
                attempts=0,
                created_at=now,
            )
        )
        sent = await self._email.send_password_reset_email(
            email, user.name, otp, self._settings.otp_expiration_time
        )
        if not sent:
            # The answer stays the same so it cannot reveal which emails exist
            log.error("password_reset_email_failed", user_id=str(user.id))
            return
        log.info("password_reset_requested", user_id=str(user.id))

    async def reset_password(self, email: str, otp: str, new_password: str) -> None:
        record = await self._password_resets.get_by_email(email)
        if record is None:
            raise NotFoundError(messages.EMAIL_NOT_FOUND, field="email")
        if utcnow() > ensure_utc(record.expires_at):
            raise ValidationError(messages.OTP_EXPIRED, field="otp")
        if record.attempts >= self._settings.max_otp_attempts:
            raise RateLimitError(messages.MAX_OTP_ATTEMPTS_REACHED)
        if not token_matches(otp, record.otp_hash):
            await self._password_resets.increment_attempts(email)
            raise ValidationError(messages.INVALID_OTP, field="otp")

        await self._users.update_fields(
            record.user_id,
            {"password_hash": hash_password(new_password), "updated_at": utcnow()},
        )
        await self._password_resets.delete_by_email(email)
        revoked = await self._tokens.revoke_all(record.user_id)
        log.info("password_reset_completed", user_id=str(record.user_id), revoked=revoked)
