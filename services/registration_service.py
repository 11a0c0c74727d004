"""
OTP-gated registration.

Per email the pending record moves NONE → PENDING_OTP → OTP_VERIFIED and
ends when step 3 creates the user (ACTIVATED) or a new step 1 replaces it
(SUPERSEDED). Step 1 rewrites the whole record, so repeating it after a
successful step 2 clears the verification.

    start()            step 1: claim an email, send an OTP
    verify()           step 2: check the OTP
    resend()           resend a fresh OTP, capped by max_allowed_otp_resends
    complete()         step 3: create the user and issue tokens
    check_username()   availability plus up to 3 free suggestions
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pymongo.errors import DuplicateKeyError

from config import OtpSettings
from errors import (
    ConflictError,
    ExternalServiceError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from infrastructure.email.protocol import EmailProvider
from repositories.pending_registration_repository import PendingRegistrationRepository
from repositories.user_repository import UserRepository
from schemas.dto.requests.auth import RegisterStep3Form
from schemas.dto.responses.auth import UsernameCheckResponse
from schemas.models.pending_registration import PendingRegistrationDoc
from schemas.models.user import ROLE_USER, UserDoc
from services.media_service import PROFILE_FOLDER, MediaService
from services.token_service import TokenPair, TokenService
from shared import messages
from shared.crypto import hash_password, hash_token, token_matches
from shared.datetime_utils import ensure_utc, utcnow
from shared.generators import generate_otp_code, username_candidates
from shared.logging import get_logger
from shared.uploads import UploadedFile
from shared.validators import validate_username

log = get_logger(__name__)

MAX_USERNAME_SUGGESTIONS = 3


class RegistrationService:
    def __init__(
        self,
        users: UserRepository,
        pending: PendingRegistrationRepository,
        tokens: TokenService,
        email_provider: EmailProvider,
        media: MediaService,
        settings: OtpSettings,
    ) -> None:
        self._users = users
        self._pending = pending
        self._tokens = tokens
        self._email = email_provider
        self._media = media
        self._settings = settings

    async def _send_otp(self, email: str, name: Optional[str], otp: str) -> None:
        sent = await self._email.send_otp_email(
            email, name, otp, self._settings.otp_expiration_time
        )
        if not sent:
            raise ExternalServiceError(messages.OTP_DELIVERY_FAILED)

    def _new_expiry(self):
        return utcnow() + timedelta(minutes=self._settings.otp_expiration_time)

    async def start(self, name: str, email: str, date_of_birth: str) -> None:
        """Step 1. Raises ConflictError if *email* already has an account."""
        if await self._users.get_by_email(email) is not None:
            raise ConflictError(messages.EMAIL_ALREADY_EXISTS, field="email")

        otp = generate_otp_code()
        now = utcnow()
        await self._pending.upsert(
            PendingRegistrationDoc(
                email=email,
                name=name,
                date_of_birth=date_of_birth,
                otp_hash=hash_token(otp),
                otp_expires_at=self._new_expiry(),
                otp_sent_count=1,
                otp_verified=False,
                created_at=now,
                updated_at=now,
            )
        )
        await self._send_otp(email, name, otp)
        log.info("registration_started", email=email)

    async def verify(self, email: str, otp: str) -> None:
        """Step 2. Expiry is checked before the code itself."""
        pending = await self._pending.get_by_email(email)
        if pending is None:
            raise NotFoundError(messages.EMAIL_NOT_FOUND, field="email")
        if utcnow() > ensure_utc(pending.otp_expires_at):
            raise ValidationError(messages.OTP_EXPIRED, field="otp")
        if not token_matches(otp, pending.otp_hash):
            log.info("registration_otp_mismatch", email=email)
            raise ValidationError(messages.INVALID_OTP, field="otp")

        await self._pending.mark_verified(email, utcnow())
        log.info("registration_email_verified", email=email)

    async def resend(self, email: str) -> None:
        pending = await self._pending.get_by_email(email)
        if pending is None:
            raise NotFoundError(messages.EMAIL_NOT_FOUND, field="email")
        if pending.otp_verified:
            raise ValidationError(messages.EMAIL_ALREADY_VERIFIED, field="email")
        if pending.otp_sent_count >= self._settings.max_allowed_otp_resends:
            raise RateLimitError(messages.MAX_OTP_RESENDS_REACHED)

        otp = generate_otp_code()
        await self._pending.record_resend(
            email, hash_token(otp), self._new_expiry(), utcnow()
        )
        await self._send_otp(email, pending.name, otp)
        log.info(
            "registration_otp_resent",
            email=email,
            otp_sent_count=pending.otp_sent_count + 1,
        )

    async def complete(
        self, form: RegisterStep3Form, profile_pic: Optional[UploadedFile] = None
    ) -> tuple[UserDoc, TokenPair]:
        """Step 3: the commit point. Nothing after the user insert is rolled back."""
        pending = await self._pending.get_by_email(form.email)
        if pending is None:
            raise NotFoundError(messages.EMAIL_NOT_FOUND, field="email")
        if not pending.otp_verified:
            raise ForbiddenError(messages.EMAIL_NOT_VERIFIED, field="email")
        if await self._users.get_by_username(form.username) is not None:
            raise ConflictError(messages.USERNAME_TAKEN, field="username")
        if await self._users.get_by_email(form.email) is not None:
            raise ConflictError(messages.EMAIL_ALREADY_EXISTS, field="email")

        profile_pic_url = await self._media.upload_optional(PROFILE_FOLDER, profile_pic)

        now = utcnow()
        user = UserDoc(
            name=pending.name,
            email=form.email,
            username=form.username,
            password_hash=hash_password(form.password),
            date_of_birth=pending.date_of_birth,
            profile_pic_url=profile_pic_url,
            bio=form.bio or None,
            status=True,
            role=ROLE_USER,
            created_at=now,
            updated_at=now,
        )
        try:
            user.id = await self._users.insert(user)
        except DuplicateKeyError as e:
            key_pattern = (e.details or {}).get("keyPattern") or {}
            if "username" in key_pattern:
                raise ConflictError(messages.USERNAME_TAKEN, field="username") from e
            raise ConflictError(messages.EMAIL_ALREADY_EXISTS, field="email") from e

        tokens = await self._tokens.issue_pair(user)
        await self._pending.delete_by_email(form.email)
        log.info("user_registered", user_id=str(user.id), email=user.email)
        return user, tokens

    async def check_username(self, username: str) -> UsernameCheckResponse:
        if await self._users.get_by_username(username) is None:
            return UsernameCheckResponse(available=True, suggestions=[])

        candidates = username_candidates(username)
        taken = await self._users.find_taken_usernames(candidates)
        suggestions = [c for c in candidates if c not in taken and validate_username(c)]
        return UsernameCheckResponse(
            available=False, suggestions=suggestions[:MAX_USERNAME_SUGGESTIONS]
        )
