"""
JWT issuance and verification.

Access tokens carry {uid, email, role, type="access"} and live one hour.
Refresh tokens carry {uid, email, type="refresh", jti}, are signed with a
separate secret and are persisted (hashed) so logout can revoke them.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import jwt

from config import JWTSettings
from repositories.token_repository import RefreshTokenRepository
from schemas.models.base import parse_object_id
from schemas.models.token import RefreshTokenDoc
from schemas.models.user import ROLE_ADMIN, ROLE_USER, UserDoc
from shared.crypto import hash_token
from shared.datetime_utils import utcnow


@dataclass(frozen=True)
class AuthContext:
    """Decoded access-token claims attached to an authenticated request."""

    uid: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService:
    def __init__(
        self, settings: JWTSettings, refresh_tokens: RefreshTokenRepository
    ) -> None:
        self._settings = settings
        self._refresh_tokens = refresh_tokens

    def issue_access_token(self, user: UserDoc) -> str:
        now = utcnow()
        payload = {
            "uid": str(user.id),
            "email": user.email,
            "role": user.role,
            "type": "access",
            "iat": now,
            "exp": now + timedelta(seconds=self._settings.access_token_ttl_seconds),
        }
        return jwt.encode(
            payload, self._settings.jwt_secret, algorithm=self._settings.jwt_algorithm
        )

    async def issue_refresh_token(self, user: UserDoc) -> str:
        now = utcnow()
        expires_at = now + timedelta(seconds=self._settings.refresh_token_ttl_seconds)
        payload = {
            "uid": str(user.id),
            "email": user.email,
            "type": "refresh",
            # Two tokens minted in the same second must still differ
            "jti": secrets.token_hex(16),
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(
            payload,
            self._settings.jwt_refresh_secret,
            algorithm=self._settings.jwt_algorithm,
        )
        await self._refresh_tokens.insert(
            RefreshTokenDoc(
                token_hash=hash_token(token),
                user_id=user.id,
                created_at=now,
                expires_at=expires_at,
            )
        )
        return token

    async def issue_pair(self, user: UserDoc) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(user),
            refresh_token=await self.issue_refresh_token(user),
        )

    def decode_access_token(self, token: str) -> Optional[AuthContext]:
        """Return the claims of a valid access token, or None."""
        try:
            payload = jwt.decode(
                token,
                self._settings.jwt_secret,
                algorithms=[self._settings.jwt_algorithm],
                options={"require": ["exp", "uid"]},
            )
        except jwt.PyJWTError:
            return None
        if payload.get("type") != "access":
            return None
        return AuthContext(
            uid=payload["uid"],
            email=payload.get("email", ""),
            role=payload.get("role", ROLE_USER),
        )

    def decode_refresh_token(self, token: str) -> Optional[dict]:
        """Return the payload of a validly signed refresh token, or None.

        Signature and expiry only; revocation is checked by is_refresh_token_active().
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.jwt_refresh_secret,
                algorithms=[self._settings.jwt_algorithm],
                options={"require": ["exp", "uid"]},
            )
        except jwt.PyJWTError:
            return None
        if payload.get("type") != "refresh":
            return None
        return payload

    async def is_refresh_token_active(self, uid: str, token: str) -> bool:
        user_id = parse_object_id(uid)
        if user_id is None:
            return False
        return await self._refresh_tokens.exists(user_id, hash_token(token))

    async def revoke_refresh_token(self, uid: str, token: str) -> int:
        user_id = parse_object_id(uid)
        if user_id is None:
            return 0
        return await self._refresh_tokens.delete_token(user_id, hash_token(token))

    async def revoke_all(self, user_id, *, session=None) -> int:
        return await self._refresh_tokens.delete_for_user(user_id, session=session)
