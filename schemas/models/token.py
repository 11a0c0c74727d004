"""
Token document models.

RefreshTokenDoc   — `refresh_tokens`: one row per issued refresh token so
                    logout can revoke it. token_hash = SHA-256(token).
PasswordResetDoc  — `password_resets`: one pending reset code per email.
                    otp_hash = SHA-256(otp); attempts counts wrong codes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.models.base import MongoBaseModel, PyObjectId


class RefreshTokenDoc(MongoBaseModel):
    """Document model for the `refresh_tokens` collection."""

    token_hash: str
    user_id: PyObjectId
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class PasswordResetDoc(MongoBaseModel):
    """Document model for the `password_resets` collection."""

    email: str
    user_id: PyObjectId
    otp_hash: str
    expires_at: datetime
    attempts: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None
