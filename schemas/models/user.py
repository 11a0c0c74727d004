"""
User document model.

Maps to the `users` MongoDB collection.

Two creation paths produce slightly different shapes:
- OTP registration (step 3): password_hash and username always set
- Social sign-in: password_hash and username are None, auth_provider set

Soft-deleted accounts keep their document with status=False.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class UserDoc(MongoBaseModel):
    """Document model for the `users` collection."""

    name: str
    email: str
    username: Optional[str] = None
    password_hash: Optional[str] = None
    date_of_birth: Optional[str] = None
    profile_pic_url: Optional[str] = None
    bio: Optional[str] = None
    status: bool = True
    role: str = ROLE_USER
    auth_provider: Optional[str] = None
    auth_provider_uid: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
