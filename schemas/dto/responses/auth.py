"""
Response DTOs for authentication and account endpoints.

UserResponse           — the caller's own account (registration, login)
AuthTokensResponse     — register-step3, login, social sign-in
AccessTokenResponse    — refresh-token
UsernameCheckResponse  — check-username
"""

from __future__ import annotations

from typing import Optional

from schemas.dto.base import CamelModel
from schemas.models.user import UserDoc
from shared.datetime_utils import to_millis


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    username: Optional[str] = None
    date_of_birth: Optional[str] = None
    profile_pic_url: Optional[str] = None
    bio: Optional[str] = None
    role: str
    created_at: Optional[int] = None

    @classmethod
    def from_doc(cls, user: UserDoc) -> "UserResponse":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            username=user.username,
            date_of_birth=user.date_of_birth,
            profile_pic_url=user.profile_pic_url,
            bio=user.bio,
            role=user.role,
            created_at=to_millis(user.created_at),
        )


class AuthTokensResponse(CamelModel):
    access_token: str
    refresh_token: str
    user: UserResponse


class AccessTokenResponse(CamelModel):
    access_token: str


class UsernameCheckResponse(CamelModel):
    available: bool
    suggestions: list[str] = []
