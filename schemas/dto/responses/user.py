"""Response DTOs for /user endpoints."""

from __future__ import annotations

from typing import Optional

from schemas.dto.base import CamelModel
from schemas.models.user import UserDoc
from shared.datetime_utils import to_millis


class PublicUser(CamelModel):
    id: str
    name: str
    username: Optional[str] = None
    profile_pic_url: Optional[str] = None

    @classmethod
    def from_doc(cls, user: UserDoc) -> "PublicUser":
        return cls(
            id=str(user.id),
            name=user.name,
            username=user.username,
            profile_pic_url=user.profile_pic_url,
        )


class UserSearchItem(PublicUser):
    is_following: bool = False


class ProfileUser(PublicUser):
    email: Optional[str] = None
    date_of_birth: Optional[str] = None
    bio: Optional[str] = None
    created_at: Optional[int] = None

    @classmethod
    def from_doc(cls, user: UserDoc, *, include_email: bool = False) -> "ProfileUser":
        return cls(
            id=str(user.id),
            name=user.name,
            username=user.username,
            profile_pic_url=user.profile_pic_url,
            email=user.email if include_email else None,
            date_of_birth=user.date_of_birth,
            bio=user.bio,
            created_at=to_millis(user.created_at),
        )


class ProfileResponse(CamelModel):
    user: ProfileUser
    followers_count: int
    following_count: int
    likes_count: int
    is_following: bool = False
    has_liked: bool = False


class FollowToggleResponse(CamelModel):
    following: bool


class LikeToggleResponse(CamelModel):
    liked: bool
