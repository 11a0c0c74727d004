"""
Social edge document models.

FollowDoc       — `follows`: directed follower → following edge
ProfileLikeDoc  — `likes`: user → target user profile like
SubscriptionDoc — `subscriptions`: newsletter sign-ups
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel, PyObjectId


class FollowDoc(MongoBaseModel):
    follower_id: PyObjectId
    following_id: PyObjectId
    followed_at: Optional[datetime] = None


class ProfileLikeDoc(MongoBaseModel):
    user_id: PyObjectId
    target_user_id: PyObjectId
    liked_at: Optional[datetime] = None


class SubscriptionDoc(MongoBaseModel):
    email: str
    created_at: Optional[datetime] = None
