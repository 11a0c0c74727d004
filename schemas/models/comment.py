"""
Comment document model.

Maps to the `comments` MongoDB collection. Comments form a tree through
parent_id (None for a root comment); `replies` is the denormalized list of
child ids kept in sync on reply create/delete.

A user id appears in at most one of `likes` / `dislikes`, and
likes_count / dislikes_count move in the same update as the arrays.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel, PyObjectId


class CommentDoc(MongoBaseModel):
    """Document model for the `comments` collection."""

    post_id: PyObjectId
    parent_id: Optional[PyObjectId] = None
    text: str
    created_by: PyObjectId
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    likes: list[PyObjectId] = []
    dislikes: list[PyObjectId] = []
    likes_count: int = 0
    dislikes_count: int = 0
    replies: list[PyObjectId] = []
