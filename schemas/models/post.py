"""
Post and option document models.

PostDoc   — `posts`
OptionDoc — `options`; one per voteable choice. votes_count is a
            denormalized counter changed only with $inc alongside vote
            insert/delete (see repositories.post_repository).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel, PyObjectId


class PostDoc(MongoBaseModel):
    """Document model for the `posts` collection."""

    title: str
    description: str = ""
    images: list[str] = []
    created_by: PyObjectId
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OptionDoc(MongoBaseModel):
    """Document model for the `options` collection."""

    post_id: PyObjectId
    text: str
    image_url: Optional[str] = None
    votes_count: int = 0
