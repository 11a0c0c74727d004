"""Response DTOs for /comment endpoints."""

from __future__ import annotations

from typing import Optional

from schemas.dto.base import CamelModel
from schemas.dto.responses.common import AuthorSnapshot


class CommentResponse(CamelModel):
    id: str
    post_id: str
    parent_id: Optional[str] = None
    text: str
    created_by: Optional[AuthorSnapshot] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None
    likes_count: int = 0
    dislikes_count: int = 0
    has_liked: bool = False
    has_disliked: bool = False
    replies: list["CommentResponse"] = []


class CommentIdResponse(CamelModel):
    comment_id: str


class ReactionResponse(CamelModel):
    likes_count: int
    dislikes_count: int
    has_liked: bool
    has_disliked: bool
