"""Request DTOs for /comment endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from schemas.dto.base import CamelModel

COMMENT_MAX_LENGTH = 1000


class CreateCommentRequest(CamelModel):
    post_id: str = Field(min_length=1)
    text: str = Field(min_length=1, max_length=COMMENT_MAX_LENGTH)
    parent_id: Optional[str] = None


class UpdateCommentRequest(CamelModel):
    """An empty or missing ``text`` keeps the current text."""

    text: Optional[str] = Field(default=None, max_length=COMMENT_MAX_LENGTH)
