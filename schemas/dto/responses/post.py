"""Response DTOs for /post and /vote endpoints."""

from __future__ import annotations

from typing import Optional

from schemas.dto.base import CamelModel
from schemas.dto.responses.common import AuthorSnapshot, Pagination


class OptionResponse(CamelModel):
    id: str
    post_id: str
    text: str
    image_url: Optional[str] = None
    votes_count: int
    has_voted: bool = False


class PostResponse(CamelModel):
    id: str
    title: str
    description: str = ""
    images: list[str] = []
    created_by: str
    created_at: Optional[int] = None
    updated_at: Optional[int] = None
    user: Optional[AuthorSnapshot] = None
    votes_count: int = 0
    comments_count: int = 0
    has_voted: bool = False


class TrendingPostResponse(PostResponse):
    engagement_score: int = 0


class PostDetailResponse(PostResponse):
    options: list[OptionResponse] = []


class PostListResponse(CamelModel):
    posts: list[PostResponse]
    pagination: Pagination


class TrendingPostsResponse(CamelModel):
    posts: list[TrendingPostResponse]
    pagination: Pagination


class PostIdResponse(CamelModel):
    post_id: str


class RecountResponse(CamelModel):
    """Options whose stored votes_count differed from the votes collection."""

    post_id: str
    corrected: dict[str, int] = {}
