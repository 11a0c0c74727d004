"""Request DTOs for /vote endpoints."""

from __future__ import annotations

from pydantic import Field

from schemas.dto.base import CamelModel


class VoteRequest(CamelModel):
    """Body of POST /vote/create and DELETE /vote/delete."""

    post_id: str = Field(min_length=1)
    option_id: str = Field(min_length=1)
