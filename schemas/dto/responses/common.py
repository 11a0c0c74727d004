"""
Common response DTOs shared across endpoints.

Every route answers with the same envelope:

    success → {"status": true,  "message": "...", "data": ...}
    failure → {"status": false, "message": "...", "code": "...", "data": ...}

Routes build the success shape with envelope(); errors.py builds failures.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from schemas.dto.base import CamelModel


class SuccessResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: bool = True
    message: str
    data: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Standard error JSON body produced by AppError.to_dict()."""

    model_config = ConfigDict(populate_by_name=True)

    status: bool = False
    message: str
    code: str
    data: Optional[Any] = None
    field: Optional[str] = None


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str
    checks: dict[str, str]


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_posts: int
    page_size: int

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "Pagination":
        return cls(
            current_page=page,
            total_pages=-(-total // page_size) if page_size else 0,
            total_posts=total,
            page_size=page_size,
        )


class AuthorSnapshot(CamelModel):
    """Public author fields embedded in posts and comments."""

    id: str
    name: Optional[str] = None
    profile_pic_url: Optional[str] = None


def envelope(message: str, data: Any = None) -> SuccessResponse:
    return SuccessResponse(message=message, data=data)
