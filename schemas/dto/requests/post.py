"""
Request DTOs for /post endpoints.

Create and update are multipart: options, deleteImages and deleteOptions
arrive as JSON strings inside text fields and are decoded here. Anything
that does not decode to the expected shape is INVALID_OPTIONS_FORMAT.
"""

from __future__ import annotations

import json
from typing import Any, Literal, Optional

import pydantic
from pydantic import Field

from errors import ValidationError
from schemas.dto.base import CamelModel
from shared import messages


def _decode_json(raw: Optional[str], default: Any) -> Any:
    if raw is None or raw == "":
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        raise ValidationError(messages.INVALID_OPTIONS_FORMAT, field="options") from None


class OptionInput(CamelModel):
    text: str = Field(min_length=1, max_length=200)
    file_name: Optional[str] = None


class OptionUpdateInput(CamelModel):
    """An option in an update: with ``id`` it edits, without it adds."""

    id: Optional[str] = None
    text: Optional[str] = Field(default=None, max_length=200)
    file_name: Optional[str] = None


class CreatePostForm(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    options: list[OptionInput] = []

    @classmethod
    def from_fields(cls, fields: dict[str, str]) -> "CreatePostForm":
        options = _decode_json(fields.get("options"), [])
        if not isinstance(options, list):
            raise ValidationError(messages.INVALID_OPTIONS_FORMAT, field="options")
        try:
            options = [OptionInput.model_validate(o) for o in options]
        except pydantic.ValidationError:
            raise ValidationError(messages.INVALID_OPTIONS_FORMAT, field="options") from None
        return cls.model_validate(
            {
                "title": fields.get("title"),
                "description": fields.get("description") or "",
                "options": options,
            }
        )


class UpdatePostForm(CamelModel):
    title: Optional[str] = Field(default=None, max_length=200)
    # None leaves the description unchanged; "" clears it
    description: Optional[str] = Field(default=None, max_length=2000)
    options: list[OptionUpdateInput] = []
    delete_images: list[str] = []
    delete_options: list[str] = []

    @classmethod
    def from_fields(cls, fields: dict[str, str]) -> "UpdatePostForm":
        decoded = {
            "options": _decode_json(fields.get("options"), []),
            "delete_images": _decode_json(fields.get("deleteImages"), []),
            "delete_options": _decode_json(fields.get("deleteOptions"), []),
        }
        if not all(isinstance(v, list) for v in decoded.values()):
            raise ValidationError(messages.INVALID_OPTIONS_FORMAT, field="options")
        try:
            options = [OptionUpdateInput.model_validate(o) for o in decoded["options"]]
        except pydantic.ValidationError:
            raise ValidationError(messages.INVALID_OPTIONS_FORMAT, field="options") from None
        return cls.model_validate(
            {
                "title": fields.get("title") or None,
                "description": fields.get("description"),
                "options": options,
                "delete_images": decoded["delete_images"],
                "delete_options": decoded["delete_options"],
            }
        )

    @property
    def is_empty(self) -> bool:
        return (
            self.title is None
            and self.description is None
            and not self.options
            and not self.delete_images
            and not self.delete_options
        )


class PostListQuery(CamelModel):
    """Query string of GET /post/get."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    sort_by: Literal["createdAt", "title"] = "createdAt"
    order: Literal["asc", "desc"] = "desc"
    search: Optional[str] = None
    uid: Optional[str] = None
    all: bool = False
