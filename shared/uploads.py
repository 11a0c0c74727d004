"""
Multipart upload handling.

Routes accepting files read the whole form with ``await request.form()``
because file field names are client-chosen (option images are keyed by a
``fileName`` the client sends in the options JSON). collect_form() splits
the form into plain text fields and validated in-memory files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Sequence

from starlette.datastructures import FormData, UploadFile

from errors import ValidationError
from shared import messages


@dataclass(frozen=True)
class UploadedFile:
    """A validated file read fully into memory."""

    field_name: str
    filename: str
    content_type: str
    data: bytes

    @property
    def extension(self) -> str:
        ext = os.path.splitext(self.filename or "")[1].lower()
        if ext:
            return ext
        return ".png" if self.content_type == "image/png" else ".jpg"


@dataclass
class ParsedForm:
    fields: dict[str, str] = field(default_factory=dict)
    files: dict[str, list[UploadedFile]] = field(default_factory=dict)

    def file(self, name: str) -> UploadedFile | None:
        """First file uploaded under field *name*, if any."""
        found = self.files.get(name)
        return found[0] if found else None

    def files_for(self, name: str) -> list[UploadedFile]:
        return list(self.files.get(name, []))


async def collect_form(
    form: FormData,
    *,
    max_bytes: int,
    allowed_types: Sequence[str],
) -> ParsedForm:
    """Validate every file in *form* and return fields and files separately.

    Raises:
        ValidationError: a file is larger than *max_bytes* or its MIME type
            is not in *allowed_types*.
    """
    parsed = ParsedForm()
    for name, value in form.multi_items():
        if isinstance(value, UploadFile):
            if not value.filename:
                # Empty file inputs arrive as nameless parts
                continue
            if value.content_type not in allowed_types:
                raise ValidationError(messages.INVALID_FILE_TYPE, field=name)
            data = await value.read(max_bytes + 1)
            if len(data) > max_bytes:
                raise ValidationError(messages.FILE_TOO_LARGE, field=name)
            parsed.files.setdefault(name, []).append(
                UploadedFile(
                    field_name=name,
                    filename=value.filename,
                    content_type=value.content_type,
                    data=data,
                )
            )
        else:
            parsed.fields[name] = value
    return parsed
