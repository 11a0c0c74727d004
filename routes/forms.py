"""Multipart helpers shared by routes that accept file uploads."""

from __future__ import annotations

from fastapi import Request

from config import AppSettings
from shared.uploads import ParsedForm, collect_form


async def read_multipart(request: Request, settings: AppSettings) -> ParsedForm:
    """Read the request form, validating every file against the upload limits."""
    form = await request.form()
    return await collect_form(
        form,
        max_bytes=settings.uploads.max_upload_bytes,
        allowed_types=settings.uploads.allowed_upload_types,
    )
