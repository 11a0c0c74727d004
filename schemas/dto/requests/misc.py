"""Request DTOs for /misc endpoints."""

from __future__ import annotations

from schemas.dto.base import CamelModel
from schemas.dto.requests.fields import Email


class SubscribeRequest(CamelModel):
    email: Email
