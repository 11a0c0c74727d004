"""
Pending registration document model.

Maps to the `temp_users` MongoDB collection: one document per email that
has started OTP registration and not yet finished step 3. Step 1 replaces
the whole document, so a repeated step 1 starts over with
otp_verified=False and otp_sent_count=1.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.models.base import MongoBaseModel


class PendingRegistrationDoc(MongoBaseModel):
    """Document model for the `temp_users` collection."""

    email: str
    name: str
    date_of_birth: str
    otp_hash: str
    otp_expires_at: datetime
    otp_sent_count: int = Field(default=1, ge=0)
    otp_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
