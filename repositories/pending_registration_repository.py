"""Repository for the `temp_users` collection (OTP registration in progress)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from repositories.base import BaseRepository
from schemas.models.pending_registration import PendingRegistrationDoc


class PendingRegistrationRepository(BaseRepository[PendingRegistrationDoc]):
    model = PendingRegistrationDoc

    async def get_by_email(self, email: str) -> Optional[PendingRegistrationDoc]:
        return self._load(await self._col.find_one({"email": email}))

    async def upsert(self, doc: PendingRegistrationDoc) -> None:
        """Replace the whole record for ``doc.email``, creating it if needed."""
        await self._col.replace_one({"email": doc.email}, doc.to_mongo(), upsert=True)

    async def mark_verified(self, email: str, now: datetime) -> None:
        await self._col.update_one(
            {"email": email}, {"$set": {"otp_verified": True, "updated_at": now}}
        )

    async def record_resend(
        self, email: str, otp_hash: str, expires_at: datetime, now: datetime
    ) -> None:
        await self._col.update_one(
            {"email": email},
            {
                "$set": {
                    "otp_hash": otp_hash,
                    "otp_expires_at": expires_at,
                    "updated_at": now,
                },
                "$inc": {"otp_sent_count": 1},
            },
        )

    async def delete_by_email(self, email: str, *, session=None) -> None:
        await self._col.delete_many({"email": email}, session=session)
