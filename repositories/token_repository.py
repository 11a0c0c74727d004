"""Repositories for `refresh_tokens` and `password_resets`."""

from __future__ import annotations

from typing import Optional

from bson import ObjectId

from repositories.base import BaseRepository
from schemas.models.token import PasswordResetDoc, RefreshTokenDoc


class RefreshTokenRepository(BaseRepository[RefreshTokenDoc]):
    model = RefreshTokenDoc

    async def exists(self, user_id: ObjectId, token_hash: str) -> bool:
        found = await self._col.find_one(
            {"user_id": user_id, "token_hash": token_hash}, projection={"_id": 1}
        )
        return found is not None

    async def delete_token(self, user_id: ObjectId, token_hash: str) -> int:
        result = await self._col.delete_many(
            {"user_id": user_id, "token_hash": token_hash}
        )
        return result.deleted_count

    async def delete_for_user(self, user_id: ObjectId, *, session=None) -> int:
        result = await self._col.delete_many({"user_id": user_id}, session=session)
        return result.deleted_count


class PasswordResetRepository(BaseRepository[PasswordResetDoc]):
    model = PasswordResetDoc

    async def get_by_email(self, email: str) -> Optional[PasswordResetDoc]:
        return self._load(await self._col.find_one({"email": email}))

    async def replace(self, doc: PasswordResetDoc) -> None:
        await self._col.replace_one({"email": doc.email}, doc.to_mongo(), upsert=True)

    async def increment_attempts(self, email: str) -> None:
        await self._col.update_one({"email": email}, {"$inc": {"attempts": 1}})

    async def delete_by_email(self, email: str, *, session=None) -> None:
        await self._col.delete_many({"email": email}, session=session)
