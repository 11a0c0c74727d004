"""Repository for the `users` collection."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from bson import ObjectId

from repositories.base import BaseRepository
from schemas.models.user import UserDoc
from shared.validators import prefix_range


class UserRepository(BaseRepository[UserDoc]):
    model = UserDoc

    async def get_by_email(self, email: str) -> Optional[UserDoc]:
        return self._load(await self._col.find_one({"email": email}))

    async def get_by_username(self, username: str) -> Optional[UserDoc]:
        return self._load(await self._col.find_one({"username": username}))

    async def get_many(self, user_ids: Iterable[ObjectId]) -> dict[ObjectId, UserDoc]:
        ids = list({uid for uid in user_ids if uid is not None})
        if not ids:
            return {}
        users = await self._find({"_id": {"$in": ids}})
        return {user.id: user for user in users}

    async def find_taken_usernames(self, candidates: list[str]) -> set[str]:
        """Return the subset of *candidates* already used, in one ``$in`` query."""
        if not candidates:
            return set()
        cursor = self._col.find(
            {"username": {"$in": candidates}}, projection={"username": 1}
        )
        return {raw["username"] for raw in await cursor.to_list()}

    async def search_prefix(self, field: str, query: str, limit: int = 20) -> list[UserDoc]:
        return await self._find(
            {field: prefix_range(query), "status": True}, limit=limit
        )

    async def list_active_except(self, user_id: ObjectId, limit: int = 10) -> list[UserDoc]:
        return await self._find(
            {"_id": {"$ne": user_id}, "status": True},
            sort=[("created_at", -1)],
            limit=limit,
        )

    async def update_fields(
        self, user_id: ObjectId, fields: dict[str, Any], *, session=None
    ) -> None:
        await self._col.update_one({"_id": user_id}, {"$set": fields}, session=session)
