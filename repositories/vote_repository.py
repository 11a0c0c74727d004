"""Repository for the `votes` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId

from repositories.base import BaseRepository
from schemas.models.vote import VoteDoc


class VoteRepository(BaseRepository[VoteDoc]):
    model = VoteDoc

    async def find_user_vote(
        self, post_id: ObjectId, user_id: ObjectId, option_id: Optional[ObjectId] = None
    ) -> Optional[VoteDoc]:
        query: dict[str, Any] = {"post_id": post_id, "user_id": user_id}
        if option_id is not None:
            query["option_id"] = option_id
        return self._load(await self._col.find_one(query))

    async def voted_post_ids(
        self, user_id: ObjectId, post_ids: list[ObjectId]
    ) -> set[ObjectId]:
        if not post_ids:
            return set()
        cursor = self._col.find(
            {"user_id": user_id, "post_id": {"$in": post_ids}},
            projection={"post_id": 1},
        )
        return {raw["post_id"] for raw in await cursor.to_list()}

    async def count_for_post(
        self, post_id: ObjectId, since: Optional[datetime] = None
    ) -> int:
        query: dict[str, Any] = {"post_id": post_id}
        if since is not None:
            query["created_at"] = {"$gte": since}
        return await self._col.count_documents(query)

    async def count_for_option(self, option_id: ObjectId) -> int:
        return await self._col.count_documents({"option_id": option_id})

    async def delete_for_option(self, option_id: ObjectId) -> int:
        result = await self._col.delete_many({"option_id": option_id})
        return result.deleted_count

    async def delete_for_posts(self, post_ids: list[ObjectId], *, session=None) -> int:
        if not post_ids:
            return 0
        result = await self._col.delete_many(
            {"post_id": {"$in": post_ids}}, session=session
        )
        return result.deleted_count
