"""Repositories for `posts` and `options`."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId

from repositories.base import BaseRepository
from schemas.models.post import OptionDoc, PostDoc
from shared.validators import prefix_range


def post_filter(
    *,
    created_by: Optional[ObjectId] = None,
    title_prefix: Optional[str] = None,
    created_since: Optional[datetime] = None,
) -> dict[str, Any]:
    query: dict[str, Any] = {}
    if created_by is not None:
        query["created_by"] = created_by
    if title_prefix:
        query["title"] = prefix_range(title_prefix)
    if created_since is not None:
        query["created_at"] = {"$gte": created_since}
    return query


class PostRepository(BaseRepository[PostDoc]):
    model = PostDoc

    async def list(
        self,
        query: dict[str, Any],
        *,
        sort_field: str = "created_at",
        direction: int = -1,
        skip: int = 0,
        limit: int = 0,
    ) -> list[PostDoc]:
        return await self._find(
            query, sort=[(sort_field, direction)], skip=skip, limit=limit
        )

    async def count(self, query: dict[str, Any]) -> int:
        return await self._col.count_documents(query)

    async def list_by_author(self, user_id: ObjectId, *, session=None) -> list[PostDoc]:
        return await self._find({"created_by": user_id}, session=session)

    async def update_fields(self, post_id: ObjectId, fields: dict[str, Any]) -> None:
        await self._col.update_one({"_id": post_id}, {"$set": fields})

    async def delete_many_by_ids(self, post_ids: list[ObjectId], *, session=None) -> int:
        if not post_ids:
            return 0
        result = await self._col.delete_many({"_id": {"$in": post_ids}}, session=session)
        return result.deleted_count


class OptionRepository(BaseRepository[OptionDoc]):
    model = OptionDoc

    async def list_for_post(self, post_id: ObjectId) -> list[OptionDoc]:
        return await self._find({"post_id": post_id}, sort=[("_id", 1)])

    async def list_for_posts(self, post_ids: list[ObjectId], *, session=None) -> list[OptionDoc]:
        return await self._find({"post_id": {"$in": post_ids}}, session=session)

    async def update_fields(self, option_id: ObjectId, fields: dict[str, Any]) -> None:
        await self._col.update_one({"_id": option_id}, {"$set": fields})

    async def increment_votes(self, option_id: ObjectId, amount: int) -> None:
        """Atomically move the denormalized vote counter by *amount*."""
        await self._col.update_one(
            {"_id": option_id}, {"$inc": {"votes_count": amount}}
        )

    async def set_votes_count(self, option_id: ObjectId, count: int) -> None:
        await self._col.update_one(
            {"_id": option_id}, {"$set": {"votes_count": count}}
        )

    async def delete_for_posts(self, post_ids: list[ObjectId], *, session=None) -> int:
        if not post_ids:
            return 0
        result = await self._col.delete_many(
            {"post_id": {"$in": post_ids}}, session=session
        )
        return result.deleted_count
