"""Repository for the `comments` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId

from repositories.base import BaseRepository
from schemas.models.comment import CommentDoc


class CommentRepository(BaseRepository[CommentDoc]):
    model = CommentDoc

    async def list_for_post(self, post_id: ObjectId) -> list[CommentDoc]:
        """All comments of a post, oldest first (roots and replies alike)."""
        return await self._find(
            {"post_id": post_id}, sort=[("created_at", 1), ("_id", 1)]
        )

    async def child_ids(self, parent_ids: list[ObjectId], *, session=None) -> list[ObjectId]:
        cursor = self._col.find(
            {"parent_id": {"$in": parent_ids}}, projection={"_id": 1}, session=session
        )
        return [raw["_id"] for raw in await cursor.to_list()]

    async def list_by_author(self, user_id: ObjectId, *, session=None) -> list[CommentDoc]:
        return await self._find({"created_by": user_id}, session=session)

    async def count_for_post(
        self, post_id: ObjectId, since: Optional[datetime] = None
    ) -> int:
        query: dict[str, Any] = {"post_id": post_id}
        if since is not None:
            query["created_at"] = {"$gte": since}
        return await self._col.count_documents(query)

    async def update_text(self, comment_id: ObjectId, text: str, now: datetime) -> None:
        await self._col.update_one(
            {"_id": comment_id}, {"$set": {"text": text, "updated_at": now}}
        )

    async def add_reply(self, parent_id: ObjectId, reply_id: ObjectId) -> None:
        await self._col.update_one(
            {"_id": parent_id}, {"$addToSet": {"replies": reply_id}}
        )

    async def remove_reply(
        self, parent_id: ObjectId, reply_id: ObjectId, *, session=None
    ) -> None:
        await self._col.update_one(
            {"_id": parent_id}, {"$pull": {"replies": reply_id}}, session=session
        )

    async def apply_reaction(
        self, comment_id: ObjectId, guard: dict[str, Any], update: dict[str, Any]
    ) -> bool:
        """Apply a planned like/dislike update if *guard* still holds.

        Returns False when the document changed since the plan was made, in
        which case nothing was written.
        """
        result = await self._col.update_one({"_id": comment_id, **guard}, update)
        return result.modified_count > 0

    async def delete_many_by_ids(self, comment_ids: list[ObjectId], *, session=None) -> int:
        if not comment_ids:
            return 0
        result = await self._col.delete_many(
            {"_id": {"$in": comment_ids}}, session=session
        )
        return result.deleted_count

    async def delete_for_posts(self, post_ids: list[ObjectId], *, session=None) -> int:
        if not post_ids:
            return 0
        result = await self._col.delete_many(
            {"post_id": {"$in": post_ids}}, session=session
        )
        return result.deleted_count
