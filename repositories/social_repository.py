"""Repositories for `follows`, `likes` (profile likes) and `subscriptions`."""

from __future__ import annotations

from typing import Optional

from bson import ObjectId

from repositories.base import BaseRepository
from schemas.models.social import FollowDoc, ProfileLikeDoc, SubscriptionDoc


class _EdgeRepository(BaseRepository):
    """Directed user → user edges keyed by (source_field, target_field)."""

    source_field: str
    target_field: str

    async def find_edge(self, source_id: ObjectId, target_id: ObjectId):
        return self._load(
            await self._col.find_one(
                {self.source_field: source_id, self.target_field: target_id}
            )
        )

    async def count_for_target(self, target_id: ObjectId) -> int:
        return await self._col.count_documents({self.target_field: target_id})

    async def count_for_source(self, source_id: ObjectId) -> int:
        return await self._col.count_documents({self.source_field: source_id})

    async def targets_of(
        self, source_id: ObjectId, target_ids: list[ObjectId]
    ) -> set[ObjectId]:
        """Which of *target_ids* have an edge from *source_id*."""
        if not target_ids:
            return set()
        cursor = self._col.find(
            {self.source_field: source_id, self.target_field: {"$in": target_ids}},
            projection={self.target_field: 1},
        )
        return {raw[self.target_field] for raw in await cursor.to_list()}

    async def delete_touching(self, user_id: ObjectId, *, session=None) -> int:
        """Delete every edge where *user_id* is either end."""
        result = await self._col.delete_many(
            {"$or": [{self.source_field: user_id}, {self.target_field: user_id}]},
            session=session,
        )
        return result.deleted_count


class FollowRepository(_EdgeRepository):
    model = FollowDoc
    source_field = "follower_id"
    target_field = "following_id"


class ProfileLikeRepository(_EdgeRepository):
    model = ProfileLikeDoc
    source_field = "user_id"
    target_field = "target_user_id"


class SubscriptionRepository(BaseRepository[SubscriptionDoc]):
    model = SubscriptionDoc

    async def get_by_email(self, email: str) -> Optional[SubscriptionDoc]:
        return self._load(await self._col.find_one({"email": email}))
