"""
Repository base class.

Each repository wraps one pymongo AsyncCollection and exposes only the
operations the services need; services never build raw queries. Every
method accepts an optional ``session`` so multi-collection work can run
inside a transaction (see repositories.transactions).
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from bson import ObjectId
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.base import MongoBaseModel

DocT = TypeVar("DocT", bound=MongoBaseModel)


class BaseRepository(Generic[DocT]):
    model: type[MongoBaseModel]

    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    def _load(self, raw: Optional[dict]) -> Optional[DocT]:
        return self.model.from_mongo(raw)  # type: ignore[return-value]

    async def _find(
        self,
        query: dict[str, Any],
        *,
        sort: Optional[list[tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
        session=None,
    ) -> list[DocT]:
        cursor = self._col.find(query, session=session)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [self._load(raw) for raw in await cursor.to_list()]

    async def get_by_id(self, doc_id: ObjectId, *, session=None) -> Optional[DocT]:
        return self._load(await self._col.find_one({"_id": doc_id}, session=session))

    async def insert(self, doc: DocT, *, session=None) -> ObjectId:
        result = await self._col.insert_one(doc.to_mongo(), session=session)
        return result.inserted_id

    async def delete_by_id(self, doc_id: ObjectId, *, session=None) -> bool:
        result = await self._col.delete_one({"_id": doc_id}, session=session)
        return result.deleted_count > 0
