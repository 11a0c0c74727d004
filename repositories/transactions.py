"""Optional MongoDB transactions for multi-collection writes."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from pymongo.asynchronous.mongo_client import AsyncMongoClient
from pymongo.asynchronous.client_session import AsyncClientSession


class TransactionManager:
    """Yields a session bound to a transaction, or None when disabled.

    Transactions need a replica set, so they are opt-in through
    ``MONGODB_TRANSACTIONS``. Without them each write is still atomic on its
    own document.
    """

    def __init__(self, client: Optional[AsyncMongoClient], enabled: bool) -> None:
        self._client = client
        self._enabled = enabled and client is not None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Optional[AsyncClientSession]]:
        if not self._enabled:
            yield None
            return
        async with self._client.start_session() as session:
            async with await session.start_transaction():
                yield session
