"""Index creation, run once at startup from the app lifespan."""

from __future__ import annotations

from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.database import AsyncDatabase

from shared.logging import get_logger

log = get_logger(__name__)


async def ensure_indexes(db: AsyncDatabase) -> None:
    await db["users"].create_index([("email", ASCENDING)], unique=True)
    # Social sign-in users store username=None; only strings must be unique
    await db["users"].create_index(
        [("username", ASCENDING)],
        unique=True,
        partialFilterExpression={"username": {"$type": "string"}},
    )
    await db["users"].create_index([("name", ASCENDING)])

    await db["temp_users"].create_index([("email", ASCENDING)], unique=True)
    await db["password_resets"].create_index([("email", ASCENDING)], unique=True)

    await db["refresh_tokens"].create_index(
        [("user_id", ASCENDING), ("token_hash", ASCENDING)]
    )
    # TTL: MongoDB drops refresh rows once expires_at passes
    await db["refresh_tokens"].create_index(
        [("expires_at", ASCENDING)], expireAfterSeconds=0
    )

    await db["posts"].create_index([("created_by", ASCENDING), ("created_at", DESCENDING)])
    await db["posts"].create_index([("created_at", DESCENDING)])
    await db["posts"].create_index([("title", ASCENDING)])
    await db["options"].create_index([("post_id", ASCENDING)])

    await db["votes"].create_index(
        [("post_id", ASCENDING), ("user_id", ASCENDING)], unique=True
    )
    await db["votes"].create_index([("option_id", ASCENDING)])

    await db["comments"].create_index([("post_id", ASCENDING), ("created_at", ASCENDING)])
    await db["comments"].create_index([("parent_id", ASCENDING)])

    await db["follows"].create_index(
        [("follower_id", ASCENDING), ("following_id", ASCENDING)], unique=True
    )
    await db["follows"].create_index([("following_id", ASCENDING)])
    await db["likes"].create_index(
        [("user_id", ASCENDING), ("target_user_id", ASCENDING)], unique=True
    )
    await db["likes"].create_index([("target_user_id", ASCENDING)])
    await db["subscriptions"].create_index([("email", ASCENDING)], unique=True)

    log.info("mongo_indexes_ensured")
