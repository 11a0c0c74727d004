"""Repository writes run against mongomock instead of call assertions.

mongomock evaluates the query and update operators and enforces unique
indexes, so the guarded reaction update and the indexes created at startup
are checked for their effect on stored documents. The async collection
API is bridged onto mongomock's synchronous one.
"""

import mongomock
import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from repositories.comment_repository import CommentRepository
from repositories.indexes import ensure_indexes
from schemas.models.comment import CommentDoc
from services.comment_service import DISLIKE, LIKE, plan_reaction
from shared.datetime_utils import utcnow


class AsyncCollection:
    def __init__(self, collection: mongomock.Collection) -> None:
        self.sync = collection

    async def find_one(self, query, session=None):
        return self.sync.find_one(query)

    async def insert_one(self, doc, session=None):
        return self.sync.insert_one(doc)

    async def update_one(self, query, update, session=None):
        return self.sync.update_one(query, update)

    async def create_index(self, keys, session=None, **kwargs):
        return self.sync.create_index(keys, **kwargs)


class AsyncDatabase:
    def __init__(self, db: mongomock.Database) -> None:
        self.sync = db

    def __getitem__(self, name: str) -> AsyncCollection:
        return AsyncCollection(self.sync[name])


@pytest.fixture
def db():
    return AsyncDatabase(mongomock.MongoClient(tz_aware=True)["wsid_test"])


# ---------------------------------------------------------------------------
# Guarded reaction updates
# ---------------------------------------------------------------------------


class TestReactionUpdates:
    @pytest.fixture
    def comments(self, db):
        return CommentRepository(db["comments"])

    @pytest.fixture
    async def comment(self, comments):
        doc = CommentDoc(
            post_id=ObjectId(), text="Nice one", created_by=ObjectId(), created_at=utcnow()
        )
        comment_id = await comments.insert(doc)
        return await comments.get_by_id(comment_id)

    async def _react(self, comments, comment_id, user_id, reaction) -> bool:
        current = await comments.get_by_id(comment_id)
        plan = plan_reaction(current, user_id, reaction)
        return await comments.apply_reaction(comment_id, plan.guard, plan.update)

    @staticmethod
    def _assert_counts_match(doc: CommentDoc) -> None:
        assert doc.likes_count == len(doc.likes)
        assert doc.dislikes_count == len(doc.dislikes)
        assert not set(doc.likes) & set(doc.dislikes)

    async def test_like_switch_and_undo(self, comments, comment):
        alice, bob = ObjectId(), ObjectId()

        assert await self._react(comments, comment.id, alice, LIKE)
        assert await self._react(comments, comment.id, bob, LIKE)
        stored = await comments.get_by_id(comment.id)
        assert stored.likes == [alice, bob]
        self._assert_counts_match(stored)

        assert await self._react(comments, comment.id, alice, DISLIKE)
        stored = await comments.get_by_id(comment.id)
        assert (stored.likes, stored.dislikes) == ([bob], [alice])
        self._assert_counts_match(stored)

        assert await self._react(comments, comment.id, alice, DISLIKE)
        stored = await comments.get_by_id(comment.id)
        assert (stored.likes_count, stored.dislikes_count) == (1, 0)
        self._assert_counts_match(stored)

    async def test_stale_plan_writes_nothing(self, comments, comment):
        alice = ObjectId()
        stale = plan_reaction(comment, alice, LIKE)

        assert await comments.apply_reaction(comment.id, stale.guard, stale.update)
        assert not await comments.apply_reaction(comment.id, stale.guard, stale.update)

        stored = await comments.get_by_id(comment.id)
        assert stored.likes == [alice]
        assert stored.likes_count == 1

    async def test_stale_switch_after_concurrent_undo(self, comments, comment):
        alice = ObjectId()
        await self._react(comments, comment.id, alice, LIKE)
        liked = await comments.get_by_id(comment.id)
        switch = plan_reaction(liked, alice, DISLIKE)

        # another request removed the like in between
        await self._react(comments, comment.id, alice, LIKE)
        assert not await comments.apply_reaction(comment.id, switch.guard, switch.update)

        stored = await comments.get_by_id(comment.id)
        assert (stored.likes, stored.dislikes) == ([], [])
        self._assert_counts_match(stored)


# ---------------------------------------------------------------------------
# Indexes created at startup
# ---------------------------------------------------------------------------


class TestIndexes:
    @pytest.fixture
    async def indexed(self, db):
        await ensure_indexes(db)
        return db.sync

    async def test_one_vote_per_user_and_post(self, indexed):
        post_id, user_id = ObjectId(), ObjectId()
        indexed["votes"].insert_one({"post_id": post_id, "user_id": user_id, "option_id": ObjectId()})
        with pytest.raises(DuplicateKeyError):
            indexed["votes"].insert_one(
                {"post_id": post_id, "user_id": user_id, "option_id": ObjectId()}
            )
        indexed["votes"].insert_one({"post_id": ObjectId(), "user_id": user_id, "option_id": ObjectId()})

    @pytest.mark.parametrize(
        "collection, doc",
        [
            ("users", {"email": "a@example.com", "username": "alice"}),
            ("temp_users", {"email": "a@example.com"}),
            ("password_resets", {"email": "a@example.com"}),
            ("subscriptions", {"email": "a@example.com"}),
        ],
        ids=["users", "temp_users", "password_resets", "subscriptions"],
    )
    async def test_unique_email(self, indexed, collection, doc):
        indexed[collection].insert_one(dict(doc))
        with pytest.raises(DuplicateKeyError):
            indexed[collection].insert_one(dict(doc))

    async def test_username_unique_only_when_set(self, indexed):
        users = indexed["users"]
        users.insert_one({"email": "a@example.com", "username": None})
        users.insert_one({"email": "b@example.com", "username": None})
        users.insert_one({"email": "c@example.com", "username": "carol"})
        with pytest.raises(DuplicateKeyError):
            users.insert_one({"email": "d@example.com", "username": "carol"})

    @pytest.mark.parametrize(
        "collection, source, target",
        [("follows", "follower_id", "following_id"), ("likes", "user_id", "target_user_id")],
        ids=["follows", "likes"],
    )
    async def test_one_edge_per_pair(self, indexed, collection, source, target):
        edge = {source: ObjectId(), target: ObjectId()}
        indexed[collection].insert_one(dict(edge))
        with pytest.raises(DuplicateKeyError):
            indexed[collection].insert_one(dict(edge))
        indexed[collection].insert_one({source: edge[target], target: edge[source]})
