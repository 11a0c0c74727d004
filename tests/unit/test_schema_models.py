"""Unit tests for MongoDB document models."""

from datetime import datetime, timezone

import pytest
from bson import ObjectId

from schemas.models.base import PyObjectId, parse_object_id
from schemas.models.comment import CommentDoc
from schemas.models.pending_registration import PendingRegistrationDoc
from schemas.models.post import OptionDoc, PostDoc
from schemas.models.social import FollowDoc
from schemas.models.token import PasswordResetDoc
from schemas.models.user import ROLE_ADMIN, UserDoc
from schemas.models.vote import VoteDoc


# ── Helpers ───────────────────────────────────────────────────────────────────

def now():
    return datetime.now(timezone.utc)


def oid():
    return ObjectId()


# ── PyObjectId / parse_object_id ──────────────────────────────────────────────

class TestPyObjectId:
    def test_accepts_objectid_instance(self):
        o = oid()
        assert PyObjectId._validate(o) == o

    def test_accepts_valid_string(self):
        s = str(oid())
        result = PyObjectId._validate(s)
        assert isinstance(result, ObjectId)
        assert str(result) == s

    def test_rejects_invalid_string(self):
        with pytest.raises(ValueError):
            PyObjectId._validate("not-an-id")

    def test_serializes_to_string(self):
        o = oid()
        doc = VoteDoc(post_id=o, option_id=o, user_id=o)
        assert doc.model_dump()["post_id"] == str(o)


class TestParseObjectId:
    def test_valid(self):
        o = oid()
        assert parse_object_id(str(o)) == o
        assert parse_object_id(o) is o

    @pytest.mark.parametrize("value", [None, "", "123", 42, "zzzzzzzzzzzzzzzzzzzzzzzz"])
    def test_invalid_is_none(self, value):
        assert parse_object_id(value) is None


# ── to_mongo / from_mongo ─────────────────────────────────────────────────────

class TestRoundTrip:
    def test_to_mongo_omits_unset_id(self):
        data = PostDoc(title="t", created_by=oid()).to_mongo()
        assert "_id" not in data
        assert isinstance(data["created_by"], ObjectId)

    def test_to_mongo_keeps_objectids(self):
        post_id = oid()
        data = OptionDoc(id=oid(), post_id=post_id, text="Yes").to_mongo()
        assert isinstance(data["_id"], ObjectId)
        assert data["post_id"] == post_id
        assert data["votes_count"] == 0

    def test_from_mongo_none(self):
        assert UserDoc.from_mongo(None) is None

    def test_from_mongo_fills_defaults(self):
        _id = oid()
        user = UserDoc.from_mongo({"_id": _id, "name": "Al", "email": "al@example.com"})
        assert user.id == _id
        assert user.status is True
        assert user.role == "user"
        assert user.username is None


# ── Collection models ─────────────────────────────────────────────────────────

class TestUserDoc:
    def test_is_admin(self):
        assert UserDoc(name="a", email="a@x.io", role=ROLE_ADMIN).is_admin is True
        assert UserDoc(name="a", email="a@x.io").is_admin is False


class TestCommentDoc:
    def test_reaction_defaults(self):
        c = CommentDoc(post_id=oid(), text="hi", created_by=oid())
        assert c.parent_id is None
        assert c.likes == [] and c.dislikes == [] and c.replies == []
        assert c.likes_count == 0 and c.dislikes_count == 0

    def test_string_ids_coerced(self):
        parent = oid()
        c = CommentDoc(post_id=str(oid()), parent_id=str(parent), text="hi", created_by=oid())
        assert c.parent_id == parent


class TestPendingRegistrationDoc:
    def test_defaults(self):
        p = PendingRegistrationDoc(
            email="a@example.com",
            name="A",
            date_of_birth="1990-01-01",
            otp_hash="h",
            otp_expires_at=now(),
        )
        assert p.otp_sent_count == 1
        assert p.otp_verified is False

    def test_negative_count_rejected(self):
        with pytest.raises(Exception):
            PendingRegistrationDoc(
                email="a@example.com",
                name="A",
                date_of_birth="1990-01-01",
                otp_hash="h",
                otp_expires_at=now(),
                otp_sent_count=-1,
            )


def test_password_reset_attempts_default():
    r = PasswordResetDoc(email="a@example.com", user_id=oid(), otp_hash="h", expires_at=now())
    assert r.attempts == 0


def test_follow_doc_fields():
    a, b = oid(), oid()
    f = FollowDoc.from_mongo({"_id": oid(), "follower_id": a, "following_id": b})
    assert (f.follower_id, f.following_id) == (a, b)
