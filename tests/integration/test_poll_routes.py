"""Integration tests for /api/post, /api/vote and /api/comment."""

import json
from datetime import timedelta

import jwt
import pytest

from shared import messages
from shared.datetime_utils import utcnow
from tests.fakes import TEST_JWT_SECRET


@pytest.fixture
def alice(backend):
    return backend.add_user("alice", name="Alice")


@pytest.fixture
def bob(backend):
    return backend.add_user("bob", name="Bob")


# ── Auth guard ────────────────────────────────────────────────────────────────


class TestAuthGuard:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/api/post/get"),
            ("GET", "/api/post/trending"),
            ("POST", "/api/vote/create"),
            ("GET", "/api/comment/get/abc"),
            ("GET", "/api/user/profile"),
        ],
    )
    def test_missing_token(self, api, method, path):
        resp = api.request(method, path)
        assert resp.status_code == 401
        assert resp.json()["code"] == "authentication_error"

    def test_token_of_wrong_type(self, api, alice):
        token = jwt.encode(
            {"uid": str(alice.id), "type": "refresh", "exp": utcnow() + timedelta(minutes=5)},
            TEST_JWT_SECRET,
            algorithm="HS256",
        )
        resp = api.get("/api/post/get", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 403
        assert resp.json()["message"] == messages.EXPIRED_TOKEN


# ── Posts ─────────────────────────────────────────────────────────────────────


class TestPosts:
    def test_create_with_images_and_options(self, api, backend, alice):
        resp = api.post(
            "/api/post/create",
            headers=backend.bearer(alice),
            data={
                "title": "Weekend plans?",
                "description": "Pick one",
                "options": json.dumps(
                    [{"text": "Hike", "fileName": "hikePic"}, {"text": "Sleep"}]
                ),
            },
            files=[
                ("postImages", ("a.png", b"\x89PNG", "image/png")),
                ("hikePic", ("h.jpg", b"\xff\xd8", "image/jpeg")),
            ],
        )
        assert resp.status_code == 200
        post_id = resp.json()["data"]["postId"]

        detail = api.get(f"/api/post/get/{post_id}", headers=backend.bearer(alice)).json()["data"]
        assert detail["title"] == "Weekend plans?"
        assert len(detail["images"]) == 1
        assert [o["text"] for o in detail["options"]] == ["Hike", "Sleep"]
        assert detail["options"][0]["imageUrl"].endswith(".jpg")
        assert detail["user"]["name"] == "Alice"

    def test_create_with_malformed_options(self, api, backend, alice):
        resp = api.post(
            "/api/post/create",
            headers=backend.bearer(alice),
            data={"title": "T", "options": "{not json"},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == messages.INVALID_OPTIONS_FORMAT

    def test_update_without_changes(self, api, backend, alice):
        post, _ = backend.add_post(alice)
        resp = api.put(f"/api/post/update/{post.id}", headers=backend.bearer(alice), data={})
        assert resp.status_code == 200
        assert resp.json()["message"] == messages.NO_UPDATES_PROVIDED

    def test_update_by_other_user(self, api, backend, alice, bob):
        post, _ = backend.add_post(alice)
        resp = api.put(
            f"/api/post/update/{post.id}", headers=backend.bearer(bob), data={"title": "Mine"}
        )
        assert resp.status_code == 403

    def test_delete_cascades(self, api, backend, alice, bob):
        post, options = backend.add_post(alice)
        backend.add_vote(bob, options[0])
        backend.add_comment(bob, post)
        resp = api.delete(f"/api/post/delete/{post.id}", headers=backend.bearer(alice))
        assert resp.status_code == 200
        assert backend.posts.all() == []
        assert backend.votes.all() == []
        assert backend.comments.all() == []

    def test_list_paginated(self, api, backend, alice):
        for i in range(3):
            backend.add_post(alice, f"P{i}", created_at=utcnow() - timedelta(minutes=10 - i))
        resp = api.get(
            "/api/post/get", headers=backend.bearer(alice), params={"page": 1, "limit": 2}
        )
        data = resp.json()["data"]
        assert [p["title"] for p in data["posts"]] == ["P2", "P1"]
        assert data["pagination"] == {
            "currentPage": 1,
            "totalPages": 2,
            "totalPosts": 3,
            "pageSize": 2,
        }

    def test_search_too_short(self, api, backend, alice):
        resp = api.get("/api/post/search", headers=backend.bearer(alice), params={"query": "ab"})
        assert resp.status_code == 400
        assert resp.json()["message"] == messages.SEARCH_QUERY_TOO_SHORT

    def test_search_without_results(self, api, backend, alice):
        resp = api.get("/api/post/search", headers=backend.bearer(alice), params={"query": "zzz"})
        assert resp.status_code == 200
        assert resp.json()["message"] == messages.POSTS_NOT_FOUND
        assert resp.json()["data"] == []

    def test_unknown_post(self, api, backend, alice):
        resp = api.get("/api/post/get/64b7f0c2a1b2c3d4e5f60718", headers=backend.bearer(alice))
        assert resp.status_code == 404
        assert resp.json()["message"] == messages.POST_NOT_FOUND


class TestTrending:
    def test_ranks_by_engagement(self, api, backend, alice, bob):
        quiet, _ = backend.add_post(alice, "Quiet", created_at=utcnow() - timedelta(hours=1))
        busy, busy_opts = backend.add_post(alice, "Busy", created_at=utcnow() - timedelta(days=2))
        backend.add_vote(bob, busy_opts[0])
        backend.add_comment(bob, busy)

        resp = api.get("/api/post/trending", headers=backend.bearer(bob))
        posts = resp.json()["data"]["posts"]
        assert [p["title"] for p in posts] == ["Busy", "Quiet"]
        assert posts[0]["engagementScore"] == 2

    def test_empty(self, api, backend, alice):
        resp = api.get("/api/post/trending", headers=backend.bearer(alice))
        assert resp.status_code == 200
        assert resp.json()["message"] == messages.NO_TRENDING_POSTS


# ── Votes ─────────────────────────────────────────────────────────────────────


class TestVotes:
    def test_second_vote_is_rejected(self, api, backend, alice, bob):
        post, (first, second) = backend.add_post(alice)
        headers = backend.bearer(bob)

        ok = api.post("/api/vote/create", headers=headers, json={"postId": str(post.id), "optionId": str(first.id)})
        assert ok.status_code == 200

        dup = api.post("/api/vote/create", headers=headers, json={"postId": str(post.id), "optionId": str(second.id)})
        assert dup.status_code == 409
        assert dup.json()["message"] == messages.ALREADY_VOTED

        detail = api.get(f"/api/post/get/{post.id}", headers=headers).json()["data"]
        assert detail["hasVoted"] is True
        assert [o["votesCount"] for o in detail["options"]] == [1, 0]
        assert [o["hasVoted"] for o in detail["options"]] == [True, False]

    def test_retract(self, api, backend, alice, bob):
        post, (first, _) = backend.add_post(alice)
        backend.add_vote(bob, first)
        resp = api.request(
            "DELETE",
            "/api/vote/delete",
            headers=backend.bearer(bob),
            json={"postId": str(post.id), "optionId": str(first.id)},
        )
        assert resp.status_code == 200
        assert backend.options.docs[first.id].votes_count == 0

    def test_retract_missing(self, api, backend, alice, bob):
        post, (first, _) = backend.add_post(alice)
        resp = api.request(
            "DELETE",
            "/api/vote/delete",
            headers=backend.bearer(bob),
            json={"postId": str(post.id), "optionId": str(first.id)},
        )
        assert resp.status_code == 404


# ── Comments ──────────────────────────────────────────────────────────────────


class TestComments:
    def test_thread_and_reactions(self, api, backend, alice, bob):
        post, _ = backend.add_post(alice)
        a_headers, b_headers = backend.bearer(alice), backend.bearer(bob)

        root_id = api.post(
            "/api/comment/create", headers=a_headers, json={"postId": str(post.id), "text": "Root"}
        ).json()["data"]["commentId"]
        api.post(
            "/api/comment/create",
            headers=b_headers,
            json={"postId": str(post.id), "text": "Reply", "parentId": root_id},
        )

        liked = api.post(f"/api/comment/like/{root_id}", headers=b_headers).json()["data"]
        assert liked == {"likesCount": 1, "dislikesCount": 0, "hasLiked": True, "hasDisliked": False}
        flipped = api.post(f"/api/comment/dislike/{root_id}", headers=b_headers).json()["data"]
        assert (flipped["likesCount"], flipped["dislikesCount"]) == (0, 1)

        tree = api.get(f"/api/comment/get/{post.id}", headers=b_headers).json()["data"]
        assert len(tree) == 1
        assert tree[0]["text"] == "Root"
        assert tree[0]["hasDisliked"] is True
        assert tree[0]["replies"][0]["text"] == "Reply"
        assert tree[0]["replies"][0]["createdBy"]["name"] == "Bob"

        reactors = api.get(f"/api/comment/{root_id}/dislikes", headers=a_headers).json()["data"]
        assert [r["name"] for r in reactors] == ["Bob"]

    def test_delete_removes_replies(self, api, backend, alice, bob):
        post, _ = backend.add_post(alice)
        root = backend.add_comment(alice, post)
        backend.add_comment(bob, post, parent=root)
        resp = api.delete(f"/api/comment/delete/{root.id}", headers=backend.bearer(alice))
        assert resp.status_code == 200
        assert backend.comments.all() == []

    def test_update_by_other_user(self, api, backend, alice, bob):
        post, _ = backend.add_post(alice)
        comment = backend.add_comment(alice, post)
        resp = api.put(
            f"/api/comment/update/{comment.id}", headers=backend.bearer(bob), json={"text": "x"}
        )
        assert resp.status_code == 403
        assert resp.json()["message"] == messages.UNAUTHORISED_ACCESS

    def test_bad_reactor_type(self, api, backend, alice):
        post, _ = backend.add_post(alice)
        comment = backend.add_comment(alice, post)
        resp = api.get(f"/api/comment/{comment.id}/hearts", headers=backend.bearer(alice))
        assert resp.status_code == 400
        assert resp.json()["message"] == messages.INVALID_REACTION_TYPE
