"""
Comment threads: create, edit, subtree delete, reactions and tree reads.

A comment's ``likes`` / ``dislikes`` arrays and their counters only change
together, in one update whose filter re-asserts the membership the change
was planned from (see plan_reaction). If another request got there first
the filter misses, nothing is written, and the plan is rebuilt from a
fresh read.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Optional

from bson import ObjectId

from errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from repositories.comment_repository import CommentRepository
from repositories.post_repository import PostRepository
from repositories.user_repository import UserRepository
from schemas.dto.responses.comment import CommentResponse, ReactionResponse
from schemas.dto.responses.common import AuthorSnapshot
from schemas.models.base import parse_object_id
from schemas.models.comment import CommentDoc
from schemas.models.user import UserDoc
from services.token_service import AuthContext
from shared import messages
from shared.datetime_utils import to_millis, utcnow
from shared.logging import get_logger

log = get_logger(__name__)

LIKE = "like"
DISLIKE = "dislike"
REACTION_LISTS = {"likes": "likes", "dislikes": "dislikes"}
MAX_REACTION_ATTEMPTS = 3


@dataclass(frozen=True)
class ReactionPlan:
    guard: dict[str, Any]
    update: dict[str, Any]
    likes_delta: int
    dislikes_delta: int
    has_liked: bool
    has_disliked: bool


def plan_reaction(comment: CommentDoc, user_id: ObjectId, reaction: str) -> ReactionPlan:
    """Work out the single update that toggles *reaction* for *user_id*.

    Reacting again removes the reaction; reacting the other way moves the
    user from one array to the other. Pure: reads *comment*, writes nothing.
    """
    if reaction == LIKE:
        same, other = "likes", "dislikes"
    elif reaction == DISLIKE:
        same, other = "dislikes", "likes"
    else:
        raise ValueError(f"unknown reaction {reaction!r}")

    in_same = user_id in getattr(comment, same)
    in_other = user_id in getattr(comment, other)
    deltas = {same: 0, other: 0}

    if in_same:
        guard = {same: user_id}
        update: dict[str, Any] = {
            "$pull": {same: user_id},
            "$inc": {f"{same}_count": -1},
        }
        deltas[same] = -1
    elif in_other:
        guard = {same: {"$ne": user_id}, other: user_id}
        update = {
            "$addToSet": {same: user_id},
            "$pull": {other: user_id},
            "$inc": {f"{same}_count": 1, f"{other}_count": -1},
        }
        deltas[same], deltas[other] = 1, -1
    else:
        guard = {same: {"$ne": user_id}, other: {"$ne": user_id}}
        update = {
            "$addToSet": {same: user_id},
            "$inc": {f"{same}_count": 1},
        }
        deltas[same] = 1

    now_in_same = not in_same
    return ReactionPlan(
        guard=guard,
        update=update,
        likes_delta=deltas["likes"],
        dislikes_delta=deltas["dislikes"],
        has_liked=now_in_same if same == "likes" else False,
        has_disliked=now_in_same if same == "dislikes" else False,
    )


def _author(user: Optional[UserDoc]) -> Optional[AuthorSnapshot]:
    if user is None:
        return None
    return AuthorSnapshot(
        id=str(user.id), name=user.name, profile_pic_url=user.profile_pic_url
    )


class CommentService:
    def __init__(
        self,
        comments: CommentRepository,
        posts: PostRepository,
        users: UserRepository,
    ) -> None:
        self._comments = comments
        self._posts = posts
        self._users = users

    async def _get_comment(self, comment_id: str) -> CommentDoc:
        oid = parse_object_id(comment_id)
        comment = await self._comments.get_by_id(oid) if oid else None
        if comment is None:
            raise NotFoundError(messages.COMMENT_NOT_FOUND)
        return comment

    async def create(
        self, auth: AuthContext, post_id: str, text: str, parent_id: Optional[str] = None
    ) -> ObjectId:
        post_oid = parse_object_id(post_id)
        if post_oid is None or await self._posts.get_by_id(post_oid) is None:
            raise NotFoundError(messages.POST_NOT_FOUND)

        parent: Optional[CommentDoc] = None
        if parent_id:
            parent_oid = parse_object_id(parent_id)
            parent = await self._comments.get_by_id(parent_oid) if parent_oid else None
            if parent is None or parent.post_id != post_oid:
                raise NotFoundError(messages.PARENT_COMMENT_NOT_FOUND)

        now = utcnow()
        comment = CommentDoc(
            post_id=post_oid,
            parent_id=parent.id if parent else None,
            text=text,
            created_by=ObjectId(auth.uid),
            created_at=now,
            updated_at=now,
        )
        comment_id = await self._comments.insert(comment)
        if parent is not None:
            await self._comments.add_reply(parent.id, comment_id)

        log.info(
            "comment_created",
            comment_id=str(comment_id),
            post_id=post_id,
            parent_id=parent_id,
            user_id=auth.uid,
        )
        return comment_id

    async def update(self, auth: AuthContext, comment_id: str, text: Optional[str]) -> None:
        comment = await self._get_comment(comment_id)
        if str(comment.created_by) != auth.uid:
            raise ForbiddenError(messages.UNAUTHORISED_ACCESS)
        await self._comments.update_text(comment.id, text or comment.text, utcnow())

    async def collect_subtree(self, root_id: ObjectId, *, session=None) -> list[ObjectId]:
        """Return *root_id* and every descendant id, walking level by level."""
        collected = [root_id]
        seen = {root_id}
        frontier = [root_id]
        while frontier:
            children = await self._comments.child_ids(frontier, session=session)
            frontier = [c for c in children if c not in seen]
            seen.update(frontier)
            collected.extend(frontier)
        return collected

    async def delete_subtree(self, comment: CommentDoc, *, session=None) -> int:
        ids = await self.collect_subtree(comment.id, session=session)
        deleted = await self._comments.delete_many_by_ids(ids, session=session)
        if comment.parent_id is not None:
            await self._comments.remove_reply(comment.parent_id, comment.id, session=session)
        return deleted

    async def delete(self, auth: AuthContext, comment_id: str) -> int:
        comment = await self._get_comment(comment_id)
        if str(comment.created_by) != auth.uid and not auth.is_admin:
            raise ForbiddenError(messages.UNAUTHORISED_ACCESS)
        deleted = await self.delete_subtree(comment)
        log.info(
            "comment_deleted",
            comment_id=comment_id,
            deleted=deleted,
            user_id=auth.uid,
        )
        return deleted

    async def react(self, auth: AuthContext, comment_id: str, reaction: str) -> ReactionResponse:
        user_id = ObjectId(auth.uid)
        comment = await self._get_comment(comment_id)
        for _ in range(MAX_REACTION_ATTEMPTS):
            plan = plan_reaction(comment, user_id, reaction)
            if await self._comments.apply_reaction(comment.id, plan.guard, plan.update):
                return ReactionResponse(
                    likes_count=comment.likes_count + plan.likes_delta,
                    dislikes_count=comment.dislikes_count + plan.dislikes_delta,
                    has_liked=plan.has_liked,
                    has_disliked=plan.has_disliked,
                )
            log.info("comment_reaction_retry", comment_id=comment_id, user_id=auth.uid)
            comment = await self._get_comment(comment_id)
        raise ConflictError(messages.REACTION_CONFLICT)

    async def get_tree(self, auth: AuthContext, post_id: str) -> list[CommentResponse]:
        """All comments of a post as a tree, oldest first at every level."""
        post_oid = parse_object_id(post_id)
        if post_oid is None:
            return []
        comments = await self._comments.list_for_post(post_oid)
        authors = await self._users.get_many(c.created_by for c in comments)
        viewer = parse_object_id(auth.uid)

        nodes: dict[ObjectId, CommentResponse] = {}
        children: dict[ObjectId, list[ObjectId]] = defaultdict(list)
        roots: list[ObjectId] = []
        for c in comments:
            nodes[c.id] = CommentResponse(
                id=str(c.id),
                post_id=str(c.post_id),
                parent_id=str(c.parent_id) if c.parent_id else None,
                text=c.text,
                created_by=_author(authors.get(c.created_by)),
                created_at=to_millis(c.created_at),
                updated_at=to_millis(c.updated_at),
                likes_count=c.likes_count,
                dislikes_count=c.dislikes_count,
                has_liked=viewer in c.likes,
                has_disliked=viewer in c.dislikes,
            )
            if c.parent_id is None:
                roots.append(c.id)
            else:
                children[c.parent_id].append(c.id)

        # Comments arrive sorted, so each children list is already in order
        for parent_id, child_ids in children.items():
            parent = nodes.get(parent_id)
            if parent is not None:
                parent.replies = [nodes[cid] for cid in child_ids]
        return [nodes[rid] for rid in roots]

    async def get_reactors(self, comment_id: str, list_type: str) -> list[AuthorSnapshot]:
        field = REACTION_LISTS.get(list_type)
        if field is None:
            raise ValidationError(messages.INVALID_REACTION_TYPE, field="type")
        comment = await self._get_comment(comment_id)
        user_ids = getattr(comment, field)
        users = await self._users.get_many(user_ids)
        return [_author(users[uid]) for uid in user_ids if uid in users]
