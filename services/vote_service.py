"""
One vote per user per post.

Casting checks for an existing vote first and the unique (post_id, user_id)
index rejects whatever slips past the check concurrently, so a user never
holds two votes on a post. An option's votes_count moves by exactly one with
each vote insert or delete; recount() rebuilds it from the votes collection.
"""

from __future__ import annotations

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from errors import ConflictError, NotFoundError
from repositories.post_repository import OptionRepository, PostRepository
from repositories.vote_repository import VoteRepository
from schemas.dto.responses.post import RecountResponse
from schemas.models.base import parse_object_id
from schemas.models.post import OptionDoc, PostDoc
from schemas.models.vote import VoteDoc
from services.token_service import AuthContext
from shared import messages
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)


class VoteService:
    def __init__(
        self,
        votes: VoteRepository,
        posts: PostRepository,
        options: OptionRepository,
    ) -> None:
        self._votes = votes
        self._posts = posts
        self._options = options

    async def _get_post(self, post_id: str) -> PostDoc:
        oid = parse_object_id(post_id)
        post = await self._posts.get_by_id(oid) if oid else None
        if post is None:
            raise NotFoundError(messages.POST_NOT_FOUND)
        return post

    async def _get_option(self, post: PostDoc, option_id: str) -> OptionDoc:
        oid = parse_object_id(option_id)
        option = await self._options.get_by_id(oid) if oid else None
        if option is None or option.post_id != post.id:
            raise NotFoundError(messages.OPTION_NOT_FOUND)
        return option

    async def cast(self, auth: AuthContext, post_id: str, option_id: str) -> ObjectId:
        post = await self._get_post(post_id)
        option = await self._get_option(post, option_id)
        user_id = ObjectId(auth.uid)

        if await self._votes.find_user_vote(post.id, user_id) is not None:
            raise ConflictError(messages.ALREADY_VOTED)
        try:
            vote_id = await self._votes.insert(
                VoteDoc(
                    post_id=post.id,
                    option_id=option.id,
                    user_id=user_id,
                    created_at=utcnow(),
                )
            )
        except DuplicateKeyError as e:
            raise ConflictError(messages.ALREADY_VOTED) from e

        await self._options.increment_votes(option.id, 1)
        log.info("vote_cast", post_id=post_id, option_id=option_id, user_id=auth.uid)
        return vote_id

    async def retract(self, auth: AuthContext, post_id: str, option_id: str) -> None:
        post_oid = parse_object_id(post_id)
        option_oid = parse_object_id(option_id)
        vote = None
        if post_oid and option_oid:
            vote = await self._votes.find_user_vote(post_oid, ObjectId(auth.uid), option_oid)
        if vote is None:
            raise NotFoundError(messages.VOTE_NOT_FOUND)

        # Only the request that actually removed the vote moves the counter
        if await self._votes.delete_by_id(vote.id):
            await self._options.increment_votes(vote.option_id, -1)
        log.info("vote_retracted", post_id=post_id, option_id=option_id, user_id=auth.uid)

    async def recount(self, post_id: str) -> RecountResponse:
        """Reset each option's votes_count to the number of stored votes."""
        post = await self._get_post(post_id)
        corrected: dict[str, int] = {}
        for option in await self._options.list_for_post(post.id):
            actual = await self._votes.count_for_option(option.id)
            if actual != option.votes_count:
                await self._options.set_votes_count(option.id, actual)
                corrected[str(option.id)] = actual
        if corrected:
            log.warning("vote_counts_corrected", post_id=post_id, corrected=corrected)
        return RecountResponse(post_id=post_id, corrected=corrected)
