"""
Polls: posts with voteable options.

Post and option images are required uploads (a failed upload fails the
request); removing stored images is best-effort. Deleting a post removes
its options, votes and comments before the post itself.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from bson import ObjectId

from errors import ForbiddenError, NotFoundError, ValidationError
from repositories.comment_repository import CommentRepository
from repositories.post_repository import OptionRepository, PostRepository, post_filter
from repositories.user_repository import UserRepository
from repositories.vote_repository import VoteRepository
from schemas.dto.requests.post import (
    CreatePostForm,
    OptionUpdateInput,
    PostListQuery,
    UpdatePostForm,
)
from schemas.dto.responses.common import AuthorSnapshot, Pagination
from schemas.dto.responses.post import (
    OptionResponse,
    PostDetailResponse,
    PostListResponse,
    PostResponse,
    TrendingPostResponse,
    TrendingPostsResponse,
)
from schemas.models.base import parse_object_id
from schemas.models.post import OptionDoc, PostDoc
from services.media_service import OPTION_FOLDER, POST_FOLDER, MediaService
from services.token_service import AuthContext
from shared import messages
from shared.datetime_utils import ensure_utc, to_millis, utcnow
from shared.logging import get_logger
from shared.uploads import ParsedForm, UploadedFile

log = get_logger(__name__)

POST_IMAGES_FIELD = "postImages"
MIN_SEARCH_LENGTH = 3
_SORT_FIELDS = {"createdAt": "created_at", "title": "title"}


@dataclass
class CascadeResult:
    """What a post cascade removed, plus the stored files left to clean up."""

    posts: int = 0
    options: int = 0
    votes: int = 0
    comments: int = 0
    image_urls: list[str] = field(default_factory=list)


class PostService:
    def __init__(
        self,
        posts: PostRepository,
        options: OptionRepository,
        votes: VoteRepository,
        comments: CommentRepository,
        users: UserRepository,
        media: MediaService,
        trending_window_days: int = 7,
    ) -> None:
        self._posts = posts
        self._options = options
        self._votes = votes
        self._comments = comments
        self._users = users
        self._media = media
        self._trending_window = timedelta(days=trending_window_days)

    async def _get_post(self, post_id: str) -> PostDoc:
        oid = parse_object_id(post_id)
        post = await self._posts.get_by_id(oid) if oid else None
        if post is None:
            raise NotFoundError(messages.POST_NOT_FOUND)
        return post

    # ── Writes ───────────────────────────────────────────────────────────────

    async def create(self, auth: AuthContext, form: CreatePostForm, files: ParsedForm) -> ObjectId:
        post_files = files.files_for(POST_IMAGES_FIELD)
        option_files = [
            files.file(option.file_name) if option.file_name else None
            for option in form.options
        ]
        urls = await self._media.upload_all_required(
            [(POST_FOLDER, f) for f in post_files]
            + [(OPTION_FOLDER, f) for f in option_files if f is not None]
        )
        images, option_urls = urls[: len(post_files)], iter(urls[len(post_files) :])

        now = utcnow()
        post_id = await self._posts.insert(
            PostDoc(
                title=form.title,
                description=form.description,
                images=images,
                created_by=ObjectId(auth.uid),
                created_at=now,
                updated_at=now,
            )
        )
        for option, image in zip(form.options, option_files):
            await self._options.insert(
                OptionDoc(
                    post_id=post_id,
                    text=option.text,
                    image_url=next(option_urls) if image is not None else None,
                    votes_count=0,
                )
            )

        log.info(
            "post_created",
            post_id=str(post_id),
            user_id=auth.uid,
            options=len(form.options),
            images=len(images),
        )
        return post_id

    async def update(
        self, auth: AuthContext, post_id: str, form: UpdatePostForm, files: ParsedForm
    ) -> bool:
        """Apply an update. Returns False when the request carried no changes.

        Every option change is resolved before anything is uploaded or
        written, so a rejected request leaves the post as it was.
        """
        post = await self._get_post(post_id)
        if str(post.created_by) != auth.uid:
            raise ForbiddenError(messages.UNAUTHORISED_ACCESS)
        if form.is_empty and not files.files:
            return False

        existing = {o.id: o for o in await self._options.list_for_post(post.id)}
        planned: list[tuple[Optional[OptionDoc], OptionUpdateInput, Optional[UploadedFile]]] = []
        for change in form.options:
            option = None
            if change.id:
                option = existing.get(parse_object_id(change.id))
                if option is None:
                    raise NotFoundError(messages.OPTION_NOT_FOUND, field="options")
            elif not change.text:
                raise ValidationError(messages.INVALID_OPTIONS_FORMAT, field="options")
            image = files.file(change.file_name) if change.file_name else None
            planned.append((option, change, image))
        dropped = [
            option
            for option in (existing.get(parse_object_id(raw)) for raw in form.delete_options)
            if option is not None
        ]

        post_files = files.files_for(POST_IMAGES_FIELD)
        urls = await self._media.upload_all_required(
            [(POST_FOLDER, f) for f in post_files]
            + [(OPTION_FOLDER, image) for _, _, image in planned if image is not None]
        )
        new_images, option_urls = urls[: len(post_files)], iter(urls[len(post_files) :])

        to_delete = set(form.delete_images)
        removed_urls = [url for url in post.images if url in to_delete]
        fields: dict = {
            "images": [url for url in post.images if url not in to_delete] + new_images,
            "updated_at": utcnow(),
        }
        if form.title:
            fields["title"] = form.title
        if form.description is not None:
            fields["description"] = form.description
        await self._posts.update_fields(post.id, fields)

        for option, change, image in planned:
            image_url = next(option_urls) if image is not None else None
            if option is None:
                await self._options.insert(
                    OptionDoc(post_id=post.id, text=change.text, image_url=image_url)
                )
                continue
            option_fields: dict = {}
            if change.text:
                option_fields["text"] = change.text
            if image_url:
                option_fields["image_url"] = image_url
                if option.image_url:
                    removed_urls.append(option.image_url)
            if option_fields:
                await self._options.update_fields(option.id, option_fields)

        for option in dropped:
            await self._votes.delete_for_option(option.id)
            await self._options.delete_by_id(option.id)
            if option.image_url:
                removed_urls.append(option.image_url)

        await self._media.delete_quietly(removed_urls)
        log.info(
            "post_updated",
            post_id=post_id,
            user_id=auth.uid,
            options_changed=len(form.options),
            options_deleted=len(dropped),
            images_removed=len(removed_urls),
        )
        return True

    async def authored_posts(self, user_id: ObjectId, *, session=None) -> list[PostDoc]:
        return await self._posts.list_by_author(user_id, session=session)

    async def cascade_delete(self, posts: list[PostDoc], *, session=None) -> CascadeResult:
        """Delete *posts* with their options, votes and comments.

        Stored files are not touched; their URLs are returned so the caller
        removes them once the database work is committed.
        """
        result = CascadeResult()
        if not posts:
            return result
        post_ids = [p.id for p in posts]
        options = await self._options.list_for_posts(post_ids, session=session)

        result.options = await self._options.delete_for_posts(post_ids, session=session)
        result.votes = await self._votes.delete_for_posts(post_ids, session=session)
        result.comments = await self._comments.delete_for_posts(post_ids, session=session)
        result.posts = await self._posts.delete_many_by_ids(post_ids, session=session)
        for p in posts:
            result.image_urls.extend(p.images)
        result.image_urls.extend(o.image_url for o in options if o.image_url)
        return result

    async def delete(self, auth: AuthContext, post_id: str) -> None:
        post = await self._get_post(post_id)
        if str(post.created_by) != auth.uid and not auth.is_admin:
            raise ForbiddenError(messages.UNAUTHORISED_ACCESS)

        result = await self.cascade_delete([post])
        await self._media.delete_quietly(result.image_urls)
        log.info(
            "post_deleted",
            post_id=post_id,
            user_id=auth.uid,
            options=result.options,
            votes=result.votes,
            comments=result.comments,
        )

    # ── Reads ────────────────────────────────────────────────────────────────

    async def _summaries(
        self, auth: AuthContext, posts: list[PostDoc], response_cls=PostResponse
    ) -> list:
        """Denormalize author, vote/comment counts and the caller's vote."""
        if not posts:
            return []
        post_ids = [p.id for p in posts]
        authors, voted, votes_counts, comments_counts = await asyncio.gather(
            self._users.get_many(p.created_by for p in posts),
            self._votes.voted_post_ids(ObjectId(auth.uid), post_ids),
            asyncio.gather(*(self._votes.count_for_post(pid) for pid in post_ids)),
            asyncio.gather(*(self._comments.count_for_post(pid) for pid in post_ids)),
        )
        summaries = []
        for post, votes_count, comments_count in zip(posts, votes_counts, comments_counts):
            author = authors.get(post.created_by)
            summaries.append(
                response_cls(
                    id=str(post.id),
                    title=post.title,
                    description=post.description,
                    images=post.images,
                    created_by=str(post.created_by),
                    created_at=to_millis(post.created_at),
                    updated_at=to_millis(post.updated_at),
                    user=AuthorSnapshot(
                        id=str(author.id),
                        name=author.name,
                        profile_pic_url=author.profile_pic_url,
                    )
                    if author
                    else None,
                    votes_count=votes_count,
                    comments_count=comments_count,
                    has_voted=post.id in voted,
                )
            )
        return summaries

    async def list_posts(self, auth: AuthContext, query: PostListQuery) -> PostListResponse:
        if query.all:
            owner = None
        else:
            owner = parse_object_id(query.uid or auth.uid)
            if owner is None:
                return PostListResponse(
                    posts=[], pagination=Pagination.build(query.page, query.limit, 0)
                )

        mongo_query = post_filter(created_by=owner, title_prefix=query.search)
        total = await self._posts.count(mongo_query)
        posts = await self._posts.list(
            mongo_query,
            sort_field=_SORT_FIELDS[query.sort_by],
            direction=1 if query.order == "asc" else -1,
            skip=(query.page - 1) * query.limit,
            limit=query.limit,
        )
        return PostListResponse(
            posts=await self._summaries(auth, posts),
            pagination=Pagination.build(query.page, query.limit, total),
        )

    async def get(self, auth: AuthContext, post_id: str) -> PostDetailResponse:
        post = await self._get_post(post_id)
        summary = (await self._summaries(auth, [post], PostDetailResponse))[0]
        user_vote = await self._votes.find_user_vote(post.id, ObjectId(auth.uid))
        summary.options = [
            OptionResponse(
                id=str(o.id),
                post_id=str(o.post_id),
                text=o.text,
                image_url=o.image_url,
                votes_count=o.votes_count,
                has_voted=user_vote is not None and user_vote.option_id == o.id,
            )
            for o in await self._options.list_for_post(post.id)
        ]
        return summary

    async def search(self, auth: AuthContext, text: Optional[str]) -> list[PostResponse]:
        text = (text or "").strip()
        if len(text) < MIN_SEARCH_LENGTH:
            raise ValidationError(messages.SEARCH_QUERY_TOO_SHORT, field="query")
        posts = await self._posts.list(
            post_filter(title_prefix=text), sort_field="title", direction=1
        )
        return await self._summaries(auth, posts)

    async def trending(self, auth: AuthContext, page: int, page_size: int) -> TrendingPostsResponse:
        """Rank posts of the trailing window by comments + votes inside it.

        Ties go to the newer post. Every post in the window is scored before
        the page is cut, so cost grows with the window's post count.
        """
        since = utcnow() - self._trending_window
        posts = await self._posts.list(post_filter(created_since=since))

        async def _score(post: PostDoc) -> int:
            comments, votes = await asyncio.gather(
                self._comments.count_for_post(post.id, since),
                self._votes.count_for_post(post.id, since),
            )
            return comments + votes

        scores = await asyncio.gather(*(_score(p) for p in posts))
        ranked = sorted(
            zip(posts, scores),
            key=lambda pair: (pair[1], ensure_utc(pair[0].created_at) or since),
            reverse=True,
        )
        start = (page - 1) * page_size
        window = ranked[start : start + page_size]

        summaries = await self._summaries(
            auth, [p for p, _ in window], TrendingPostResponse
        )
        for summary, (_, score) in zip(summaries, window):
            summary.engagement_score = score
        return TrendingPostsResponse(
            posts=summaries, pagination=Pagination.build(page, page_size, len(ranked))
        )
