"""
Profiles and the social graph: follows, profile likes, search, edits and
account deletion.

Deleting an account (self or admin) is a soft delete: the user document
stays with status=False while everything hanging off it is swept away.
The database part of the sweep runs in one transaction when transactions
are enabled. Stored files and the identity-provider account are removed
afterwards; their failures are logged and do not fail the request.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from infrastructure.identity.protocol import IdentityProvider
from repositories.comment_repository import CommentRepository
from repositories.pending_registration_repository import PendingRegistrationRepository
from repositories.social_repository import FollowRepository, ProfileLikeRepository
from repositories.token_repository import PasswordResetRepository
from repositories.transactions import TransactionManager
from repositories.user_repository import UserRepository
from schemas.dto.requests.user import EditProfileForm
from schemas.dto.responses.user import (
    ProfileResponse,
    ProfileUser,
    PublicUser,
    UserSearchItem,
)
from schemas.models.base import parse_object_id
from schemas.models.social import FollowDoc, ProfileLikeDoc
from schemas.models.user import UserDoc
from services.comment_service import CommentService
from services.media_service import PROFILE_FOLDER, MediaService
from services.post_service import PostService
from services.token_service import AuthContext, TokenService
from shared import messages
from shared.crypto import hash_password, verify_password
from shared.datetime_utils import utcnow
from shared.logging import get_logger
from shared.uploads import UploadedFile

log = get_logger(__name__)

_SEARCH_FIELDS = ("name", "username", "email")
TRENDING_USERS_LIMIT = 10


class ProfileService:
    def __init__(
        self,
        users: UserRepository,
        follows: FollowRepository,
        likes: ProfileLikeRepository,
        pending: PendingRegistrationRepository,
        password_resets: PasswordResetRepository,
        comments: CommentRepository,
        post_service: PostService,
        comment_service: CommentService,
        tokens: TokenService,
        media: MediaService,
        identity: Optional[IdentityProvider],
        transactions: TransactionManager,
    ) -> None:
        self._users = users
        self._follows = follows
        self._likes = likes
        self._pending = pending
        self._password_resets = password_resets
        self._comments = comments
        self._post_service = post_service
        self._comment_service = comment_service
        self._tokens = tokens
        self._media = media
        self._identity = identity
        self._transactions = transactions

    async def _get_active_user(self, user_id: str) -> UserDoc:
        oid = parse_object_id(user_id)
        user = await self._users.get_by_id(oid) if oid else None
        if user is None or not user.status:
            raise NotFoundError(messages.USER_NOT_FOUND)
        return user

    # ── Social edges ─────────────────────────────────────────────────────────

    async def _toggle(self, repo, doc_factory, auth: AuthContext, target_id: str) -> bool:
        if target_id == auth.uid:
            raise ValidationError(messages.CANNOT_TARGET_SELF)
        target = await self._get_active_user(target_id)
        source = ObjectId(auth.uid)

        edge = await repo.find_edge(source, target.id)
        if edge is not None:
            await repo.delete_by_id(edge.id)
            return False
        try:
            await repo.insert(doc_factory(source, target.id))
        except DuplicateKeyError:
            # A concurrent toggle created the edge first
            pass
        return True

    async def toggle_follow(self, auth: AuthContext, target_id: str) -> bool:
        following = await self._toggle(
            self._follows,
            lambda src, dst: FollowDoc(follower_id=src, following_id=dst, followed_at=utcnow()),
            auth,
            target_id,
        )
        log.info("follow_toggled", user_id=auth.uid, target_id=target_id, following=following)
        return following

    async def toggle_like(self, auth: AuthContext, target_id: str) -> bool:
        liked = await self._toggle(
            self._likes,
            lambda src, dst: ProfileLikeDoc(user_id=src, target_user_id=dst, liked_at=utcnow()),
            auth,
            target_id,
        )
        log.info("profile_like_toggled", user_id=auth.uid, target_id=target_id, liked=liked)
        return liked

    # ── Reads ────────────────────────────────────────────────────────────────

    async def search(self, auth: AuthContext, query: Optional[str]) -> list[UserSearchItem]:
        """Prefix search on name, username and email, merged by user id."""
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query is required", field="query")

        results = await asyncio.gather(
            *(
                self._users.search_prefix(f, query if f == "name" else query.lower())
                for f in _SEARCH_FIELDS
            )
        )
        merged: dict[ObjectId, UserDoc] = {}
        for users in results:
            for user in users:
                merged.setdefault(user.id, user)

        following = await self._follows.targets_of(ObjectId(auth.uid), list(merged))
        return [
            UserSearchItem(**PublicUser.from_doc(u).model_dump(), is_following=uid in following)
            for uid, u in merged.items()
        ]

    async def view(self, auth: AuthContext, user_id: Optional[str] = None) -> ProfileResponse:
        """Profile of *user_id*, or of the caller when omitted."""
        user = await self._get_active_user(user_id or auth.uid)
        viewer = ObjectId(auth.uid)
        is_self = user.id == viewer

        followers, following, likes, follow_edge, like_edge = await asyncio.gather(
            self._follows.count_for_target(user.id),
            self._follows.count_for_source(user.id),
            self._likes.count_for_target(user.id),
            self._follows.find_edge(viewer, user.id),
            self._likes.find_edge(viewer, user.id),
        )
        return ProfileResponse(
            user=ProfileUser.from_doc(user, include_email=is_self or auth.is_admin),
            followers_count=followers,
            following_count=following,
            likes_count=likes,
            is_following=not is_self and follow_edge is not None,
            has_liked=not is_self and like_edge is not None,
        )

    async def trending_users(self, auth: AuthContext) -> list[PublicUser]:
        users = await self._users.list_active_except(ObjectId(auth.uid), TRENDING_USERS_LIMIT)
        return [PublicUser.from_doc(u) for u in users]

    # ── Edits ────────────────────────────────────────────────────────────────

    async def edit(
        self,
        auth: AuthContext,
        form: EditProfileForm,
        profile_pic: Optional[UploadedFile] = None,
    ) -> ProfileUser:
        user = await self._get_active_user(auth.uid)
        fields: dict = {}

        if form.username and form.username != user.username:
            if await self._users.get_by_username(form.username) is not None:
                raise ConflictError(messages.USERNAME_TAKEN, field="username")
            fields["username"] = form.username
        for name in ("name", "date_of_birth", "bio"):
            value = getattr(form, name)
            if value:
                fields[name] = value
        if form.password:
            fields["password_hash"] = hash_password(form.password)

        old_picture = None
        if profile_pic is not None:
            fields["profile_pic_url"] = await self._media.upload_required(
                PROFILE_FOLDER, profile_pic
            )
            old_picture = user.profile_pic_url

        fields["updated_at"] = utcnow()
        try:
            await self._users.update_fields(user.id, fields)
        except DuplicateKeyError as e:
            raise ConflictError(messages.USERNAME_TAKEN, field="username") from e

        await self._media.delete_quietly([old_picture])
        log.info("profile_updated", user_id=auth.uid, fields=sorted(fields))
        return ProfileUser.from_doc(user.model_copy(update=fields), include_email=True)

    # ── Account deletion ─────────────────────────────────────────────────────

    async def delete_self(self, auth: AuthContext, password: str) -> None:
        user = await self._get_active_user(auth.uid)
        if not verify_password(password, user.password_hash):
            raise AuthenticationError(messages.INVALID_CREDENTIALS)
        await self._deactivate(user)
        log.info("account_deleted", user_id=auth.uid, by="self")

    async def admin_delete(self, auth: AuthContext, user_id: str) -> None:
        user = await self._get_active_user(user_id)
        if user.is_admin:
            raise ForbiddenError(messages.CANNOT_DELETE_ADMIN)
        await self._deactivate(user)
        log.info("account_deleted", user_id=user_id, by="admin", admin_id=auth.uid)

    async def _delete_authored_comments(self, user_id: ObjectId, *, session=None) -> int:
        comments = await self._comments.list_by_author(user_id, session=session)
        doomed: set[ObjectId] = set()
        tops = []
        for comment in comments:
            if comment.id in doomed:
                continue
            doomed.update(await self._comment_service.collect_subtree(comment.id, session=session))
            tops.append(comment)

        deleted = await self._comments.delete_many_by_ids(list(doomed), session=session)
        for comment in tops:
            if comment.parent_id is not None and comment.parent_id not in doomed:
                await self._comments.remove_reply(comment.parent_id, comment.id, session=session)
        return deleted

    async def _deactivate(self, user: UserDoc) -> None:
        async with self._transactions.transaction() as session:
            tokens = await self._tokens.revoke_all(user.id, session=session)
            await self._pending.delete_by_email(user.email, session=session)
            await self._password_resets.delete_by_email(user.email, session=session)
            likes = await self._likes.delete_touching(user.id, session=session)
            follows = await self._follows.delete_touching(user.id, session=session)
            posts = await self._post_service.cascade_delete(
                await self._post_service.authored_posts(user.id, session=session),
                session=session,
            )
            comments = await self._delete_authored_comments(user.id, session=session)
            await self._users.update_fields(
                user.id, {"status": False, "updated_at": utcnow()}, session=session
            )

        log.info(
            "account_cleanup_done",
            user_id=str(user.id),
            refresh_rows=tokens,
            likes=likes,
            follows=follows,
            posts=posts.posts,
            comments=comments + posts.comments,
            transactional=self._transactions.enabled,
        )

        await self._media.delete_quietly([user.profile_pic_url, *posts.image_urls])
        if self._identity is not None and user.auth_provider_uid:
            try:
                await self._identity.delete_user(user.auth_provider_uid)
            except Exception as e:
                log.warning(
                    "identity_delete_failed",
                    user_id=str(user.id),
                    error=str(e),
                    error_type=type(e).__name__,
                )
