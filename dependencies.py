"""
FastAPI dependency providers.

Long-lived clients (Mongo, HTTP, Firebase providers) are created in the app
lifespan and kept on app.state. Repositories and services are cheap
wrappers, built per request from those clients so tests can override any
layer with app.dependency_overrides.
"""

from __future__ import annotations

from typing import Optional

from bson import ObjectId
from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import AppSettings
from errors import AuthenticationError, ForbiddenError
from infrastructure.email.protocol import EmailProvider
from infrastructure.identity.protocol import IdentityProvider
from repositories.comment_repository import CommentRepository
from repositories.pending_registration_repository import PendingRegistrationRepository
from repositories.post_repository import OptionRepository, PostRepository
from repositories.social_repository import (
    FollowRepository,
    ProfileLikeRepository,
    SubscriptionRepository,
)
from repositories.token_repository import PasswordResetRepository, RefreshTokenRepository
from repositories.transactions import TransactionManager
from repositories.user_repository import UserRepository
from repositories.vote_repository import VoteRepository
from services.auth_service import AuthService
from services.comment_service import CommentService
from services.media_service import MediaService
from services.post_service import PostService
from services.profile_service import ProfileService
from services.registration_service import RegistrationService
from services.subscription_service import SubscriptionService
from services.token_service import AuthContext, TokenService
from services.vote_service import VoteService
from shared import messages

_bearer = HTTPBearer(auto_error=False)


# ── Core ─────────────────────────────────────────────────────────────────────


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


def get_email_provider(request: Request) -> EmailProvider:
    return request.app.state.email_provider


def get_identity_provider(request: Request) -> Optional[IdentityProvider]:
    """Firebase Auth, or None when Firebase is not configured."""
    return request.app.state.identity_provider


def get_media_service(request: Request) -> MediaService:
    return MediaService(request.app.state.storage)


def get_transaction_manager(
    request: Request, settings: AppSettings = Depends(get_settings)
) -> TransactionManager:
    return TransactionManager(
        request.app.state.mongo_client, settings.db.mongodb_transactions
    )


# ── Repositories ─────────────────────────────────────────────────────────────


def get_user_repo(db=Depends(get_db)) -> UserRepository:
    return UserRepository(db["users"])


def get_pending_repo(db=Depends(get_db)) -> PendingRegistrationRepository:
    return PendingRegistrationRepository(db["temp_users"])


def get_refresh_token_repo(db=Depends(get_db)) -> RefreshTokenRepository:
    return RefreshTokenRepository(db["refresh_tokens"])


def get_password_reset_repo(db=Depends(get_db)) -> PasswordResetRepository:
    return PasswordResetRepository(db["password_resets"])


def get_post_repo(db=Depends(get_db)) -> PostRepository:
    return PostRepository(db["posts"])


def get_option_repo(db=Depends(get_db)) -> OptionRepository:
    return OptionRepository(db["options"])


def get_vote_repo(db=Depends(get_db)) -> VoteRepository:
    return VoteRepository(db["votes"])


def get_comment_repo(db=Depends(get_db)) -> CommentRepository:
    return CommentRepository(db["comments"])


def get_follow_repo(db=Depends(get_db)) -> FollowRepository:
    return FollowRepository(db["follows"])


def get_profile_like_repo(db=Depends(get_db)) -> ProfileLikeRepository:
    return ProfileLikeRepository(db["likes"])


def get_subscription_repo(db=Depends(get_db)) -> SubscriptionRepository:
    return SubscriptionRepository(db["subscriptions"])


# ── Services ─────────────────────────────────────────────────────────────────


def get_token_service(
    settings: AppSettings = Depends(get_settings),
    refresh_tokens: RefreshTokenRepository = Depends(get_refresh_token_repo),
) -> TokenService:
    return TokenService(settings.jwt, refresh_tokens)


def get_registration_service(
    settings: AppSettings = Depends(get_settings),
    users: UserRepository = Depends(get_user_repo),
    pending: PendingRegistrationRepository = Depends(get_pending_repo),
    tokens: TokenService = Depends(get_token_service),
    email_provider: EmailProvider = Depends(get_email_provider),
    media: MediaService = Depends(get_media_service),
) -> RegistrationService:
    return RegistrationService(users, pending, tokens, email_provider, media, settings.otp)


def get_auth_service(
    settings: AppSettings = Depends(get_settings),
    users: UserRepository = Depends(get_user_repo),
    password_resets: PasswordResetRepository = Depends(get_password_reset_repo),
    tokens: TokenService = Depends(get_token_service),
    email_provider: EmailProvider = Depends(get_email_provider),
    identity: Optional[IdentityProvider] = Depends(get_identity_provider),
) -> AuthService:
    return AuthService(users, password_resets, tokens, email_provider, identity, settings.otp)


def get_comment_service(
    comments: CommentRepository = Depends(get_comment_repo),
    posts: PostRepository = Depends(get_post_repo),
    users: UserRepository = Depends(get_user_repo),
) -> CommentService:
    return CommentService(comments, posts, users)


def get_post_service(
    settings: AppSettings = Depends(get_settings),
    posts: PostRepository = Depends(get_post_repo),
    options: OptionRepository = Depends(get_option_repo),
    votes: VoteRepository = Depends(get_vote_repo),
    comments: CommentRepository = Depends(get_comment_repo),
    users: UserRepository = Depends(get_user_repo),
    media: MediaService = Depends(get_media_service),
) -> PostService:
    return PostService(
        posts, options, votes, comments, users, media, settings.trending_window_days
    )


def get_vote_service(
    votes: VoteRepository = Depends(get_vote_repo),
    posts: PostRepository = Depends(get_post_repo),
    options: OptionRepository = Depends(get_option_repo),
) -> VoteService:
    return VoteService(votes, posts, options)


def get_profile_service(
    users: UserRepository = Depends(get_user_repo),
    follows: FollowRepository = Depends(get_follow_repo),
    likes: ProfileLikeRepository = Depends(get_profile_like_repo),
    pending: PendingRegistrationRepository = Depends(get_pending_repo),
    password_resets: PasswordResetRepository = Depends(get_password_reset_repo),
    comments: CommentRepository = Depends(get_comment_repo),
    post_service: PostService = Depends(get_post_service),
    comment_service: CommentService = Depends(get_comment_service),
    tokens: TokenService = Depends(get_token_service),
    media: MediaService = Depends(get_media_service),
    identity: Optional[IdentityProvider] = Depends(get_identity_provider),
    transactions: TransactionManager = Depends(get_transaction_manager),
) -> ProfileService:
    return ProfileService(
        users,
        follows,
        likes,
        pending,
        password_resets,
        comments,
        post_service,
        comment_service,
        tokens,
        media,
        identity,
        transactions,
    )


def get_subscription_service(
    subscriptions: SubscriptionRepository = Depends(get_subscription_repo),
) -> SubscriptionService:
    return SubscriptionService(subscriptions)


# ── Auth ─────────────────────────────────────────────────────────────────────


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(_bearer),
    tokens: TokenService = Depends(get_token_service),
) -> AuthContext:
    """Decode the bearer access token.

    Missing token → 401 ACCESS_TOKEN_REQUIRED; bad or expired → 403 EXPIRED_TOKEN.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(messages.ACCESS_TOKEN_REQUIRED)
    auth = tokens.decode_access_token(credentials.credentials)
    if auth is None or not ObjectId.is_valid(auth.uid):
        raise ForbiddenError(messages.EXPIRED_TOKEN)
    return auth


async def require_admin(auth: AuthContext = Depends(get_current_user)) -> AuthContext:
    if not auth.is_admin:
        raise ForbiddenError(messages.ADMIN_ACCESS_REQUIRED)
    return auth
