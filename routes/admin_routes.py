"""/admin routes. Everything except login requires role=admin."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import (
    get_auth_service,
    get_profile_service,
    get_vote_service,
    require_admin,
)
from routes.auth_routes import _tokens_payload
from schemas.dto.requests.auth import LoginRequest
from schemas.dto.responses.common import SuccessResponse, envelope
from services.auth_service import AuthService
from services.profile_service import ProfileService
from services.token_service import AuthContext
from services.vote_service import VoteService
from shared import messages

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login")
async def admin_login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> SuccessResponse:
    user, tokens = await auth_service.login(body.identifier, body.password, require_admin=True)
    return envelope(messages.LOGIN_SUCCESS, _tokens_payload(user, tokens))


@router.delete("/user/{user_id}")
async def delete_user(
    user_id: str,
    admin: AuthContext = Depends(require_admin),
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    await profiles.admin_delete(admin, user_id)
    return envelope(messages.USER_DELETED)


@router.post("/post/{post_id}/recount")
async def recount_votes(
    post_id: str,
    admin: AuthContext = Depends(require_admin),
    votes: VoteService = Depends(get_vote_service),
) -> SuccessResponse:
    return envelope(messages.SUCCESS, await votes.recount(post_id))
