"""/user routes: profiles, follows, profile likes, search and self delete."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from config import AppSettings
from dependencies import get_current_user, get_profile_service, get_settings
from routes.forms import read_multipart
from schemas.dto.requests.user import DeleteAccountRequest, EditProfileForm
from schemas.dto.responses.common import SuccessResponse, envelope
from schemas.dto.responses.user import FollowToggleResponse, LikeToggleResponse
from services.profile_service import ProfileService
from services.token_service import AuthContext
from shared import messages

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/profile")
async def my_profile(
    auth: AuthContext = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    return envelope(messages.SUCCESS, await profiles.view(auth))


@router.get("/profile/{user_id}")
async def view_profile(
    user_id: str,
    auth: AuthContext = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    return envelope(messages.SUCCESS, await profiles.view(auth, user_id))


@router.put("/edit-profile")
async def edit_profile(
    request: Request,
    auth: AuthContext = Depends(get_current_user),
    settings: AppSettings = Depends(get_settings),
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    parsed = await read_multipart(request, settings)
    form = EditProfileForm.from_fields(parsed.fields)
    user = await profiles.edit(auth, form, parsed.file("profilePic"))
    return envelope(messages.PROFILE_UPDATED, user)


@router.post("/follow/{user_id}")
async def toggle_follow(
    user_id: str,
    auth: AuthContext = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    following = await profiles.toggle_follow(auth, user_id)
    return envelope(messages.SUCCESS, FollowToggleResponse(following=following))


@router.post("/like/{user_id}")
async def toggle_like(
    user_id: str,
    auth: AuthContext = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    liked = await profiles.toggle_like(auth, user_id)
    return envelope(messages.SUCCESS, LikeToggleResponse(liked=liked))


@router.get("/search")
async def search_users(
    query: Optional[str] = Query(default=None),
    auth: AuthContext = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    return envelope(messages.SUCCESS, await profiles.search(auth, query))


@router.get("/trending")
async def trending_users(
    auth: AuthContext = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    return envelope(messages.SUCCESS, await profiles.trending_users(auth))


@router.delete("/delete")
async def delete_account(
    body: DeleteAccountRequest,
    auth: AuthContext = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    await profiles.delete_self(auth, body.password)
    return envelope(messages.USER_DELETED)
