"""/post routes. All require a bearer token."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from config import AppSettings
from dependencies import get_current_user, get_post_service, get_settings
from routes.forms import read_multipart
from schemas.dto.requests.post import (
    CreatePostForm,
    PostListQuery,
    UpdatePostForm,
)
from schemas.dto.responses.common import SuccessResponse, envelope
from schemas.dto.responses.post import PostIdResponse
from services.post_service import PostService
from services.token_service import AuthContext
from shared import messages

router = APIRouter(prefix="/post", tags=["post"])


@router.post("/create")
async def create_post(
    request: Request,
    auth: AuthContext = Depends(get_current_user),
    settings: AppSettings = Depends(get_settings),
    posts: PostService = Depends(get_post_service),
) -> SuccessResponse:
    parsed = await read_multipart(request, settings)
    form = CreatePostForm.from_fields(parsed.fields)
    post_id = await posts.create(auth, form, parsed)
    return envelope(messages.SUCCESS, PostIdResponse(post_id=str(post_id)))


@router.put("/update/{post_id}")
async def update_post(
    post_id: str,
    request: Request,
    auth: AuthContext = Depends(get_current_user),
    settings: AppSettings = Depends(get_settings),
    posts: PostService = Depends(get_post_service),
) -> SuccessResponse:
    parsed = await read_multipart(request, settings)
    form = UpdatePostForm.from_fields(parsed.fields)
    updated = await posts.update(auth, post_id, form, parsed)
    message = messages.SUCCESS if updated else messages.NO_UPDATES_PROVIDED
    return envelope(message, PostIdResponse(post_id=post_id))


@router.delete("/delete/{post_id}")
async def delete_post(
    post_id: str,
    auth: AuthContext = Depends(get_current_user),
    posts: PostService = Depends(get_post_service),
) -> SuccessResponse:
    await posts.delete(auth, post_id)
    return envelope(messages.SUCCESS)


@router.get("/get")
async def list_posts(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    order: str = Query(default="desc"),
    search: Optional[str] = Query(default=None),
    uid: Optional[str] = Query(default=None),
    all: bool = Query(default=False),
    auth: AuthContext = Depends(get_current_user),
    posts: PostService = Depends(get_post_service),
) -> SuccessResponse:
    query = PostListQuery(
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
        search=search or None,
        uid=uid,
        all=all,
    )
    return envelope(messages.SUCCESS, await posts.list_posts(auth, query))


@router.get("/get/{post_id}")
async def get_post(
    post_id: str,
    auth: AuthContext = Depends(get_current_user),
    posts: PostService = Depends(get_post_service),
) -> SuccessResponse:
    return envelope(messages.SUCCESS, await posts.get(auth, post_id))


@router.get("/search")
async def search_posts(
    query: Optional[str] = Query(default=None),
    auth: AuthContext = Depends(get_current_user),
    posts: PostService = Depends(get_post_service),
) -> SuccessResponse:
    results = await posts.search(auth, query)
    return envelope(messages.SUCCESS if results else messages.POSTS_NOT_FOUND, results)


@router.get("/trending")
async def trending_posts(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100, alias="pageSize"),
    auth: AuthContext = Depends(get_current_user),
    posts: PostService = Depends(get_post_service),
) -> SuccessResponse:
    result = await posts.trending(auth, page, page_size)
    message = messages.SUCCESS if result.posts else messages.NO_TRENDING_POSTS
    return envelope(message, result)
