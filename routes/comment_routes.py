"""/comment routes. All require a bearer token."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_comment_service, get_current_user
from schemas.dto.requests.comment import CreateCommentRequest, UpdateCommentRequest
from schemas.dto.responses.comment import CommentIdResponse
from schemas.dto.responses.common import SuccessResponse, envelope
from services.comment_service import DISLIKE, LIKE, CommentService
from services.token_service import AuthContext
from shared import messages

router = APIRouter(prefix="/comment", tags=["comment"])


@router.post("/create")
async def create_comment(
    body: CreateCommentRequest,
    auth: AuthContext = Depends(get_current_user),
    comments: CommentService = Depends(get_comment_service),
) -> SuccessResponse:
    comment_id = await comments.create(auth, body.post_id, body.text, body.parent_id)
    return envelope(messages.SUCCESS, CommentIdResponse(comment_id=str(comment_id)))


@router.put("/update/{comment_id}")
async def update_comment(
    comment_id: str,
    body: UpdateCommentRequest,
    auth: AuthContext = Depends(get_current_user),
    comments: CommentService = Depends(get_comment_service),
) -> SuccessResponse:
    await comments.update(auth, comment_id, body.text)
    return envelope(messages.SUCCESS)


@router.delete("/delete/{comment_id}")
async def delete_comment(
    comment_id: str,
    auth: AuthContext = Depends(get_current_user),
    comments: CommentService = Depends(get_comment_service),
) -> SuccessResponse:
    await comments.delete(auth, comment_id)
    return envelope(messages.SUCCESS)


@router.get("/get/{post_id}")
async def get_comments(
    post_id: str,
    auth: AuthContext = Depends(get_current_user),
    comments: CommentService = Depends(get_comment_service),
) -> SuccessResponse:
    return envelope(messages.SUCCESS, await comments.get_tree(auth, post_id))


@router.post("/like/{comment_id}")
async def like_comment(
    comment_id: str,
    auth: AuthContext = Depends(get_current_user),
    comments: CommentService = Depends(get_comment_service),
) -> SuccessResponse:
    return envelope(messages.SUCCESS, await comments.react(auth, comment_id, LIKE))


@router.post("/dislike/{comment_id}")
async def dislike_comment(
    comment_id: str,
    auth: AuthContext = Depends(get_current_user),
    comments: CommentService = Depends(get_comment_service),
) -> SuccessResponse:
    return envelope(messages.SUCCESS, await comments.react(auth, comment_id, DISLIKE))


@router.get("/{comment_id}/{list_type}")
async def comment_reactors(
    comment_id: str,
    list_type: str,
    auth: AuthContext = Depends(get_current_user),
    comments: CommentService = Depends(get_comment_service),
) -> SuccessResponse:
    return envelope(messages.SUCCESS, await comments.get_reactors(comment_id, list_type))
