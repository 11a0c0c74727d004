"""/vote routes. There is no switch: retract, then cast again."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_current_user, get_vote_service
from schemas.dto.requests.vote import VoteRequest
from schemas.dto.responses.common import SuccessResponse, envelope
from services.token_service import AuthContext
from services.vote_service import VoteService
from shared import messages

router = APIRouter(prefix="/vote", tags=["vote"])


@router.post("/create")
async def cast_vote(
    body: VoteRequest,
    auth: AuthContext = Depends(get_current_user),
    votes: VoteService = Depends(get_vote_service),
) -> SuccessResponse:
    await votes.cast(auth, body.post_id, body.option_id)
    return envelope(messages.SUCCESS)


@router.delete("/delete")
async def retract_vote(
    body: VoteRequest,
    auth: AuthContext = Depends(get_current_user),
    votes: VoteService = Depends(get_vote_service),
) -> SuccessResponse:
    await votes.retract(auth, body.post_id, body.option_id)
    return envelope(messages.SUCCESS)
