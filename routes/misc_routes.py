"""/misc routes (public)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_subscription_service
from schemas.dto.requests.misc import SubscribeRequest
from schemas.dto.responses.common import SuccessResponse, envelope
from services.subscription_service import SubscriptionService
from shared import messages

router = APIRouter(prefix="/misc", tags=["misc"])


@router.post("/subscribe")
async def subscribe(
    body: SubscribeRequest,
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> SuccessResponse:
    await subscriptions.subscribe(body.email)
    return envelope(messages.SUBSCRIPTION_SUCCESS)
