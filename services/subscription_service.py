"""Newsletter subscriptions."""

from __future__ import annotations

from pymongo.errors import DuplicateKeyError

from errors import ConflictError
from repositories.social_repository import SubscriptionRepository
from schemas.models.social import SubscriptionDoc
from shared import messages
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)


class SubscriptionService:
    def __init__(self, subscriptions: SubscriptionRepository) -> None:
        self._subscriptions = subscriptions

    async def subscribe(self, email: str) -> None:
        if await self._subscriptions.get_by_email(email) is not None:
            raise ConflictError(messages.ALREADY_SUBSCRIBED, field="email")
        try:
            await self._subscriptions.insert(SubscriptionDoc(email=email, created_at=utcnow()))
        except DuplicateKeyError as e:
            raise ConflictError(messages.ALREADY_SUBSCRIBED, field="email") from e
        log.info("newsletter_subscribed", email=email)
