from typing import Any, Mapping, Optional

import structlog

from ..exceptions import IdentityServiceError
from .identity_service import IdentityClient

logger = structlog.get_logger(__name__)


class WebhookDispatcher:
    """Routes verified processor events to their handlers."""

    def __init__(self, identity_client: Optional[IdentityClient] = None):
        self.identity_client = identity_client

    async def dispatch(self, event: Mapping[str, Any]) -> None:
        etype = event.get("type")
        data = event.get("data") or {}
        obj = data.get("object") or {}

        if etype == "payment_intent.succeeded":
            await self.handle_payment_intent_succeeded(obj)
        else:
            logger.info("webhook_event_unhandled", event_type=etype, event_id=event.get("id"))

    async def handle_payment_intent_succeeded(self, payment_intent: Mapping[str, Any]) -> None:
        pi_id = payment_intent.get("id")
        logger.info("payment_intent_succeeded", payment_intent_id=pi_id)

        metadata = payment_intent.get("metadata") or {}
        order_id = metadata.get("order_id")
        if not order_id or self.identity_client is None:
            return

        # Backend notification is best-effort; the event is still acknowledged
        try:
            await self.identity_client.notify_payment_success(order_id, pi_id)
        except IdentityServiceError as e:
            logger.error("payment_notification_failed", order_id=order_id, payment_intent_id=pi_id, error=e.message)
