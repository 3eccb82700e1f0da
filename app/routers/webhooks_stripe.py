from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse
import structlog

from ..deps import get_processor, get_webhook_dispatcher
from ..exceptions import ProcessorError
from ..psp.adapter import PaymentProcessor
from ..services.webhook_service import WebhookDispatcher

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Stripe Webhooks"])


@router.post("/webhook")
async def webhook_stripe(
    request: Request,
    processor: PaymentProcessor = Depends(get_processor),
    dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher),
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
):
    payload = await request.body()

    try:
        event = processor.construct_webhook_event(payload, stripe_signature)
    except ProcessorError as e:
        logger.warning("webhook_signature_invalid", error=e.message, code=e.code)
        return PlainTextResponse(f"Webhook Error: {e.message}", status_code=400)

    await dispatcher.dispatch(event)
    return {"received": True}
