"""
Stripe payment-intent routes used by the storefront checkout.
"""
from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..deps import get_intent_orchestrator, get_processor, parse_body
from ..exceptions import ProcessorError
from ..psp.adapter import PaymentProcessor
from ..schemas_pkg.payments import CheckoutRequest, PaymentIntentResponse
from ..services.intent_service import IntentOrchestrator

router = APIRouter(tags=["Payment Intents"])


@router.post(
    "/payment-intent-v4",
    response_model=PaymentIntentResponse,
    response_model_exclude_none=True,
)
async def create_payment_intent_v4(
    body: CheckoutRequest = Depends(parse_body(CheckoutRequest)),
    orchestrator: IntentOrchestrator = Depends(get_intent_orchestrator),
):
    """
    Create an unconfirmed card payment intent for a checkout.

    Guests are identified by email. When cookieWoo carries a backend bearer token,
    the signed-in user's email wins, and the response also carries an ephemeral
    key and a setup intent secret for saving the card. Payment failures respond
    200 with success=false.
    """
    return await orchestrator.create_intent(body)


@router.get("/payment-intent/{intent_id}")
async def retrieve_payment_intent(
    intent_id: str,
    processor: PaymentProcessor = Depends(get_processor),
):
    """Return the raw processor intent, or the raw processor error with its HTTP status."""
    try:
        intent = await processor.retrieve_payment_intent(intent_id)
    except ProcessorError as e:
        return JSONResponse(content=jsonable_encoder(e.to_dict()), status_code=e.http_status or 500)
    return JSONResponse(content=jsonable_encoder(intent))
