"""
Legacy payment routes kept for older storefront builds.
Response shapes are frozen; new clients use /payment-intent-v4.
"""
import json

import structlog
from fastapi import APIRouter, Depends

from ..deps import get_processor, parse_body
from ..exceptions import ProcessorError
from ..psp.adapter import PaymentProcessor
from ..schemas_pkg.payments import (
    GENERIC_FAILURE_MESSAGE,
    ChargeResponse,
    LegacyPaymentRequest,
    PaymentIntentResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Legacy Payments"])


@router.post("/payment-intent", response_model=PaymentIntentResponse, response_model_exclude_none=True)
async def create_confirmed_payment_intent(
    body: LegacyPaymentRequest = Depends(parse_body(LegacyPaymentRequest)),
    processor: PaymentProcessor = Depends(get_processor),
):
    """Create and immediately confirm a card payment intent."""
    try:
        intent = await processor.create_payment_intent(
            confirm=True,
            payment_method_types=["card"],
            payment_method=body.payment_method_id,
            return_url=body.returnUrl,
            amount=body.amount,
            currency=body.currency,
            source=body.token,
            description=body.email,
            receipt_email=body.email,
            capture_method=body.capture,
        )
    except ProcessorError as e:
        logger.error("legacy_payment_intent_failed", endpoint="/payment-intent", error=e.message)
        return {
            "success": False,
            "message": "Transaction error" + json.dumps(e.to_dict(), separators=(",", ":")),
        }
    return {"success": True, "id": intent.id, "client_secret": intent.client_secret}


@router.post("/payment", response_model=ChargeResponse)
async def create_charge(
    body: LegacyPaymentRequest = Depends(parse_body(LegacyPaymentRequest)),
    processor: PaymentProcessor = Depends(get_processor),
):
    """Charge a card token directly."""
    try:
        await processor.create_charge(
            amount=body.amount,
            currency=body.currency,
            source=body.token,
            description=body.email,
        )
    except ProcessorError as e:
        logger.error("legacy_charge_failed", endpoint="/payment", error=e.message)
        return {"success": False, "message": GENERIC_FAILURE_MESSAGE}
    return {"success": True, "message": "Payment has been charged!!"}


@router.post("/payment-intent-v2", response_model=PaymentIntentResponse, response_model_exclude_none=True)
async def create_payment_intent_v2(
    body: LegacyPaymentRequest = Depends(parse_body(LegacyPaymentRequest)),
    processor: PaymentProcessor = Depends(get_processor),
):
    """Create an unconfirmed card payment intent without a customer."""
    try:
        intent = await processor.create_payment_intent(
            confirm=False,
            payment_method_types=["card"],
            amount=body.amount,
            currency=body.currency,
            source=body.token,
            description=body.email,
            receipt_email=body.email,
            capture_method=body.capture,
        )
    except ProcessorError as e:
        logger.error("legacy_payment_intent_failed", endpoint="/payment-intent-v2", error=e.message)
        return {"success": False, "message": GENERIC_FAILURE_MESSAGE}
    return {"success": True, "id": intent.id, "client_secret": intent.client_secret}


@router.post("/payment-intent-v3", response_model=PaymentIntentResponse, response_model_exclude_none=True)
async def create_payment_intent_v3(
    body: LegacyPaymentRequest = Depends(parse_body(LegacyPaymentRequest)),
    processor: PaymentProcessor = Depends(get_processor),
):
    """Create an unconfirmed payment intent for a brand-new customer on every call."""
    try:
        customer = await processor.create_customer(email=body.email)
        intent = await processor.create_payment_intent(
            confirm=False,
            customer=customer.id,
            payment_method_types=["card"],
            payment_method_options={
                "card": {"request_three_d_secure": body.request3dSecure or "automatic"},
            },
            metadata={"order_id": body.orderId} if body.orderId else None,
            amount=body.amount,
            currency=body.currency,
            source=body.token,
            description=body.email,
            receipt_email=body.email,
            capture_method=body.capture,
        )
    except ProcessorError as e:
        logger.error("legacy_payment_intent_failed", endpoint="/payment-intent-v3", error=e.message)
        return {"success": False, "message": GENERIC_FAILURE_MESSAGE}
    return {"success": True, "id": intent.id, "client_secret": intent.client_secret}
