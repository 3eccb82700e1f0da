"""
Payment-intent orchestration for the storefront checkout.

Resolves the caller's identity, finds or creates the processor customer, creates
an unconfirmed card payment intent, and for signed-in shoppers also provisions an
ephemeral key and an off-session setup intent so the client can save the card.
"""
from typing import Any, Dict, Optional

import structlog
from structlog.contextvars import bind_contextvars

from ..exceptions import ProcessorError
from ..psp.adapter import PaymentProcessor
from ..schemas_pkg.identity import IdentityResult
from ..schemas_pkg.payments import GENERIC_FAILURE_MESSAGE, CheckoutRequest
from .customer_service import CustomerResolver
from .identity_service import IdentityResolver

logger = structlog.get_logger(__name__)

INTENT_SOURCE = "laravel_app"


def failure_response(error: str) -> Dict[str, Any]:
    return {"success": False, "message": GENERIC_FAILURE_MESSAGE, "error": error}


def build_description(email: str, order_id: Optional[str]) -> str:
    description = f"Payment for {email}"
    if order_id:
        description += f" - Order #{order_id}"
    return description


def build_intent_params(
    request: CheckoutRequest,
    email: str,
    customer_id: str,
    identity: IdentityResult,
) -> Dict[str, Any]:
    return {
        "confirm": False,
        "customer": customer_id,
        "payment_method_types": ["card"],
        "payment_method_options": {
            "card": {"request_three_d_secure": request.three_d_secure},
        },
        "metadata": {
            "order_id": request.order_id or "",
            "laravel_user_id": identity.external_id,
            "authenticated": str(identity.authenticated).lower(),
            "source": INTENT_SOURCE,
        },
        "amount": request.amount,
        "currency": request.currency,
        "description": build_description(email, request.order_id),
        "receipt_email": email,
        "capture_method": request.capture,
    }


class IntentOrchestrator:
    def __init__(
        self,
        processor: PaymentProcessor,
        identity_resolver: IdentityResolver,
        customer_resolver: Optional[CustomerResolver] = None,
    ):
        self.processor = processor
        self.identity_resolver = identity_resolver
        self.customer_resolver = customer_resolver or CustomerResolver(processor)

    async def create_intent(self, request: CheckoutRequest) -> Dict[str, Any]:
        identity = await self.identity_resolver.resolve(request.cookie_woo)
        bind_contextvars(order_id=request.order_id, authenticated=identity.authenticated)

        email = request.email
        if identity.authenticated and identity.identity and identity.identity.email:
            email = identity.identity.email

        if not email:
            logger.warning("checkout_rejected", reason="missing_email")
            return failure_response("An email address is required for checkout")

        try:
            customer = await self.customer_resolver.resolve_customer(email, identity)
            params = build_intent_params(request, email, customer.id, identity)
            payment_intent = await self.processor.create_payment_intent(**params)
        except ProcessorError as e:
            logger.error("payment_intent_creation_failed", error=e.message, code=e.code)
            return failure_response(e.message)

        response: Dict[str, Any] = {
            "success": True,
            "customer_id": customer.id,
            "id": payment_intent.id,
            "client_secret": payment_intent.client_secret,
        }

        if identity.authenticated:
            response.update(await self._provision_session_objects(customer.id))

        logger.info(
            "payment_intent_created",
            payment_intent_id=payment_intent.id,
            customer_id=customer.id,
            amount=request.amount,
            currency=request.currency,
        )
        return response

    async def _provision_session_objects(self, customer_id: str) -> Dict[str, Any]:
        """Ephemeral key and setup intent for saving the card; empty dict if either fails."""
        try:
            ephemeral_key = await self.processor.create_ephemeral_key(customer_id)
            setup_intent = await self.processor.create_setup_intent(customer_id, usage="off_session")
        except ProcessorError as e:
            logger.warning("auxiliary_provisioning_failed", customer_id=customer_id, error=e.message)
            return {}

        logger.info("auxiliary_provisioning_succeeded", customer_id=customer_id)
        return {
            "ephemeral_key": ephemeral_key.secret,
            "setupIntent": setup_intent.client_secret,
        }
