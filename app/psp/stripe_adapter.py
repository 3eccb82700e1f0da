"""Stripe PSP Adapter Implementation."""
from typing import Any, Callable, Dict, List, Optional

import stripe
import structlog
from starlette.concurrency import run_in_threadpool

from ..exceptions import ProcessorError
from .adapter import PaymentProcessor

logger = structlog.get_logger(__name__)

DEFAULT_API_VERSION = "2023-08-16"


def _to_processor_error(e: stripe.StripeError) -> ProcessorError:
    body = e.json_body if isinstance(e.json_body, dict) else {}
    return ProcessorError(
        message=e.user_message or str(e),
        code=e.code,
        http_status=e.http_status,
        error_type=type(e).__name__,
        raw=body.get("error", {}),
    )


class StripeAdapter(PaymentProcessor):
    """
    Stripe payment processor adapter.

    Every SDK call is bound to this adapter's API key and API version instead of
    the module-global stripe.api_key. The SDK is blocking, so calls run in the
    server threadpool.
    """

    provider = "stripe"

    def __init__(
        self,
        api_key: Optional[str],
        webhook_secret: Optional[str] = None,
        api_version: str = DEFAULT_API_VERSION,
    ):
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.api_version = api_version

    async def _call(self, operation: str, fn: Callable[..., Any], **params: Any) -> Any:
        params = {k: v for k, v in params.items() if v is not None}
        try:
            return await run_in_threadpool(
                fn, api_key=self.api_key, stripe_version=self.api_version, **params
            )
        except stripe.StripeError as e:
            logger.error(
                "stripe_call_failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                code=e.code,
            )
            raise _to_processor_error(e) from e

    async def search_customers(self, query: str) -> List[Any]:
        result = await self._call("customers.search", stripe.Customer.search, query=query)
        return list(result.data)

    async def create_customer(self, **params: Any) -> Any:
        return await self._call("customers.create", stripe.Customer.create, **params)

    async def create_payment_intent(self, **params: Any) -> Any:
        return await self._call("payment_intents.create", stripe.PaymentIntent.create, **params)

    async def retrieve_payment_intent(self, intent_id: str) -> Dict[str, Any]:
        intent = await self._call("payment_intents.retrieve", stripe.PaymentIntent.retrieve, id=intent_id)
        return intent.to_dict()

    async def create_ephemeral_key(self, customer_id: str) -> Any:
        # stripe_version is mandatory for ephemeral keys; _call always sends it
        return await self._call("ephemeral_keys.create", stripe.EphemeralKey.create, customer=customer_id)

    async def create_setup_intent(self, customer_id: str, usage: str = "off_session") -> Any:
        return await self._call(
            "setup_intents.create", stripe.SetupIntent.create, customer=customer_id, usage=usage
        )

    async def create_charge(self, **params: Any) -> Any:
        return await self._call("charges.create", stripe.Charge.create, **params)

    def construct_webhook_event(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """Verify Stripe webhook signature."""
        if not self.webhook_secret:
            raise ProcessorError("Webhook secret not configured", code="webhook_not_configured")
        if not signature:
            raise ProcessorError(
                "No stripe-signature header value was provided.", code="missing_signature"
            )

        try:
            event = stripe.Webhook.construct_event(
                payload, signature, self.webhook_secret, api_key=self.api_key
            )
        except stripe.SignatureVerificationError as e:
            raise ProcessorError(e.user_message or str(e), code="invalid_signature") from e
        except ValueError as e:
            raise ProcessorError(f"Invalid payload: {e}", code="invalid_payload") from e
        return event.to_dict()
