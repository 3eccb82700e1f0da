import json
import unittest
from types import SimpleNamespace
from unittest.mock import patch

import stripe

from app.config import Settings
from app.exceptions import ProcessorError
from app.psp.dispatcher import build_processor
from app.psp.stripe_adapter import StripeAdapter
from fakes import sign_payload


class TestStripeAdapter(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.adapter = StripeAdapter(api_key="sk_test_123", webhook_secret="whsec_123", api_version="2023-08-16")

    async def test_search_binds_credentials(self):
        found = stripe.SearchResultObject.construct_from(
            {
                "object": "search_result",
                "has_more": False,
                "data": [{"id": "cus_1", "object": "customer", "email": "a@example.com"}],
            },
            "sk_test_123",
        )
        with patch.object(stripe.Customer, "search", return_value=found) as search:
            result = await self.adapter.search_customers('email:"a@example.com"')

        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].id, "cus_1")
        self.assertEqual(result[0].email, "a@example.com")
        search.assert_called_once_with(
            api_key="sk_test_123", stripe_version="2023-08-16", query='email:"a@example.com"'
        )

    async def test_none_params_are_dropped(self):
        with patch.object(stripe.PaymentIntent, "create", return_value=SimpleNamespace(id="pi_1")) as create:
            await self.adapter.create_payment_intent(amount=100, currency="usd", source=None, payment_method=None)

        kwargs = create.call_args.kwargs
        self.assertNotIn("source", kwargs)
        self.assertNotIn("payment_method", kwargs)
        self.assertEqual(kwargs["amount"], 100)

    async def test_ephemeral_key_carries_api_version(self):
        with patch.object(stripe.EphemeralKey, "create", return_value=SimpleNamespace(secret="ek")) as create:
            key = await self.adapter.create_ephemeral_key("cus_1")

        self.assertEqual(key.secret, "ek")
        create.assert_called_once_with(api_key="sk_test_123", stripe_version="2023-08-16", customer="cus_1")

    async def test_setup_intent_usage(self):
        with patch.object(stripe.SetupIntent, "create", return_value=SimpleNamespace(client_secret="s")) as create:
            await self.adapter.create_setup_intent("cus_1")
        self.assertEqual(create.call_args.kwargs["usage"], "off_session")

    async def test_retrieve_returns_plain_dict(self):
        intent = stripe.PaymentIntent.construct_from(
            {
                "id": "pi_1",
                "object": "payment_intent",
                "amount": 2000,
                "currency": "usd",
                "status": "requires_payment_method",
                "metadata": {"order_id": "1001"},
            },
            "sk_test_123",
        )
        with patch.object(stripe.PaymentIntent, "retrieve", return_value=intent) as retrieve:
            result = await self.adapter.retrieve_payment_intent("pi_1")

        self.assertEqual(retrieve.call_args.kwargs["id"], "pi_1")
        self.assertIs(type(result), dict)
        self.assertIs(type(result["metadata"]), dict)
        self.assertEqual(result["amount"], 2000)
        self.assertEqual(result["metadata"], {"order_id": "1001"})
        self.assertNotIn("sk_test_123", json.dumps(result))

    async def test_stripe_error_translated(self):
        error = stripe.CardError(
            "Your card was declined.",
            None,
            "card_declined",
            http_status=402,
            json_body={"error": {"type": "card_error", "code": "card_declined"}},
        )
        with patch.object(stripe.Charge, "create", side_effect=error):
            with self.assertRaises(ProcessorError) as ctx:
                await self.adapter.create_charge(amount=100, currency="usd", source="tok_chargeDeclined")

        e = ctx.exception
        self.assertEqual(e.message, "Your card was declined.")
        self.assertEqual(e.code, "card_declined")
        self.assertEqual(e.http_status, 402)
        self.assertEqual(e.error_type, "CardError")
        self.assertEqual(e.raw, {"type": "card_error", "code": "card_declined"})


class TestStripeWebhookVerification(unittest.TestCase):
    def test_requires_secret(self):
        adapter = StripeAdapter(api_key="sk_test_123", webhook_secret=None)
        with self.assertRaises(ProcessorError) as ctx:
            adapter.construct_webhook_event(b"{}", "t=1,v1=x")
        self.assertEqual(ctx.exception.code, "webhook_not_configured")

    def test_requires_signature(self):
        adapter = StripeAdapter(api_key="sk_test_123", webhook_secret="whsec_123")
        with self.assertRaises(ProcessorError) as ctx:
            adapter.construct_webhook_event(b"{}", None)
        self.assertEqual(ctx.exception.code, "missing_signature")

    def test_signature_mismatch(self):
        adapter = StripeAdapter(api_key="sk_test_123", webhook_secret="whsec_123")
        error = stripe.SignatureVerificationError("No signatures found matching the expected signature for payload", "t=1,v1=x")
        with patch.object(stripe.Webhook, "construct_event", side_effect=error):
            with self.assertRaises(ProcessorError) as ctx:
                adapter.construct_webhook_event(b"{}", "t=1,v1=x")
        self.assertEqual(ctx.exception.code, "invalid_signature")
        self.assertIn("No signatures found", ctx.exception.message)

    def test_malformed_payload(self):
        adapter = StripeAdapter(api_key="sk_test_123", webhook_secret="whsec_123")
        with patch.object(stripe.Webhook, "construct_event", side_effect=ValueError("Expecting value")):
            with self.assertRaises(ProcessorError) as ctx:
                adapter.construct_webhook_event(b"not json", "t=1,v1=x")
        self.assertEqual(ctx.exception.code, "invalid_payload")

    def test_signed_event_is_plain_dict(self):
        adapter = StripeAdapter(api_key="sk_test_123", webhook_secret="whsec_123")
        payload = json.dumps(
            {
                "id": "evt_1",
                "object": "event",
                "type": "payment_intent.succeeded",
                "data": {
                    "object": {
                        "id": "pi_1",
                        "object": "payment_intent",
                        "metadata": {"order_id": "1001"},
                    }
                },
            }
        ).encode()

        event = adapter.construct_webhook_event(payload, sign_payload(payload, "whsec_123"))

        self.assertIs(type(event), dict)
        self.assertEqual(event["type"], "payment_intent.succeeded")
        self.assertEqual(event["data"]["object"]["metadata"].get("order_id"), "1001")

    def test_signed_with_other_secret(self):
        adapter = StripeAdapter(api_key="sk_test_123", webhook_secret="whsec_123")
        payload = b'{"id": "evt_1", "object": "event", "type": "charge.succeeded"}'
        with self.assertRaises(ProcessorError) as ctx:
            adapter.construct_webhook_event(payload, sign_payload(payload, "whsec_other"))
        self.assertEqual(ctx.exception.code, "invalid_signature")


class TestBuildProcessor(unittest.TestCase):
    def test_stripe_from_settings(self):
        settings = Settings(
            STRIPE_SECRET_KEY="sk_test_abc", STRIPE_WEBHOOK_SECRET="whsec_abc", STRIPE_API_VERSION="2024-06-20"
        )
        adapter = build_processor(settings)

        self.assertIsInstance(adapter, StripeAdapter)
        self.assertEqual(adapter.api_key, "sk_test_abc")
        self.assertEqual(adapter.webhook_secret, "whsec_abc")
        self.assertEqual(adapter.api_version, "2024-06-20")
        self.assertEqual(repr(adapter), "<StripeAdapter(provider=stripe)>")


if __name__ == "__main__":
    unittest.main()
