import unittest
from types import SimpleNamespace

from app.exceptions import ProcessorError
from app.schemas_pkg.identity import IdentityResult, IdentityUser
from app.services.customer_service import CustomerResolver, email_search_query
from fakes import LARAVEL_USER, FakeProcessor


class TestCustomerResolver(unittest.IsolatedAsyncioTestCase):
    async def test_existing_customer_is_reused(self):
        existing = SimpleNamespace(id="cus_existing", email="a@example.com")
        processor = FakeProcessor(customers=[existing])

        customer = await CustomerResolver(processor).resolve_customer("a@example.com", IdentityResult.anonymous())

        self.assertIs(customer, existing)
        self.assertEqual(processor.calls_to("customers.search"), [{"query": 'email:"a@example.com"'}])
        self.assertEqual(processor.calls_to("customers.create"), [])

    async def test_first_match_wins(self):
        first = SimpleNamespace(id="cus_first", email="dup@example.com")
        second = SimpleNamespace(id="cus_second", email="dup@example.com")
        processor = FakeProcessor(customers=[first, second])

        customer = await CustomerResolver(processor).resolve_customer("dup@example.com", IdentityResult.anonymous())
        self.assertEqual(customer.id, "cus_first")

    async def test_guest_customer_created_once(self):
        processor = FakeProcessor()

        customer = await CustomerResolver(processor).resolve_customer("guest@example.com", IdentityResult.anonymous())

        creates = processor.calls_to("customers.create")
        self.assertEqual(len(creates), 1)
        self.assertEqual(creates[0], {"email": "guest@example.com", "metadata": {"source": "guest_checkout"}})
        self.assertEqual(customer.email, "guest@example.com")

    async def test_authenticated_customer_carries_profile(self):
        processor = FakeProcessor()
        identity = IdentityResult(authenticated=True, identity=IdentityUser.model_validate(LARAVEL_USER))

        await CustomerResolver(processor).resolve_customer("member@example.com", identity)

        create = processor.calls_to("customers.create")[0]
        self.assertEqual(create["name"], "Ada Member")
        self.assertEqual(create["phone"], "+15550100")
        self.assertEqual(create["metadata"], {"laravel_user_id": "42", "source": "laravel_authenticated"})

    async def test_authenticated_without_optional_fields(self):
        processor = FakeProcessor()
        identity = IdentityResult(authenticated=True, identity=IdentityUser(email="bare@example.com"))

        await CustomerResolver(processor).resolve_customer("bare@example.com", identity)

        create = processor.calls_to("customers.create")[0]
        self.assertNotIn("name", create)
        self.assertNotIn("phone", create)
        self.assertEqual(create["metadata"], {"laravel_user_id": "", "source": "laravel_authenticated"})

    async def test_creation_failure_propagates(self):
        processor = FakeProcessor()
        processor.fail["customers.create"] = ProcessorError("Invalid email address: nope")

        with self.assertRaises(ProcessorError):
            await CustomerResolver(processor).resolve_customer("nope", IdentityResult.anonymous())

    def test_email_search_query(self):
        self.assertEqual(email_search_query("x@y.z"), 'email:"x@y.z"')


if __name__ == "__main__":
    unittest.main()
