"""
Customer lookup and creation against the payment processor.
"""
from typing import Any, Dict

import structlog

from ..psp.adapter import PaymentProcessor
from ..schemas_pkg.identity import IdentityResult

logger = structlog.get_logger(__name__)

SOURCE_AUTHENTICATED = "laravel_authenticated"
SOURCE_GUEST = "guest_checkout"


def email_search_query(email: str) -> str:
    return 'email:"' + email + '"'


class CustomerResolver:
    def __init__(self, processor: PaymentProcessor):
        self.processor = processor

    async def resolve_customer(self, email: str, identity: IdentityResult) -> Any:
        """
        Return the processor customer for an email, creating it when none exists.

        The first search match is canonical; duplicates are left alone. A new
        customer is tagged with its origin (authenticated user or guest).
        ProcessorError propagates to the caller.
        """
        matches = await self.processor.search_customers(email_search_query(email))
        if matches:
            customer = matches[0]
            logger.info("stripe_customer_found", customer_id=customer.id, matches=len(matches))
            return customer

        params: Dict[str, Any] = {"email": email}
        if identity.authenticated and identity.identity:
            user = identity.identity
            if user.name:
                params["name"] = user.name
            if user.phone:
                params["phone"] = str(user.phone)
            params["metadata"] = {
                "laravel_user_id": user.external_id,
                "source": SOURCE_AUTHENTICATED,
            }
        else:
            params["metadata"] = {"source": SOURCE_GUEST}

        customer = await self.processor.create_customer(**params)
        logger.info(
            "stripe_customer_created",
            customer_id=customer.id,
            source=params["metadata"]["source"],
        )
        return customer
