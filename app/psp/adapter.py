"""
Payment processor adapter interface.
Every call the gateway makes to the payment processor goes through this interface,
so request handlers can be wired to a real SDK or to an in-memory fake.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class PaymentProcessor(ABC):
    """
    Base adapter for the payment processor.
    Methods that reach the network are coroutines; failures raise ProcessorError.
    """

    provider: str = "unknown"

    @abstractmethod
    async def search_customers(self, query: str) -> List[Any]:
        """
        Search processor customers.

        Args:
            query: Processor search query, e.g. 'email:"a@example.com"'

        Returns:
            Matching customer objects in processor order
        """

    @abstractmethod
    async def create_customer(self, **params: Any) -> Any:
        """
        Create a customer.

        Args:
            **params: email, name, phone, metadata
        """

    @abstractmethod
    async def create_payment_intent(self, **params: Any) -> Any:
        """
        Create a payment intent.

        Args:
            **params: Processor intent parameters (amount, currency, customer, ...)

        Returns:
            The created intent; exposes at least id and client_secret
        """

    @abstractmethod
    async def retrieve_payment_intent(self, intent_id: str) -> Dict[str, Any]:
        """Retrieve a payment intent by id, as a plain JSON-ready dict."""

    @abstractmethod
    async def create_ephemeral_key(self, customer_id: str) -> Any:
        """
        Create an ephemeral key scoped to a customer.

        Returns:
            Key object exposing secret
        """

    @abstractmethod
    async def create_setup_intent(self, customer_id: str, usage: str = "off_session") -> Any:
        """
        Create a setup intent for saving a payment method.

        Returns:
            Setup intent exposing client_secret
        """

    @abstractmethod
    async def create_charge(self, **params: Any) -> Any:
        """Create a direct charge (legacy)."""

    @abstractmethod
    def construct_webhook_event(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Verify and parse a webhook payload.

        Args:
            payload: Raw webhook payload bytes
            signature: Signature header sent by the processor

        Returns:
            Parsed event with at least type and data.object

        Raises:
            ProcessorError: If the signature or payload is invalid
        """

    def __repr__(self):
        return f"<{self.__class__.__name__}(provider={self.provider})>"
