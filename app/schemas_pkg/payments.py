from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

GENERIC_FAILURE_MESSAGE = "Transaction failed. Please check the card information and try again."


class CheckoutRequest(BaseModel):
    """Body of POST /payment-intent-v4. Wire names are the storefront's camelCase."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    amount: int = Field(..., gt=0, description="Amount in smallest currency unit (e.g., cents)")
    request_3d_secure: Optional[str] = Field(None, alias="request3dSecure")
    currency_code: Optional[str] = Field(None, alias="currencyCode")
    capture_method: Optional[str] = Field(None, alias="captureMethod")
    order_id: Optional[str] = Field(None, alias="orderId")
    email: Optional[str] = None
    # Identity-service bearer token; the storefront still sends it under its old cookie name
    cookie_woo: Optional[str] = Field(None, alias="cookieWoo")

    @field_validator("order_id", mode="before")
    @classmethod
    def stringify_order_id(cls, v):
        return v if v is None or isinstance(v, str) else str(v)

    @property
    def currency(self) -> str:
        return self.currency_code or "usd"

    @property
    def capture(self) -> str:
        return self.capture_method or "automatic"

    @property
    def three_d_secure(self) -> str:
        return self.request_3d_secure or "automatic"


class LegacyPaymentRequest(BaseModel):
    """
    Body shared by the legacy /payment and /payment-intent* endpoints.
    Values are passed to Stripe untyped; Stripe rejects bad ones and the
    endpoint answers with its usual success=false body.
    """
    model_config = ConfigDict(extra="ignore")

    amount: Any = None
    currencyCode: Any = None
    token: Any = None
    email: Any = None
    captureMethod: Any = None
    payment_method_id: Any = None
    returnUrl: Any = None
    request3dSecure: Any = None
    orderId: Any = None

    @field_validator("orderId", mode="before")
    @classmethod
    def stringify_order_id(cls, v):
        return v if v is None or isinstance(v, str) else str(v)

    @property
    def currency(self) -> Any:
        return self.currencyCode or "usd"

    @property
    def capture(self) -> Any:
        return self.captureMethod or "automatic"


class PaymentIntentResponse(BaseModel):
    """Response of the payment-intent endpoints; absent fields are omitted."""
    success: bool
    id: Optional[str] = None
    client_secret: Optional[str] = None
    customer_id: Optional[str] = None
    ephemeral_key: Optional[str] = None
    setupIntent: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None


class ChargeResponse(BaseModel):
    success: bool
    message: str
