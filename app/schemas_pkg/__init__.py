# app/schemas_pkg/__init__.py

# Payment schemas
from .payments import (
    GENERIC_FAILURE_MESSAGE,
    CheckoutRequest,
    LegacyPaymentRequest,
    PaymentIntentResponse,
    ChargeResponse,
)

# Identity schemas
from .identity import (
    IdentityUser,
    IdentityResult,
)

__all__ = [
    # Payments
    "GENERIC_FAILURE_MESSAGE",
    "CheckoutRequest",
    "LegacyPaymentRequest",
    "PaymentIntentResponse",
    "ChargeResponse",

    # Identity
    "IdentityUser",
    "IdentityResult",
]
