"""
Gateway exception hierarchy.

Processor and identity-service failures are translated into these types at the
adapter boundary so the orchestration code never handles SDK exceptions directly.
"""
from typing import Any, Dict, Optional


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.message,
        }


class ProcessorError(GatewayError):
    """
    The payment processor rejected a call or could not be reached.

    Examples:
    - Card declined on a confirmed payment intent
    - Invalid API key
    - Webhook signature verification failed
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        error_type: Optional[str] = None,
        raw: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code)
        self.http_status = http_status
        self.error_type = error_type or "ProcessorError"
        self.raw = raw or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.error_type,
            "code": self.code,
            "message": self.message,
            "statusCode": self.http_status,
            "raw": self.raw,
        }


class IdentityServiceError(GatewayError):
    """The identity backend could not be reached or answered unexpectedly."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
