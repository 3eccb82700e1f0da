"""
Identity backend client and resolver.
The storefront's Laravel backend owns user accounts; the gateway only asks it who
a bearer token belongs to. Lookups are best-effort: any failure degrades the
request to a guest checkout.
"""
from typing import Any, Dict, Optional

import httpx
import structlog
from pydantic import ValidationError

from ..exceptions import IdentityServiceError
from ..schemas_pkg.identity import IdentityResult, IdentityUser

logger = structlog.get_logger(__name__)

# A token that cannot be sent as a header value fails while httpx builds the request
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError)


class IdentityClient:
    """Thin HTTP client for the identity backend's user endpoints."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        profile_path: str = "user/profile",
        validate_path: str = "user/validate",
        notify_path: Optional[str] = None,
    ):
        self.http = http
        self.base_url = base_url
        self.profile_path = profile_path
        self.validate_path = validate_path
        self.notify_path = notify_path
        self.headers = {"Content-Type": "application/json"}

    def _auth_headers(self, token: str) -> Dict[str, str]:
        return {**self.headers, "Authorization": f"Bearer {token}"}

    async def get_profile(self, token: str) -> httpx.Response:
        """
        Fetch the profile for a bearer token.
        Raises IdentityServiceError on transport failure; HTTP error statuses are returned as-is.
        """
        try:
            return await self.http.get(self.base_url + self.profile_path, headers=self._auth_headers(token))
        except REQUEST_ERRORS as e:
            logger.error("identity_profile_request_failed", error=str(e), error_type=type(e).__name__)
            raise IdentityServiceError(f"Identity service unreachable: {e}") from e

    async def validate_token(self, token: str) -> Optional[bool]:
        """Return whether the backend accepts the token, or None if it could not be asked."""
        try:
            res = await self.http.get(self.base_url + self.validate_path, headers=self._auth_headers(token))
        except REQUEST_ERRORS as e:
            logger.error("identity_token_validation_failed", error=str(e), error_type=type(e).__name__)
            return None
        return res.is_success

    async def notify_payment_success(self, order_id: str, payment_intent_id: str) -> bool:
        """
        Tell the backend an order has been paid.
        Returns False when no notification endpoint is configured.
        """
        if not self.notify_path:
            logger.info("payment_notification_skipped", order_id=order_id, reason="not_configured")
            return False

        payload: Dict[str, Any] = {"order_id": order_id, "payment_intent_id": payment_intent_id}
        try:
            res = await self.http.post(self.base_url + self.notify_path, json=payload, headers=self.headers)
            res.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise IdentityServiceError(
                f"Payment notification rejected: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise IdentityServiceError(f"Identity service unreachable: {e}") from e

        logger.info("payment_notification_sent", order_id=order_id, payment_intent_id=payment_intent_id)
        return True


class IdentityResolver:
    def __init__(self, client: Optional[IdentityClient]):
        self.client = client

    async def resolve(self, token: Optional[str]) -> IdentityResult:
        """
        Resolve a bearer token to an identity.

        No token means no network call. Every failure mode (transport error,
        non-2xx status, missing or malformed user payload) yields an anonymous
        result and never raises.
        """
        # An empty cookieWoo is treated like a missing one: guest checkout, no lookup
        if not token:
            return IdentityResult.anonymous()
        if self.client is None:
            logger.warning("identity_lookup_skipped", reason="client_unavailable", fallback="guest")
            return IdentityResult.anonymous()

        try:
            res = await self.client.get_profile(token)
        except IdentityServiceError:
            logger.warning("identity_lookup_failed", fallback="guest")
            return IdentityResult.anonymous()

        if not res.is_success:
            logger.info("identity_authentication_failed", status_code=res.status_code)
            return IdentityResult.anonymous()

        try:
            data = res.json()
        except ValueError:
            logger.info("identity_authentication_failed", reason="invalid_json")
            return IdentityResult.anonymous()

        user = data.get("user") if isinstance(data, dict) else None
        if not user:
            logger.info("identity_authentication_failed", reason="missing_user")
            return IdentityResult.anonymous()

        try:
            identity = IdentityUser.model_validate(user)
        except ValidationError as e:
            logger.info("identity_authentication_failed", reason="invalid_user", error=str(e))
            return IdentityResult.anonymous()

        logger.info("identity_authenticated", user_id=identity.external_id)
        return IdentityResult(authenticated=True, identity=identity)
