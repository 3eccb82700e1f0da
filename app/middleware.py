"""
Request context middleware.
Every log line emitted while serving a checkout call carries the request id
the storefront sent, so a failed payment can be traced across storefront,
gateway and backend logs.
"""
import time
import uuid
from typing import Awaitable, Callable, Optional

from fastapi import Request, Response
from structlog.contextvars import bind_contextvars, clear_contextvars

from app.logging_config import get_logger

logger = get_logger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


def _route_template(request: Request) -> Optional[str]:
    # Set by the router once a route matched; keeps /payment-intent/{intent_id} aggregated
    route = request.scope.get("route")
    return getattr(route, "path", None)


def request_context_middleware(header_name: str = "X-Request-ID"):
    """
    Build the HTTP middleware that binds request context to structlog.

    Args:
        header_name: Header carrying the caller's request id; echoed on the response

    Usage:
        app.middleware("http")(request_context_middleware(settings.REQUEST_ID_HEADER))
    """

    async def middleware(request: Request, call_next: CallNext) -> Response:
        request_id = request.headers.get(header_name) or uuid.uuid4().hex

        clear_contextvars()
        bind_contextvars(request_id=request_id, method=request.method, path=request.url.path)
        request.state.request_id = request_id

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                endpoint=_route_template(request),
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise
        else:
            logger.info(
                "request_completed",
                endpoint=_route_template(request),
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            response.headers[header_name] = request_id
            return response
        finally:
            clear_contextvars()

    return middleware
