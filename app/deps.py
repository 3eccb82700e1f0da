import json
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from fastapi import Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from .psp.adapter import PaymentProcessor
from .services.identity_service import IdentityClient, IdentityResolver
from .services.intent_service import IntentOrchestrator
from .services.webhook_service import WebhookDispatcher

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_processor(request: Request) -> PaymentProcessor:
    return request.app.state.processor


def get_identity_client(request: Request) -> Optional[IdentityClient]:
    # None outside the lifespan, when no client was injected
    return getattr(request.app.state, "identity_client", None)


def get_intent_orchestrator(
    processor: PaymentProcessor = Depends(get_processor),
    identity_client: Optional[IdentityClient] = Depends(get_identity_client),
) -> IntentOrchestrator:
    return IntentOrchestrator(processor, IdentityResolver(identity_client))


def get_webhook_dispatcher(
    identity_client: Optional[IdentityClient] = Depends(get_identity_client),
) -> WebhookDispatcher:
    return WebhookDispatcher(identity_client)


async def read_body(request: Request) -> Dict[str, Any]:
    """
    Read a JSON or urlencoded form body into a dict.
    An empty body reads as {}.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/x-www-form-urlencoded"):
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    return data if isinstance(data, dict) else {}


def parse_body(model: Type[ModelT]) -> Callable[..., ModelT]:
    """
    Dependency factory validating a JSON or form body against a pydantic model.

    Usage:
        @router.post("/pay")
        async def pay(body: CheckoutRequest = Depends(parse_body(CheckoutRequest))):
            ...
    """
    async def dependency(payload: Dict[str, Any] = Depends(read_body)) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise RequestValidationError(e.errors(include_url=False))

    return dependency
