# app/main.py

from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, get_settings, load_environment, validate_settings

# ---------------------------------------------
# LOAD ENVIRONMENT VARIABLES
# ---------------------------------------------
load_environment()

from app.logging_config import configure_logging, get_logger
from app.middleware import request_context_middleware
from app.psp.adapter import PaymentProcessor
from app.psp.dispatcher import build_processor
from app.services.identity_service import IdentityClient

# ---------------------------------------------
# IMPORT ROUTERS
# ---------------------------------------------
from app.routers import (
    payment_intents,
    payments,
    webhooks_stripe,
)

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    processor: Optional[PaymentProcessor] = None,
    identity_client: Optional[IdentityClient] = None,
) -> FastAPI:
    """
    Build the gateway application.

    The processor adapter and identity client are built here, or injected for
    tests, and handed to request handlers through app.state dependencies.
    """
    settings = settings or get_settings()
    configure_logging(settings.APP_NAME, settings.ENVIRONMENT, settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        validate_settings(settings)
        http_client = None
        if getattr(app.state, "identity_client", None) is None:
            http_client = httpx.AsyncClient(timeout=settings.IDENTITY_TIMEOUT_SECONDS)
            app.state.identity_client = IdentityClient(
                http_client,
                base_url=settings.IDENTITY_SERVICE_URL,
                profile_path=settings.IDENTITY_PROFILE_PATH,
                validate_path=settings.IDENTITY_VALIDATE_PATH,
                notify_path=settings.IDENTITY_PAYMENT_NOTIFY_PATH,
            )
        logger.info("gateway_started", environment=settings.ENVIRONMENT, port=settings.PORT)
        try:
            yield
        finally:
            if http_client is not None:
                await http_client.aclose()
                app.state.identity_client = None
            logger.info("gateway_stopped")

    # ---------------------------------------------
    # APP INIT
    # ---------------------------------------------
    app = FastAPI(
        title="Storefront Payment Gateway",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.processor = processor or build_processor(settings)
    app.state.identity_client = identity_client

    # ---------------------------------------------
    # MIDDLEWARE
    # ---------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_context_middleware(settings.REQUEST_ID_HEADER))

    # ---------------------------------------------
    # ROUTERS
    # ---------------------------------------------
    app.include_router(payment_intents.router)
    app.include_router(payments.router)
    app.include_router(webhooks_stripe.router)

    # ---------------------------------------------
    # ROOT ENDPOINT
    # ---------------------------------------------
    @app.get("/")
    def root():
        return {"message": "Storefront payment gateway is running"}

    return app


app = create_app()


def run():
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
