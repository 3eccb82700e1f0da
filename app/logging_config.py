"""
Structured logging configuration using structlog.
"""
import logging
import sys
from typing import Any, Dict

import structlog

_app_context: Dict[str, str] = {
    "app": "storefront-payment-gateway",
    "environment": "production",
}


def add_app_context(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    """Add application context to log entries."""
    event_dict.setdefault("app", _app_context["app"])
    event_dict.setdefault("environment", _app_context["environment"])
    return event_dict


def configure_logging(
    app_name: str = "storefront-payment-gateway",
    environment: str = "production",
    level: str = "INFO",
) -> None:
    """Configure stdlib logging and structlog with processors."""
    _app_context["app"] = app_name
    _app_context["environment"] = environment

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            add_app_context,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Initialize logging with defaults; create_app reconfigures from settings
configure_logging()


def get_logger(name: str = __name__):
    """Get a structured logger instance."""
    return structlog.get_logger(name)
