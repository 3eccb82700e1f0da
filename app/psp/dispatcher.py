"""PSP Adapter Dispatcher - Builds the processor adapter from settings."""
import structlog

from ..config import Settings
from .adapter import PaymentProcessor
from .stripe_adapter import StripeAdapter

logger = structlog.get_logger(__name__)


def build_processor(settings: Settings) -> PaymentProcessor:
    """
    Build the Stripe processor adapter.

    Args:
        settings: Application settings carrying processor credentials

    Returns:
        Initialized processor adapter
    """
    if not settings.STRIPE_SECRET_KEY:
        logger.warning("stripe_secret_key_missing")
    return StripeAdapter(
        api_key=settings.STRIPE_SECRET_KEY,
        webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
        api_version=settings.STRIPE_API_VERSION,
    )
