"""
Configuration settings for the storefront payment gateway
Handles environment variables and application settings
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "storefront-payment-gateway"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    # Request id header read from callers and echoed on responses
    REQUEST_ID_HEADER: str = "X-Request-ID"

    # CORS (comma separated)
    ALLOWED_ORIGINS: str = "*"

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None
    STRIPE_API_VERSION: str = "2023-08-16"

    # Identity service (Laravel backend)
    IDENTITY_SERVICE_URL: str = "https://g5mall.com/api/"
    IDENTITY_PROFILE_PATH: str = "user/profile"
    IDENTITY_VALIDATE_PATH: str = "user/validate"
    IDENTITY_PAYMENT_NOTIFY_PATH: Optional[str] = None
    IDENTITY_TIMEOUT_SECONDS: float = 10.0

    @field_validator("IDENTITY_SERVICE_URL")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        return v if v.endswith("/") else v + "/"

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields from .env file


@lru_cache
def get_settings() -> Settings:
    return Settings()


def validate_settings(settings: Settings) -> None:
    """Validate critical settings"""
    issues = []

    if settings.ENVIRONMENT == "production" and not settings.STRIPE_SECRET_KEY:
        issues.append("STRIPE_SECRET_KEY must be set in production")

    if issues:
        raise ValueError(f"Configuration issues: {', '.join(issues)}")
