import logging

from pydantic_settings import BaseSettings
from typing import List

_logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # App
    APP_NAME: str = "ListingLens"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Marketplace: only listings on this domain are resolved
    MARKETPLACE_DOMAIN: str = "amazon.co.jp"
    SHORT_LINK_DOMAIN: str = "amzn.to"
    ACCEPT_LANGUAGE: str = "ja,en-US;q=0.7,en;q=0.3"

    # Timeouts (seconds), markup/preview tighter, generic looser
    REDIRECT_TIMEOUT: float = 10.0
    MARKUP_SCAN_TIMEOUT: float = 8.0
    PREVIEW_SCAN_TIMEOUT: float = 8.0
    GENERIC_SCAN_TIMEOUT: float = 10.0

    # Pause between client identities in the preview scan
    IDENTITY_ROTATION_DELAY: float = 0.5

    # Sentry
    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.2
    SENTRY_ENVIRONMENT: str = "development"

    # Logging
    LOG_FORMAT: str = "json"  # "json" for production, "text" for development
    LOG_LEVEL: str = "INFO"

    # Metrics
    METRICS_ENABLED: bool = True

    def model_post_init(self, __context) -> None:
        for name in ("MARKETPLACE_DOMAIN", "SHORT_LINK_DOMAIN"):
            value = getattr(self, name).strip().lower()
            if value.startswith("www."):
                _logger.warning("%s should be a bare domain, dropping 'www.' from %s", name, value)
                value = value[4:]
            object.__setattr__(self, name, value)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
