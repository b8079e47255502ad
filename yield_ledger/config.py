"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Yield Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = _env_bool("DEBUG", "false")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/yield_ledger"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Accrual engine. The background sweep is disabled when the
    # interval is 0; investments are still accrued on read.
    ACCRUAL_SWEEP_INTERVAL_SECONDS: int = int(
        os.getenv("ACCRUAL_SWEEP_INTERVAL_SECONDS", "300")
    )

    # Whether cancelling an active investment returns its principal
    REFUND_ON_CANCEL: bool = _env_bool("REFUND_ON_CANCEL", "true")

    # Reporting
    RECENT_TRANSACTIONS_LIMIT: int = int(
        os.getenv("RECENT_TRANSACTIONS_LIMIT", "10")
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()
