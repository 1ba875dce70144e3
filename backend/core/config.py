"""
PrintDesk - Configuration settings.

Cost parameters used for pricing are business data and live in the
database (see modules/system), not here.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from core.base import StockRestorePolicy


class Settings(BaseSettings):
    """Process-level settings, read from the environment or a .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database ("sqlite://" gives a shared in-memory database)
    database_url: str = "sqlite:///./printdesk.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Empty disables the X-API-Key check on /api routes
    api_key: Optional[str] = None

    # Comma-separated, e.g. CORS_ORIGINS=http://localhost:5173. Empty allows no cross-origin callers.
    cors_origins: str = ""

    # Inventory reconciliation
    stock_restore_policy: StockRestorePolicy = StockRestorePolicy.STATUS_GATED
    allow_negative_stock: bool = False
    # Reject quotes whose lines point at filaments/accessories that do not exist
    # instead of pricing those lines at zero.
    reject_unknown_references: bool = True

    # Pricing advisor. Empty uses the built-in rule-based advisor; otherwise the
    # advisor input is POSTed here as JSON and a PricingAdvice is expected back.
    advisor_url: Optional[str] = None
    advisor_timeout: float = 30.0


settings = Settings()
