"""
config.py — RegimeWise application settings.

Usage:
    from regimewise.config import settings
    print(settings.default_tax_year)

Import the module-level singleton directly; never construct Settings per request.
"""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REGIMEWISE_",
        case_sensitive=False,
        extra="ignore",  # Silently ignore any extra env vars
    )

    # --- Tax rules ---
    # Key into the tax-year registry in engine/regimes.py
    default_tax_year: str = "FY2025-26"

    # When True the Section 80C group is clamped at the statutory cap before it
    # reduces Old Regime taxable income. Off by default: only the utilization
    # report clamps.
    enforce_investment_cap: bool = False

    # --- CORS ---
    # Comma-separated list of allowed frontend origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # --- Application ---
    debug: bool = False
    app_version: str = "0.1.0"

    @property
    def cors_origins_list(self) -> List[str]:
        """Split comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Module-level singleton — import this throughout the codebase
settings = Settings()
