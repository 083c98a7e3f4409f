"""
Configuration - Environment-driven settings.

Environment variables:
    STOREFRONT_ENV              development | staging | production | test
    STOREFRONT_CACHE_DIR        JSON cache directory (unset: in-memory cache)
    STOREFRONT_CHECKOUT_DELAY   Seconds the order confirmation shows before the cart clears
    LOG_LEVEL                   Overrides the per-environment log level
    ALLOWED_ORIGINS             Comma-separated CORS origins for the HTTP API
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Settings:
    """Resolved settings for one process."""
    env: str = "development"
    cache_dir: Path | None = None
    checkout_delay: float = 2.0
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> Settings:
        cache_dir = os.getenv("STOREFRONT_CACHE_DIR")
        delay = os.getenv("STOREFRONT_CHECKOUT_DELAY")
        return cls(
            env=os.getenv("STOREFRONT_ENV", "development"),
            cache_dir=Path(cache_dir).expanduser() if cache_dir else None,
            checkout_delay=float(delay) if delay else 2.0,
            allowed_origins=[
                origin.strip()
                for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
                if origin.strip()
            ],
        )
