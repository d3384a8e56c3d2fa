"""
Console configuration and settings management.
"""
import os
from typing import Optional


class Config:
    """Application configuration."""

    # Remote listings API
    LISTINGS_API_URL: str = os.getenv("LISTINGS_API_URL", "")
    LISTINGS_API_TOKEN: Optional[str] = os.getenv("LISTINGS_API_TOKEN") or None
    LISTINGS_BASE_PATH: str = os.getenv("LISTINGS_BASE_PATH", "/api/listings")
    PS_BASE_PATH: str = os.getenv("PS_BASE_PATH", "/api/ps")
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "30"))

    # Listing cache
    CACHE_TTL_SECONDS: float = float(os.getenv("CACHE_TTL_SECONDS", "300"))

    # API settings
    API_TITLE: str = "Listing Console"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Admin console for real-estate property listings"

    # CORS settings
    CORS_ORIGINS: list = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]

    # Pagination defaults
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 500

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "console.log")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration on startup."""
        if not cls.LISTINGS_API_URL:
            raise ValueError("LISTINGS_API_URL is not set")


# Global config instance
config = Config()
