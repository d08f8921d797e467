"""
API configuration and settings management.
"""
import os

from listing_scraper.config import config as scraper_config


class Config:
    """Application configuration."""

    # API settings
    API_TITLE: str = "Listing Scraper API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Extracts clothing listing details from marketplace pages"

    # CORS settings
    CORS_ORIGINS: list = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = False
    CORS_ALLOW_METHODS: list = ["GET", "OPTIONS"]
    CORS_ALLOW_HEADERS: list = ["Content-Type"]

    # Extraction defaults
    DEFAULT_USE_RENDERING_PROXY: bool = os.getenv("USE_RENDERING_PROXY", "true").strip().lower() in ("1", "true", "yes")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> list:
        """Return configuration warnings to log on startup."""
        warnings = []
        if cls.DEFAULT_USE_RENDERING_PROXY and not scraper_config.SCRAPINGBEE_API_KEY:
            warnings.append("SCRAPINGBEE_API_KEY is not set; rendered fetches will fail")
        return warnings

# Global config instance
config = Config()
