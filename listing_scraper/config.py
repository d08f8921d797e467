"""
Scraper configuration and settings management.
"""
import os
from typing import Tuple


def _env_list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


class Config:
    """Scraper configuration."""

    # Rendering proxy (ScrapingBee-compatible)
    SCRAPINGBEE_API_KEY: str = os.getenv("SCRAPINGBEE_API_KEY", "")
    RENDER_PROXY_URL: str = os.getenv("RENDER_PROXY_URL", "https://app.scrapingbee.com/api/v1/")
    RENDER_WAIT_MS: int = int(os.getenv("RENDER_WAIT_MS", "3000"))

    # HTTP
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "30"))
    USER_AGENT: str = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0.0.0 Safari/537.36",
    )

    # Hosts a listing URL may point at (exact host or any subdomain)
    ALLOWED_DOMAINS: Tuple[str, ...] = _env_list("ALLOWED_DOMAINS", "ebay.com,ebay.co.uk")
    # Hosts the seller-description sub-document may be fetched from
    DESCRIPTION_DOMAINS: Tuple[str, ...] = _env_list(
        "DESCRIPTION_DOMAINS", "ebaydesc.com,ebay.com,ebay.co.uk"
    )

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


# Global config instance
config = Config()
