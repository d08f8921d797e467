"""
Marketplace Listing Scraper Package
"""
from .models import ListingRecord
from .errors import (
    ExtractionError,
    InvalidInput,
    UnsupportedSource,
    FetchFailed,
    ConfigurationMissing
)
from .fetcher import (
    Fetcher,
    DirectFetcher,
    RenderingProxyFetcher,
    BrowserFetcher,
    build_fetcher,
    validate_listing_url
)
from .pipeline import ListingExtractor, extract_listing, parse_listing_html
from .summary import build_summary
from .export import save_output_rows
from .utils import init_logger, now_iso

__version__ = "1.0.0"

__all__ = [
    "ListingRecord",
    "ExtractionError",
    "InvalidInput",
    "UnsupportedSource",
    "FetchFailed",
    "ConfigurationMissing",
    "Fetcher",
    "DirectFetcher",
    "RenderingProxyFetcher",
    "BrowserFetcher",
    "build_fetcher",
    "validate_listing_url",
    "ListingExtractor",
    "extract_listing",
    "parse_listing_html",
    "build_summary",
    "save_output_rows",
    "init_logger",
    "now_iso"
]
