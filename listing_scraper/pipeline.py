"""
Listing extraction orchestration.

Sources are applied in priority order and never overwrite each other:
structured metadata, then page patterns, then the description sub-document.
"""
import logging
from typing import Optional

import httpx

from .config import config
from .description import DescriptionResolver, DescriptionResult
from .fetcher import DirectFetcher, Fetcher, build_fetcher
from .fields import apply_field_extractors
from .models import ListingRecord
from .strategies import MAX_DESCRIPTION_LENGTH
from .structured import extract_structured
from .summary import build_summary
from .utils import truncate

logger = logging.getLogger(__name__)


def _first_pass(html: str) -> ListingRecord:
    record = ListingRecord().merge(extract_structured(html))
    return apply_field_extractors(record, html)


def _finish(record: ListingRecord, result: DescriptionResult) -> ListingRecord:
    text, truncated = truncate(result.best, MAX_DESCRIPTION_LENGTH)
    record.description = text
    record.description_truncated = truncated
    if text:
        record.sources["description"] = result.best_source
    else:
        record.sources.pop("description", None)

    record.summary = build_summary(record)
    if record.is_partial:
        logger.info(f"Partial extraction, missing: {', '.join(record.missing_fields)}")
    return record


def _description_seed(record: ListingRecord):
    return record.description, record.sources.get("description", "")


def parse_listing_html(html: str) -> ListingRecord:
    """Extract a record from already-fetched HTML without any network access."""
    record = _first_pass(html)
    result = DescriptionResolver().resolve_inline(html, *_description_seed(record))
    return _finish(record, result)


class ListingExtractor:
    """Fetch a listing page and turn it into a ListingRecord."""

    def __init__(self, fetcher: Fetcher, description_fetcher: Optional[Fetcher] = None):
        self.fetcher = fetcher
        self.resolver = DescriptionResolver(description_fetcher)

    async def extract(self, url: str) -> ListingRecord:
        html = await self.fetcher.fetch(url)
        logger.info(f"Fetched {len(html)} chars from {url}")
        return await self.extract_html(html)

    async def extract_html(self, html: str) -> ListingRecord:
        record = _first_pass(html)
        result = await self.resolver.resolve(html, *_description_seed(record))
        return _finish(record, result)


def build_extractor(
    use_rendering_proxy: bool = False,
    fetch_mode: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **fetcher_kwargs,
) -> ListingExtractor:
    """
    Wire the default fetchers.

    The description sub-document always goes through a plain direct fetch;
    only the listing page itself uses the rendering strategy.
    """
    mode = fetch_mode or ("proxy" if use_rendering_proxy else "direct")
    fetcher = build_fetcher(mode, transport=transport, **fetcher_kwargs)
    description_fetcher = DirectFetcher(
        allowed_domains=config.DESCRIPTION_DOMAINS, transport=transport
    )
    return ListingExtractor(fetcher, description_fetcher)


async def extract_listing(
    url: str,
    use_rendering_proxy: bool = False,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ListingRecord:
    """Fetch and extract one listing."""
    return await build_extractor(use_rendering_proxy, transport=transport).extract(url)
