"""
Seller description recovery.

The description lives either inline in the listing page or in a separate
document the page embeds in a frame. Resolution runs in two stages:

1. ``resolve_inline`` scans the page itself (no network).
2. ``refine`` fetches the embedded document when stage 1 came up short.

Stage 2 never raises: a failed sub-document fetch leaves the stage 1 result
in place and records the error on the result.
"""
import html as html_lib
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .config import config
from .errors import ExtractionError
from .fetcher import DirectFetcher, Fetcher
from .strategies import (
    DESCRIPTION_PATTERNS,
    MIN_DESCRIPTION_LENGTH,
    SUBDOCUMENT_THRESHOLD,
    SUBDOCUMENT_URL_PATTERNS,
)
from .utils import markup_to_lines, strip_markup

logger = logging.getLogger(__name__)


@dataclass
class DescriptionResult:
    """Candidates gathered while resolving a seller description."""

    inline: str = ""
    inline_source: str = ""
    subdocument_url: Optional[str] = None
    subdocument: str = ""
    subdocument_error: Optional[str] = None

    @property
    def needs_subdocument(self) -> bool:
        return len(self.inline) < SUBDOCUMENT_THRESHOLD

    @property
    def best(self) -> str:
        """The longer of the two candidates (inline wins ties)."""
        return self.subdocument if len(self.subdocument) > len(self.inline) else self.inline

    @property
    def best_source(self) -> str:
        if len(self.subdocument) > len(self.inline):
            return "subdocument"
        return self.inline_source


def find_subdocument_url(html: str) -> Optional[str]:
    """Locate the URL of an embedded description document, unescaped."""
    for name, pattern in SUBDOCUMENT_URL_PATTERNS:
        m = pattern.search(html or "")
        if not m:
            continue
        url = m.group(1).replace("\\/", "/").replace("\\u002F", "/").replace("\\u002f", "/")
        url = html_lib.unescape(url).strip()
        if url.startswith("//"):
            url = "https:" + url
        if url.startswith(("http://", "https://")):
            logger.debug(f"Description sub-document found via {name}: {url}")
            return url
    return None


class DescriptionResolver:
    """Two-stage seller description lookup."""

    def __init__(self, fetcher: Optional[Fetcher] = None):
        self.fetcher = fetcher or DirectFetcher(allowed_domains=config.DESCRIPTION_DOMAINS)

    def resolve_inline(self, html: str, seed: str = "", seed_source: str = "") -> DescriptionResult:
        """
        Stage 1: settle the description from the page itself.

        seed is a description from structured metadata. When it is meaningful
        it is kept as is and the inline containers are not consulted;
        otherwise the longest inline candidate wins.
        """
        result = DescriptionResult()
        if len(seed) > MIN_DESCRIPTION_LENGTH:
            result.inline, result.inline_source = seed, seed_source
        else:
            for name, pattern in DESCRIPTION_PATTERNS:
                m = pattern.search(html or "")
                if not m:
                    continue
                cleaned = strip_markup(m.group(1))
                if len(cleaned) > MIN_DESCRIPTION_LENGTH and len(cleaned) > len(result.inline):
                    result.inline, result.inline_source = cleaned, name

        if result.needs_subdocument:
            result.subdocument_url = find_subdocument_url(html)
        return result

    async def refine(self, result: DescriptionResult) -> DescriptionResult:
        """Stage 2: fetch the embedded description document if one is needed."""
        if not result.needs_subdocument or not result.subdocument_url:
            return result
        try:
            document = await self.fetcher.fetch(result.subdocument_url)
        except (ExtractionError, httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Description sub-document unavailable, keeping inline text: {e}")
            result.subdocument_error = str(e)
            return result

        result.subdocument = markup_to_lines(document)
        logger.info(
            f"Description sub-document yielded {len(result.subdocument)} chars "
            f"(inline had {len(result.inline)})"
        )
        return result

    async def resolve(self, html: str, seed: str = "", seed_source: str = "") -> DescriptionResult:
        return await self.refine(self.resolve_inline(html, seed, seed_source))
