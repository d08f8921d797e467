"""
Page retrieval: direct HTTP, rendering proxy, or a local headless browser.

Every fetcher validates the URL against its allow-list before touching the
network and performs exactly one attempt.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple
from urllib.parse import urlsplit

import httpx
from playwright.async_api import async_playwright, Error as PlaywrightError

from .config import config
from .errors import ConfigurationMissing, FetchFailed, InvalidInput, UnsupportedSource

logger = logging.getLogger(__name__)

FETCH_MODES = ("direct", "proxy", "browser")


def validate_listing_url(url: Optional[str], allowed_domains: Iterable[str]) -> str:
    """Check that url is well formed and on an allowed host; return the host."""
    if not url or not url.strip():
        raise InvalidInput("URL parameter required")
    try:
        parts = urlsplit(url.strip())
        host = (parts.hostname or "").lower()
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        raise InvalidInput(f"Invalid URL: {url}")
    if parts.scheme not in ("http", "https") or not host:
        raise InvalidInput(f"Invalid URL: {url}")

    for domain in allowed_domains:
        if host == domain or host.endswith("." + domain):
            return host
    raise UnsupportedSource(f"Unsupported listing host: {host}")


def browser_headers() -> dict:
    return {
        "User-Agent": config.USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


class Fetcher(ABC):
    """Retrieve the raw HTML of a listing page."""

    name = "base"

    def __init__(
        self,
        allowed_domains: Optional[Iterable[str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.allowed_domains: Tuple[str, ...] = tuple(
            allowed_domains if allowed_domains is not None else config.ALLOWED_DOMAINS
        )
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.transport = transport

    async def fetch(self, url: str) -> str:
        host = validate_listing_url(url, self.allowed_domains)
        logger.info(f"Fetching {host} via {self.name}")
        return await self._fetch(url.strip())

    @abstractmethod
    async def _fetch(self, url: str) -> str:
        raise NotImplementedError

    def _client(self, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport, **kwargs)


class DirectFetcher(Fetcher):
    """Plain GET with a browser-like request signature."""

    name = "direct"

    async def _fetch(self, url: str) -> str:
        async with self._client(headers=browser_headers(), follow_redirects=True) as client:
            try:
                resp = await client.get(url)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise FetchFailed(0, f"Request failed: {e}") from e

        if not resp.is_success:
            raise FetchFailed(resp.status_code, f"Upstream returned HTTP {resp.status_code}")
        return resp.text


class RenderingProxyFetcher(Fetcher):
    """Fetch through a JS-rendering proxy that waits for the page to settle."""

    name = "proxy"

    def __init__(
        self,
        api_key: Optional[str] = None,
        proxy_url: Optional[str] = None,
        wait_ms: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_key = config.SCRAPINGBEE_API_KEY if api_key is None else api_key
        self.proxy_url = proxy_url or config.RENDER_PROXY_URL
        self.wait_ms = config.RENDER_WAIT_MS if wait_ms is None else wait_ms

    async def _fetch(self, url: str) -> str:
        if not self.api_key:
            raise ConfigurationMissing("Rendering proxy API key not configured")

        params = {
            "api_key": self.api_key,
            "url": url,
            "render_js": "true",
            "wait": str(self.wait_ms),
        }
        # The proxy holds the request open for the settle interval
        timeout = self.timeout + self.wait_ms / 1000
        async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
            try:
                resp = await client.get(self.proxy_url, params=params)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise FetchFailed(0, f"Rendering proxy unreachable: {e}") from e

        if not resp.is_success:
            raise FetchFailed(resp.status_code, f"Rendering proxy error: {resp.text}")
        return resp.text


class BrowserFetcher(Fetcher):
    """Render the page in a local headless Chromium via Playwright."""

    name = "browser"

    def __init__(self, wait_ms: Optional[int] = None, headless: bool = True, **kwargs):
        super().__init__(**kwargs)
        self.wait_ms = config.RENDER_WAIT_MS if wait_ms is None else wait_ms
        self.headless = headless

    async def _fetch(self, url: str) -> str:
        launch_args = ["--disable-blink-features=AutomationControlled"]
        if self.headless:
            launch_args += ["--disable-dev-shm-usage", "--no-sandbox", "--disable-gpu"]

        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=self.headless, args=launch_args)
                try:
                    context = await browser.new_context(
                        viewport={"width": 1280, "height": 900},
                        user_agent=config.USER_AGENT,
                        locale="en-US",
                    )
                    page = await context.new_page()
                    resp = await page.goto(
                        url, timeout=self.timeout * 1000, wait_until="domcontentloaded"
                    )
                    if resp is not None and not resp.ok:
                        raise FetchFailed(resp.status, f"Upstream returned HTTP {resp.status}")
                    await asyncio.sleep(self.wait_ms / 1000)
                    return await page.content()
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise FetchFailed(0, f"Browser fetch failed: {e}") from e


def build_fetcher(mode: str = "direct", **kwargs) -> Fetcher:
    """Create the fetcher for one of FETCH_MODES."""
    if mode == "direct":
        return DirectFetcher(**kwargs)
    if mode == "proxy":
        return RenderingProxyFetcher(**kwargs)
    if mode == "browser":
        return BrowserFetcher(**kwargs)
    raise ValueError(f"Unknown fetch mode: {mode}")
