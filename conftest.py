"""
Shared pytest fixtures: sample listing pages and a recording mock transport.
"""
from typing import Callable, Dict, List

import httpx
import pytest


LISTING_URL = "https://www.ebay.com/itm/1234567890"

LISTING_HTML = """<!DOCTYPE html>
<html><head>
<title>Vintage Levi's 501 | eBay</title>
<meta property="og:title" content="Vintage Levi's 501 | MarketSite">
</head><body>
<div class="x-price-primary"><span itemprop="price" content="45.00">US $45.00</span></div>
<div class="x-item-condition"><span class="ux-icon-text">Pre-owned</span></div>
<div class="ux-layout-section-evo__col">
  <span class="ux-textspans">Size</span>
  <div><span class="ux-textspans ux-textspans--BOLD">32</span></div>
</div>
<div class="ux-layout-section-evo__col">
  <span class="ux-textspans">Color:</span>
  <div><span class="ux-textspans ux-textspans--BOLD">Blue</span></div>
</div>
<dl><dt>See More</dt><dd>Details</dd></dl>
<dl><dt>Material</dt><dd>100% Cotton</dd></dl>
<div data-testid="d-item-description"><p>Classic straight leg jeans in great shape, light fading on the knees.</p></div>
</body></html>
"""

SUBDOCUMENT_URL = "https://vi.vipr.ebaydesc.com/itmdesc/1234567890?t=0&category=11483"

IFRAME_PAGE_HTML = """<html><head>
<meta property="og:title" content="Patagonia Better Sweater | eBay">
</head><body>
<span itemprop="price" content="60.00"></span>
<div data-testid="d-item-description">Short text</div>
<iframe id="desc_ifr" src="https://vi.vipr.ebaydesc.com/itmdesc/1234567890?t=0&amp;category=11483"></iframe>
</body></html>
"""

SUBDOCUMENT_HTML = (
    "<html><head><style>body { font-family: Arial; }</style>"
    "<script>window.track = true;</script></head><body><div>"
    + "a" * 500
    + "</div></body></html>"
)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


def pages_by_host(pages: Dict[str, httpx.Response]) -> Callable[[httpx.Request], httpx.Response]:
    """Route requests by host suffix; unknown hosts get a 404."""
    def handler(request: httpx.Request) -> httpx.Response:
        for host, response in pages.items():
            if request.url.host == host or request.url.host.endswith("." + host):
                return httpx.Response(response.status_code, headers=response.headers, content=response.content)
        return httpx.Response(404, text="not found")
    return handler


@pytest.fixture
def listing_html() -> str:
    return LISTING_HTML


@pytest.fixture
def iframe_page_html() -> str:
    return IFRAME_PAGE_HTML


@pytest.fixture
def make_transport():
    """Build a RecordingTransport serving the given pages keyed by host."""
    def _make(pages: Dict[str, httpx.Response]) -> RecordingTransport:
        return RecordingTransport(pages_by_host(pages))
    return _make
