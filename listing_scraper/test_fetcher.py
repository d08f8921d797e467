"""
Tests for URL validation and the fetch strategies.
"""
import asyncio

import httpx
import pytest

from conftest import LISTING_URL
from listing_scraper.config import config
from listing_scraper.errors import ConfigurationMissing, FetchFailed, InvalidInput, UnsupportedSource
from listing_scraper.fetcher import (
    BrowserFetcher,
    DirectFetcher,
    RenderingProxyFetcher,
    build_fetcher,
    validate_listing_url,
)


def test_validate_listing_url_returns_host():
    assert validate_listing_url("https://WWW.eBay.com/itm/1", ["ebay.com"]) == "www.ebay.com"
    assert validate_listing_url("http://ebay.co.uk/itm/1", ["ebay.com", "ebay.co.uk"]) == "ebay.co.uk"


def test_validate_listing_url_errors():
    with pytest.raises(InvalidInput):
        validate_listing_url(None, ["ebay.com"])
    with pytest.raises(InvalidInput):
        validate_listing_url("www.ebay.com/itm/1", ["ebay.com"])
    with pytest.raises(UnsupportedSource):
        validate_listing_url("https://www.poshmark.com/listing/1", ["ebay.com"])
    with pytest.raises(UnsupportedSource):
        validate_listing_url("https://notebay.com/itm/1", ["ebay.com"])
    with pytest.raises(InvalidInput):
        validate_listing_url("https://www.ebay.com:abc/itm/1", ["ebay.com"])


def test_proxy_request_parameters(make_transport):
    transport = make_transport({"scrapingbee.com": httpx.Response(200, text="<html></html>")})
    fetcher = RenderingProxyFetcher(api_key="secret", wait_ms=3000, transport=transport)

    assert asyncio.run(fetcher.fetch(LISTING_URL)) == "<html></html>"

    params = transport.requests[0].url.params
    assert params["api_key"] == "secret"
    assert params["url"] == LISTING_URL
    assert params["render_js"] == "true"
    assert params["wait"] == "3000"


def test_proxy_without_key_fails_before_request(make_transport, monkeypatch):
    monkeypatch.setattr(config, "SCRAPINGBEE_API_KEY", "")
    transport = make_transport({})
    with pytest.raises(ConfigurationMissing):
        asyncio.run(RenderingProxyFetcher(transport=transport).fetch(LISTING_URL))
    assert transport.requests == []


def test_proxy_checks_url_before_key():
    with pytest.raises(UnsupportedSource):
        asyncio.run(RenderingProxyFetcher(api_key="").fetch("https://example.com/item"))


def test_proxy_error_surfaces_body(make_transport):
    transport = make_transport({"scrapingbee.com": httpx.Response(401, text="Invalid api key")})
    with pytest.raises(FetchFailed) as exc_info:
        asyncio.run(RenderingProxyFetcher(api_key="bad", transport=transport).fetch(LISTING_URL))

    assert exc_info.value.status == 401
    assert exc_info.value.message == "Rendering proxy error: Invalid api key"


def test_direct_fetch_follows_redirects(make_transport):
    def handler(request):
        if request.url.path == "/itm/1":
            return httpx.Response(301, headers={"Location": "https://www.ebay.com/itm/2"})
        return httpx.Response(200, text="moved")

    fetcher = DirectFetcher(transport=httpx.MockTransport(handler))
    assert asyncio.run(fetcher.fetch("https://www.ebay.com/itm/1")) == "moved"


def test_browser_fetcher_validates_before_launch():
    with pytest.raises(UnsupportedSource):
        asyncio.run(BrowserFetcher().fetch("https://www.depop.com/products/1"))


def test_build_fetcher_modes():
    assert isinstance(build_fetcher("direct"), DirectFetcher)
    assert isinstance(build_fetcher("proxy", api_key="k"), RenderingProxyFetcher)
    assert isinstance(build_fetcher("browser"), BrowserFetcher)
    with pytest.raises(ValueError):
        build_fetcher("carrier-pigeon")


def test_client_rejecting_url_becomes_fetch_failure():
    def handler(request):
        raise httpx.InvalidURL("Invalid port: 'abc'")

    with pytest.raises(FetchFailed) as exc_info:
        asyncio.run(DirectFetcher(transport=httpx.MockTransport(handler)).fetch(LISTING_URL))
    assert exc_info.value.status == 0
