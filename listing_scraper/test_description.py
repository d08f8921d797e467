"""
Tests for seller description resolution.
"""
import asyncio

import httpx

from conftest import IFRAME_PAGE_HTML, SUBDOCUMENT_HTML, SUBDOCUMENT_URL
from listing_scraper.description import DescriptionResolver, DescriptionResult, find_subdocument_url
from listing_scraper.fetcher import DirectFetcher


def resolver_for(transport) -> DescriptionResolver:
    return DescriptionResolver(DirectFetcher(allowed_domains=["ebaydesc.com"], transport=transport))


def test_inline_description_is_cleaned(listing_html):
    result = DescriptionResolver().resolve_inline(listing_html)
    assert result.inline == "Classic straight leg jeans in great shape, light fading on the knees."
    assert result.inline_source == "testid_item_description"
    assert result.subdocument_url is None


def test_inline_description_strips_markup_and_entities():
    html = (
        '<div class="item-description">'
        "<style>.x{color:red}</style><b>Gently&nbsp;worn</b> &amp; washed,\n\n  "
        "smoke&#39;free   home.</div>"
    )
    result = DescriptionResolver().resolve_inline(html)
    assert result.inline == "Gently worn & washed, smoke'free home."


def test_short_inline_text_is_discarded():
    result = DescriptionResolver().resolve_inline('<div id="viTabs_0_is">Too short</div>')
    assert result.inline == ""


def test_longest_inline_candidate_wins():
    html = (
        '<div data-testid="d-item-description">Soft cotton tee, lightly used.</div>'
        '<div id="desc_div">Soft cotton tee, lightly used. Measurements: pit to pit 20in, length 28in.</div>'
    )
    result = DescriptionResolver().resolve_inline(html)
    assert result.inline_source == "desc_div"


def test_structured_seed_is_kept_over_longer_inline_text():
    seed = "Seller notes: lovely wool coat, worn twice."
    html = (
        '<div data-testid="d-item-description">Thank you for looking. Please check out my other '
        "items, I ship within one business day and combine shipping.</div>"
    )
    result = DescriptionResolver().resolve_inline(html, seed, "structured_data")
    assert result.inline == seed
    assert result.inline_source == "structured_data"


def test_short_seed_falls_back_to_inline_text():
    result = DescriptionResolver().resolve_inline(
        '<div id="viTabs_0_is">Hand knit, fits like a medium.</div>', "Wool coat", "structured_data"
    )
    assert result.inline == "Hand knit, fits like a medium."
    assert result.inline_source == "vi_tabs"


def test_find_subdocument_url_from_iframe(iframe_page_html):
    assert find_subdocument_url(iframe_page_html) == SUBDOCUMENT_URL


def test_find_subdocument_url_from_escaped_json():
    html = '<script>var cfg = {"descriptionUrl":"https:\\/\\/vi.vipr.ebaydesc.com\\/itmdesc\\/42"};</script>'
    assert find_subdocument_url(html) == "https://vi.vipr.ebaydesc.com/itmdesc/42"


def test_find_subdocument_url_protocol_relative():
    html = '<iframe src="//itm.ebaydesc.com/itmdesc/7" id="desc_ifr"></iframe>'
    assert find_subdocument_url(html) == "https://itm.ebaydesc.com/itmdesc/7"


def test_subdocument_replaces_short_inline_text(make_transport):
    transport = make_transport({"ebaydesc.com": httpx.Response(200, text=SUBDOCUMENT_HTML)})
    result = asyncio.run(resolver_for(transport).resolve(IFRAME_PAGE_HTML))

    assert result.subdocument == "a" * 500
    assert result.best == "a" * 500
    assert result.best_source == "subdocument"
    assert [str(r.url) for r in transport.requests] == [SUBDOCUMENT_URL]


def test_subdocument_text_keeps_lines(make_transport):
    body = "<p>Size M</p>\r\n<p></p><br>Pit to pit: 21&quot;<br/><script>x()</script>Length: 28&quot;"
    transport = make_transport({"ebaydesc.com": httpx.Response(200, text=body)})
    result = asyncio.run(resolver_for(transport).refine(DescriptionResult(subdocument_url=SUBDOCUMENT_URL)))
    assert result.subdocument == 'Size M\nPit to pit: 21"\nLength: 28"'


def test_subdocument_failure_is_swallowed(make_transport):
    transport = make_transport({"ebaydesc.com": httpx.Response(503, text="unavailable")})
    result = asyncio.run(resolver_for(transport).resolve(IFRAME_PAGE_HTML))

    assert result.best == ""
    assert "503" in result.subdocument_error


def test_subdocument_on_disallowed_host_is_swallowed(make_transport):
    html = '<iframe id="desc_ifr" src="https://evil.example.com/desc"></iframe>'
    transport = make_transport({})
    result = asyncio.run(resolver_for(transport).resolve(html))

    assert result.subdocument_error
    assert transport.requests == []


def test_long_inline_text_skips_subdocument(make_transport):
    html = IFRAME_PAGE_HTML.replace("Short text", "x" * 60)
    transport = make_transport({"ebaydesc.com": httpx.Response(200, text=SUBDOCUMENT_HTML)})
    result = asyncio.run(resolver_for(transport).resolve(html))

    assert result.best == "x" * 60
    assert transport.requests == []


def test_subdocument_url_with_bad_port_is_swallowed(make_transport):
    html = '<iframe id="desc_ifr" src="https://vi.vipr.ebaydesc.com:abc/itmdesc/1"></iframe>'
    transport = make_transport({})
    result = asyncio.run(resolver_for(transport).resolve(html))

    assert result.best == ""
    assert "Invalid URL" in result.subdocument_error
    assert transport.requests == []


def test_subdocument_transport_rejecting_url_is_swallowed():
    def handler(request):
        raise httpx.InvalidURL("Invalid port: 'abc'")

    result = asyncio.run(resolver_for(httpx.MockTransport(handler)).resolve(IFRAME_PAGE_HTML))
    assert result.best == ""
    assert "Invalid port" in result.subdocument_error


def test_subdocument_markup_inside_attributes_does_not_leak(make_transport):
    body = '<div><img alt="Size > M" src="x.jpg">Lovely vintage cardigan, no holes or stains at all.</div>'
    transport = make_transport({"ebaydesc.com": httpx.Response(200, text=body)})
    result = asyncio.run(resolver_for(transport).refine(DescriptionResult(subdocument_url=SUBDOCUMENT_URL)))
    assert result.subdocument == "Lovely vintage cardigan, no holes or stains at all."


def test_subdocument_inline_tags_stay_on_one_line(make_transport):
    body = "<ul><li>Size <b>M</b></li><li>Pit to pit <i>21in</i></li></ul>"
    transport = make_transport({"ebaydesc.com": httpx.Response(200, text=body)})
    result = asyncio.run(resolver_for(transport).refine(DescriptionResult(subdocument_url=SUBDOCUMENT_URL)))
    assert result.subdocument == "Size M\nPit to pit 21in"
