"""
Pattern tables for pulling listing fields out of raw marketplace HTML.

Each table is ordered: the first strategy that matches and validates wins.
Supporting a new page layout means adding a row here, not new code.
"""
import re
from dataclasses import dataclass
from typing import Callable, Tuple

from .utils import clean_text, parse_price

STRATEGY_VERSION = "5"

MAX_PRICE = 50000
MAX_LABEL_LENGTH = 25
MAX_VALUE_LENGTH = 100
MIN_DESCRIPTION_LENGTH = 20
SUBDOCUMENT_THRESHOLD = 50
MAX_DESCRIPTION_LENGTH = 3000

_SITE_SUFFIX_RE = re.compile(r"\s+\|\s+[A-Za-z][A-Za-z.&'-]*(?:\s[A-Z][A-Za-z.&'-]*)?\s*$")
_DETAILS_PREFIX_RE = re.compile(r"^Details about\s+", re.I)


def clean_title(raw: str) -> str:
    title = _DETAILS_PREFIX_RE.sub("", clean_text(re.sub(r"<[^>]+>", " ", raw)))
    return _SITE_SUFFIX_RE.sub("", title).strip()


def _not_empty(value: str) -> bool:
    return bool(value)


@dataclass(frozen=True)
class Strategy:
    """One way of finding a field: a pattern plus cleanup and validation."""

    name: str
    pattern: re.Pattern
    clean: Callable[[str], str] = clean_text
    validate: Callable[[str], bool] = _not_empty

    def apply(self, html: str) -> str:
        """Return the cleaned, validated first match or an empty string."""
        m = self.pattern.search(html)
        if not m:
            return ""
        value = self.clean(m.group(1))
        return value if self.validate(value) else ""


def _rx(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.I)


def _price_clean(raw: str) -> str:
    return parse_price(raw, high=MAX_PRICE) or ""


TITLE_STRATEGIES: Tuple[Strategy, ...] = (
    Strategy("og_title", _rx(r'<meta[^>]*property="og:title"[^>]*content="([^"]+)"'), clean_title),
    Strategy("og_title_reversed", _rx(r'<meta[^>]*content="([^"]+)"[^>]*property="og:title"'), clean_title),
    Strategy(
        "item_title_heading",
        _rx(r'<h1[^>]*class="[^"]*(?:x-item-title|item-title|product-title)[^"]*"[^>]*>([\s\S]{1,600}?)</h1>'),
        clean_title,
    ),
    Strategy("page_title", _rx(r"<title[^>]*>([^<]+)</title>"), clean_title),
)

PRICE_STRATEGIES: Tuple[Strategy, ...] = (
    Strategy("itemprop_price", _rx(r'itemprop="price"[^>]*content="([\d.,]+)"'), _price_clean),
    Strategy("itemprop_price_reversed", _rx(r'content="([\d.,]+)"[^>]*itemprop="price"'), _price_clean),
    Strategy(
        "json_currency_then_price",
        _rx(r'"priceCurrency"\s*:\s*"USD"[\s\S]{0,300}?"price"\s*:\s*"?([\d.,]+)'),
        _price_clean,
    ),
    Strategy(
        "json_price_then_currency",
        _rx(r'"price"\s*:\s*"?([\d.,]+)"?[\s\S]{0,300}?"priceCurrency"\s*:\s*"USD"'),
        _price_clean,
    ),
    Strategy(
        "price_primary_container",
        _rx(r'class="[^"]*x-price-primary[^"]*"[^>]*>[\s\S]{0,400}?US\s*\$\s?([\d,]+(?:\.\d+)?)'),
        _price_clean,
    ),
    Strategy("dollar_amount_span", _rx(r"<span[^>]*>\s*(?:US\s*)?\$\s?([\d,]+\.\d{2})\s*</span>"), _price_clean),
    Strategy("dollar_amount", _rx(r"(?:US\s*)?\$\s?([\d,]+\.\d{2})\b"), _price_clean),
)

CONDITION_VOCABULARY = ("New", "Pre-owned", "Used", "Refurbished")

CONDITION_STRATEGIES: Tuple[Strategy, ...] = (
    Strategy("condition_display_name", _rx(r'"conditionDisplayName"\s*:\s*"([^"]+)"')),
    Strategy("condition_label", _rx(r"Condition:\s*</span>[\s\S]{0,400}?<span[^>]*>([^<]+)</span>")),
    Strategy("item_condition_attribute", _rx(r'itemCondition"[^>]*>([^<]+)<')),
    Strategy(
        "condition_icon_text",
        _rx(
            r'<span[^>]*class="[^"]*ux-icon-text[^"]*"[^>]*>([^<]*(?:'
            + "|".join(re.escape(word) for word in CONDITION_VOCABULARY)
            + r")[^<]*)</span>"
        ),
    ),
)

# Label/value pairs scanned across the whole document
SPECIFIC_PAIR_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = (
    (
        "textspans_pair",
        _rx(
            r'<span[^>]*class="[^"]*ux-textspans[^"]*"[^>]*>([^<]{1,30})</span>'
            r'[\s\S]{0,200}?<span[^>]*class="[^"]*ux-textspans--BOLD[^"]*"[^>]*>([^<]+)</span>'
        ),
    ),
    ("definition_list_pair", _rx(r"<dt[^>]*>([^<]+)</dt>\s*<dd[^>]*>([^<]+)</dd>")),
)

NAV_LABEL_RE = re.compile(r"^(See|View|Read|Show|More|Less|\d)", re.I)
NAV_VALUE_RE = re.compile(r"^(See|View|Read|Show)", re.I)

COMMON_SPECIFICS = (
    "Size", "Brand", "Color", "Material", "Style",
    "Type", "Pattern", "Sleeve Length", "Fit", "Department",
)


def common_specific_patterns(key: str) -> Tuple[re.Pattern, ...]:
    """Field-specific lookups for one vocabulary key."""
    k = re.escape(key)
    return (
        _rx(rf'>{k}:?<[^>]*>[\s\S]{{0,300}}?<span[^>]*class="[^"]*BOLD[^"]*"[^>]*>([^<]+)'),
        _rx(rf'"{k}"\s*:\s*"([^"]+)"'),
    )


COMMON_SPECIFIC_PATTERNS = {key: common_specific_patterns(key) for key in COMMON_SPECIFICS}


def valid_specific(label: str, value: str) -> bool:
    """Reject empty, oversized and navigational label/value pairs."""
    if not label or not value:
        return False
    if len(label) > MAX_LABEL_LENGTH or len(value) > MAX_VALUE_LENGTH:
        return False
    return not NAV_LABEL_RE.match(label) and not NAV_VALUE_RE.match(value)


# Inline seller description containers, most specific first
DESCRIPTION_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = (
    ("testid_item_description", _rx(r'<div[^>]*data-testid="d-item-description"[^>]*>([\s\S]*?)</div>')),
    ("vi_tabs", _rx(r'<div[^>]*id="viTabs_0_is"[^>]*>([\s\S]*?)</div>')),
    ("desc_div", _rx(r'<div[^>]*id="desc_div"[^>]*>([\s\S]*?)</div>')),
    ("item_description_class", _rx(r'<div[^>]*class="[^"]*item-description[^"]*"[^>]*>([\s\S]*?)</div>')),
    ("description_module", _rx(r'descriptionModule[\s\S]{0,500}?<div[^>]*>([\s\S]{50,}?)</div>')),
    (
        "description_heading",
        _rx(
            r"(?:Item description from the seller|<h[1-6][^>]*>\s*(?:Item\s+)?Description\s*</h[1-6]>)"
            r"[\s\S]{0,500}?<div[^>]*>([\s\S]{20,}?)</div>"
        ),
    ),
)

# Where the seller description sub-document is referenced from the page
SUBDOCUMENT_URL_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = (
    ("desc_iframe", _rx(r'<iframe[^>]*id="desc_ifr"[^>]*src="([^"]+)"')),
    ("desc_iframe_reversed", _rx(r'<iframe[^>]*src="([^"]+)"[^>]*id="desc_ifr"')),
    ("desc_host_iframe", _rx(r'<iframe[^>]*src="([^"]*ebaydesc\.com[^"]*)"')),
    ("json_description_url", _rx(r'"(?:descriptionUrl|descUrl|iframeUrl)"\s*:\s*"([^"]+)"')),
)
