"""
Pattern-based field extraction over raw listing HTML.
"""
import logging
from typing import Dict, Iterable, Optional, Tuple

from .models import ListingRecord
from .strategies import (
    COMMON_SPECIFIC_PATTERNS,
    CONDITION_STRATEGIES,
    PRICE_STRATEGIES,
    SPECIFIC_PAIR_PATTERNS,
    TITLE_STRATEGIES,
    Strategy,
    valid_specific,
)
from .utils import clean_text

logger = logging.getLogger(__name__)


def run_strategies(html: str, strategies: Iterable[Strategy]) -> Tuple[str, Optional[str]]:
    """Return (value, strategy name) for the first strategy that yields a valid value."""
    if not html:
        return ("", None)
    for strategy in strategies:
        value = strategy.apply(html)
        if value:
            logger.debug(f"Strategy {strategy.name} matched: {value[:80]!r}")
            return (value, strategy.name)
    return ("", None)


def extract_title(html: str) -> Tuple[str, Optional[str]]:
    return run_strategies(html, TITLE_STRATEGIES)


def extract_price(html: str) -> Tuple[str, Optional[str]]:
    """Price as a plain decimal string; candidates outside (0, 50000) are skipped."""
    return run_strategies(html, PRICE_STRATEGIES)


def extract_condition(html: str) -> Tuple[str, Optional[str]]:
    return run_strategies(html, CONDITION_STRATEGIES)


def extract_specifics(html: str, known: Iterable[str] = ()) -> Dict[str, Tuple[str, str]]:
    """
    Collect item specifics as {label: (value, strategy name)}.

    Generic label/value scanning runs over the whole document first; the
    targeted vocabulary lookup then fills only keys that are still missing
    (including keys listed in known, which a higher-priority source already has).
    """
    found: Dict[str, Tuple[str, str]] = {}
    if not html:
        return found

    for name, pattern in SPECIFIC_PAIR_PATTERNS:
        for m in pattern.finditer(html):
            label = clean_text(m.group(1)).rstrip(":").strip()
            value = clean_text(m.group(2))
            if label in found or not valid_specific(label, value):
                continue
            found[label] = (value, name)

    taken = set(found) | set(known)
    for key, patterns in COMMON_SPECIFIC_PATTERNS.items():
        if key in taken:
            continue
        for pattern in patterns:
            m = pattern.search(html)
            if not m:
                continue
            value = clean_text(m.group(1))
            if valid_specific(key, value):
                found[key] = (value, f"common_{key.lower().replace(' ', '_')}")
                break

    return found


def apply_field_extractors(record: ListingRecord, html: str) -> ListingRecord:
    """Fill whatever the record is still missing from pattern matches."""
    if not record.title:
        value, name = extract_title(html)
        record.fill("title", value, name or "")
    if not record.price:
        value, name = extract_price(html)
        record.fill("price", value, name or "")
    if not record.condition:
        value, name = extract_condition(html)
        record.fill("condition", value, name or "")

    for key, (value, name) in extract_specifics(html, known=record.specifics).items():
        record.fill_specific(key, value, name)
    return record
