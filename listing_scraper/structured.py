"""
JSON-LD product metadata: the highest-confidence source of listing fields.
"""
import json
import logging
import re
from typing import Any, Dict, Iterator, List

from .models import ListingRecord
from .strategies import MAX_PRICE
from .utils import clean_text, parse_price

logger = logging.getLogger(__name__)

SOURCE = "structured_data"

_JSON_LD_RE = re.compile(
    r'<script[^>]*type=["\']application/ld\+json["\'][^>]*>([\s\S]*?)</script>', re.I
)


def _iter_objects(data: Any) -> Iterator[Dict[str, Any]]:
    """Flatten a JSON-LD payload (object, list, or @graph) into objects."""
    if isinstance(data, list):
        for item in data:
            yield from _iter_objects(item)
    elif isinstance(data, dict):
        yield data
        graph = data.get("@graph")
        if isinstance(graph, list):
            yield from _iter_objects(graph)


def _is_product(obj: Dict[str, Any]) -> bool:
    kind = obj.get("@type")
    if isinstance(kind, list):
        return "Product" in kind or bool(obj.get("name"))
    return kind == "Product" or bool(obj.get("name"))


def _offer_price(obj: Dict[str, Any]) -> str:
    offers = obj.get("offers")
    if isinstance(offers, list):
        offers = offers[0] if offers else None
    if not isinstance(offers, dict) or offers.get("price") in (None, ""):
        return ""
    return parse_price(str(offers["price"]), high=MAX_PRICE) or ""


def _brand_name(obj: Dict[str, Any]) -> str:
    brand = obj.get("brand")
    if isinstance(brand, dict):
        brand = brand.get("name")
    return clean_text(brand) if isinstance(brand, str) else ""


def load_blocks(html: str) -> List[Dict[str, Any]]:
    """Parse every JSON-LD block in the page, skipping ones that fail to parse."""
    objects: List[Dict[str, Any]] = []
    for m in _JSON_LD_RE.finditer(html or ""):
        try:
            data = json.loads(m.group(1).strip())
        except ValueError as e:
            logger.debug(f"Skipping unparsable JSON-LD block: {e}")
            continue
        objects.extend(_iter_objects(data))
    return objects


def extract_structured(html: str) -> ListingRecord:
    """
    Build a partial record from product metadata.

    Each field is taken independently from the first qualifying object that
    carries it, so a block with only a name and another with only offers
    still combine into one record.
    """
    record = ListingRecord()
    for obj in load_blocks(html):
        if not _is_product(obj):
            continue
        name = obj.get("name")
        if isinstance(name, str):
            record.fill("title", name.strip(), SOURCE)
        record.fill("price", _offer_price(obj), SOURCE)
        record.fill_specific("Brand", _brand_name(obj), SOURCE)
        description = obj.get("description")
        if isinstance(description, str):
            record.fill("description", clean_text(description), SOURCE)

    if record.sources:
        logger.debug(f"Structured data provided: {sorted(record.sources)}")
    return record
