"""
Data models for the listing scraper.
"""
from dataclasses import dataclass, field
from typing import Dict, List


PRIMARY_FIELDS = ("title", "price", "condition", "description")


@dataclass
class ListingRecord:
    """Best-effort structured view of a single marketplace listing."""

    title: str = ""
    price: str = ""
    condition: str = ""
    specifics: Dict[str, str] = field(default_factory=dict)
    description: str = ""
    description_truncated: bool = False
    summary: str = ""

    # field name (or "specifics.<Key>") -> source that filled it
    sources: Dict[str, str] = field(default_factory=dict)

    def fill(self, field_name: str, value: str, source: str = "") -> bool:
        """
        Set a scalar field only if it is still empty.

        Values are trimmed first; an empty candidate never fills anything.
        Returns True when the field was updated.
        """
        if field_name not in PRIMARY_FIELDS:
            raise ValueError(f"Unknown listing field: {field_name}")
        value = (value or "").strip()
        if not value or getattr(self, field_name):
            return False
        setattr(self, field_name, value)
        if source:
            self.sources[field_name] = source
        return True

    def fill_specific(self, key: str, value: str, source: str = "") -> bool:
        """Add one item specific unless the key is already known."""
        key = (key or "").strip()
        value = (value or "").strip()
        if not key or not value or key in self.specifics:
            return False
        self.specifics[key] = value
        if source:
            self.sources[f"specifics.{key}"] = source
        return True

    def merge(self, other: "ListingRecord") -> "ListingRecord":
        """Fill the empty parts of this record from a lower-priority one."""
        for name in PRIMARY_FIELDS:
            self.fill(name, getattr(other, name), other.sources.get(name, ""))
        for key, value in other.specifics.items():
            self.fill_specific(key, value, other.sources.get(f"specifics.{key}", ""))
        return self

    @property
    def missing_fields(self) -> List[str]:
        return [name for name in PRIMARY_FIELDS if not getattr(self, name)]

    @property
    def is_partial(self) -> bool:
        return bool(self.missing_fields)

    def to_dict(self) -> Dict[str, object]:
        return {
            "title": self.title,
            "price": self.price,
            "condition": self.condition,
            "specifics": dict(self.specifics),
            "description": self.description,
            "summary": self.summary,
        }
