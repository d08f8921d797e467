"""
Pydantic models for API request/response serialization.
"""
from typing import Dict, List

from pydantic import BaseModel

from listing_scraper.models import ListingRecord


class ListingOut(BaseModel):
    """Output model for an extracted listing."""
    title: str = ""
    price: str = ""
    condition: str = ""
    specifics: Dict[str, str] = {}
    description: str = ""
    summary: str = ""
    missing_fields: List[str] = []

    @classmethod
    def from_record(cls, record: ListingRecord) -> "ListingOut":
        return cls(**record.to_dict(), missing_fields=record.missing_fields)


class ErrorOut(BaseModel):
    """Error body returned for every failed request."""
    detail: str


class HealthOut(BaseModel):
    status: str
    version: str
    strategy_version: str
