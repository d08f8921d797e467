"""
Exceptions raised by the listing scraper.

Only fatal conditions are exceptions. Missing fields are reported through
ListingRecord.missing_fields instead.
"""


class ExtractionError(Exception):
    """Base class for errors that abort an extraction request."""


class InvalidInput(ExtractionError):
    """The URL is missing or malformed."""


class UnsupportedSource(ExtractionError):
    """The URL points at a host outside the marketplace allow-list."""


class ConfigurationMissing(ExtractionError):
    """A required setting (such as the rendering proxy key) is not configured."""


class FetchFailed(ExtractionError):
    """The page could not be retrieved. status is 0 for transport errors."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"FetchFailed(status={self.status}, message={self.message!r})"
