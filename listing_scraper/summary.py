"""
Plain-text listing summary for the downstream matching step.
"""
from .models import ListingRecord
from .strategies import MIN_DESCRIPTION_LENGTH

MANUAL_ENTRY_FALLBACK = "Could not parse listing details. Please paste the listing content manually."
MISSING_DESCRIPTION_NOTE = (
    "(Seller description not found - it may be in an iframe. "
    "You can paste it manually below.)"
)


def build_summary(record: ListingRecord) -> str:
    """Render the record as labelled lines; never returns an empty string."""
    if not record.title and not record.price:
        return MANUAL_ENTRY_FALLBACK

    summary = ""
    if record.title:
        summary += f"Title: {record.title}\n"
    if record.price:
        summary += f"Price: ${record.price}\n"
    if record.condition:
        summary += f"Condition: {record.condition}\n"

    if record.specifics:
        summary += "\nItem Specifics:\n"
        for key, value in record.specifics.items():
            summary += f"{key}: {value}\n"

    if len(record.description) > MIN_DESCRIPTION_LENGTH:
        summary += f"\nSeller Description:\n{record.description}"
        if record.description_truncated:
            summary += "..."
    else:
        summary += f"\n{MISSING_DESCRIPTION_NOTE}"

    return summary
