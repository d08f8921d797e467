"""
Export utilities for extracted listings.
"""
import json
from typing import List, Optional

import pandas as pd

from .models import ListingRecord
from .utils import now_iso


def records_to_frame(records: List[ListingRecord], urls: Optional[List[str]] = None) -> pd.DataFrame:
    """One row per record; specifics are kept as a JSON object string."""
    extracted_at = now_iso()
    rows = []
    for i, x in enumerate(records):
        rows.append({
            "url": urls[i] if urls else "",
            "title": x.title,
            "price": x.price,
            "condition": x.condition,
            "specifics_json": json.dumps(x.specifics, ensure_ascii=False),
            "description": x.description,
            "description_truncated": x.description_truncated,
            "missing_fields": "|".join(x.missing_fields),
            "summary": x.summary,
            "extracted_at": extracted_at,
        })
    return pd.DataFrame(rows, columns=[
        "url", "title", "price", "condition", "specifics_json", "description",
        "description_truncated", "missing_fields", "summary", "extracted_at",
    ])


def save_output_rows(records: List[ListingRecord], out_path: str, urls: Optional[List[str]] = None, logger=None):
    """Save records to CSV or Excel file."""
    df = records_to_frame(records, urls)
    if out_path.lower().endswith(".xlsx"):
        df.to_excel(out_path, index=False)
    else:
        df.to_csv(out_path, index=False)

    if logger:
        logger.info(f">>> Saved {len(df)} rows to {out_path}")
    else:
        print(f">>> Saved {len(df)} rows to {out_path}")
