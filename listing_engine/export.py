"""
Export utilities for filtered listing views.
"""
import logging
from typing import List, Optional

import pandas as pd

from .models import WIRE_KEYS, ListingRecord


def listings_to_frame(listings: List[ListingRecord]) -> pd.DataFrame:
    """Tabulate listings using the remote API's column names."""
    rows = [x.to_dict() for x in listings]
    return pd.DataFrame(rows, columns=list(WIRE_KEYS.values()))


def listings_to_csv(listings: List[ListingRecord]) -> bytes:
    """CSV bytes for a download response."""
    return listings_to_frame(listings).to_csv(index=False).encode("utf-8")


def save_output_rows(listings: List[ListingRecord], out_path: str,
                     logger: Optional[logging.Logger] = None) -> int:
    """Save listings to CSV or Excel file and return the row count."""
    df = listings_to_frame(listings)
    if out_path.lower().endswith(".xlsx"):
        df.to_excel(out_path, index=False)
    else:
        df.to_csv(out_path, index=False)

    if logger:
        logger.info(f">>> Saved {len(df)} rows to {out_path}")
    return len(df)
