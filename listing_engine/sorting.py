"""
SKU ordering for the listing table.

SKUs look like "AB-12": alphabetic prefix, "-", decimal number. Rows sort by
prefix as a string, then by the number as an integer, so "AA-2" < "AA-10".
"""
import re
from typing import Iterable, List, Optional, Tuple

from .models import ListingRecord

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def split_sku(sku: Optional[str]) -> Tuple[str, Optional[int]]:
    """
    Split a SKU at its first "-" into (prefix, number).

    number is None when there is no "-" or the suffix does not start with an
    integer ("AB-12x" still gives 12).
    """
    if not sku or "-" not in sku:
        return (sku or "", None)
    prefix, number_text = sku.split("-", 1)
    m = _LEADING_INT.match(number_text)
    if not m:
        return (prefix, None)
    return (prefix, int(m.group(1)))


def sku_sort_key(record: ListingRecord) -> Tuple:
    """Sort key placing malformed SKUs after every well-formed one."""
    prefix, number = split_sku(record.sku)
    if number is None:
        return (1,)
    return (0, prefix, number)


def compare_listings(a: ListingRecord, b: ListingRecord) -> int:
    """Three-way comparison of two listings by SKU: -1, 0 or 1."""
    key_a, key_b = sku_sort_key(a), sku_sort_key(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def sort_listings(records: Iterable[ListingRecord]) -> List[ListingRecord]:
    """Return a new list ordered by SKU; malformed SKUs keep their input order."""
    return sorted(records, key=sku_sort_key)
