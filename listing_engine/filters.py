"""
Listing filter engine.

A record is kept when it satisfies every active field of a FilterCriteria;
the result is always returned in SKU order.
"""
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from .models import (
    BEDROOM_BUCKET_MIN,
    BUCKET_MARKER,
    ExclusiveFlag,
    FilterCriteria,
    ListingRecord,
    PetAllowed,
    UpdateAvailabilityWindow,
)
from .sorting import sort_listings
from .utils import days_since, digits_only, parse_number, parse_timestamp


def _room_count_matches(value: str, selected: Sequence[str]) -> bool:
    """Bedroom/bathroom rule: selecting "3" means 3 or more, otherwise exact match."""
    if BUCKET_MARKER in selected:
        count = parse_number(value)
        return count is not None and count >= BEDROOM_BUCKET_MIN
    return value in selected


def _updated_within(record: ListingRecord, window: str, now: Optional[datetime]) -> bool:
    ts = parse_timestamp(record.update_availability)
    if ts is None:
        return False
    try:
        window = UpdateAvailabilityWindow(window)
    except ValueError:
        return False
    return days_since(ts, now) < window.max_days


def matches(
    record: ListingRecord,
    criteria: Optional[FilterCriteria],
    now: Optional[datetime] = None,
) -> bool:
    """Return True when the record satisfies every active criteria field."""
    if criteria is None:
        return True

    # Hard reject before anything else is evaluated
    if criteria.update_availability is not None:
        if not _updated_within(record, criteria.update_availability, now):
            return False

    if criteria.project_names and record.title_en not in criteria.project_names:
        return False
    if criteria.skus and record.sku not in criteria.skus:
        return False
    if criteria.area_lp and record.area_lp not in criteria.area_lp:
        return False
    if criteria.post_types and record.post_type not in criteria.post_types:
        return False
    if criteria.property_types and record.property_type not in criteria.property_types:
        return False
    if criteria.availability and record.availability not in criteria.availability:
        return False
    if criteria.bedrooms and not _room_count_matches(record.bedroom, criteria.bedrooms):
        return False
    if criteria.bathrooms and not _room_count_matches(record.bathroom, criteria.bathrooms):
        return False
    if criteria.post_from and record.post_from not in criteria.post_from:
        return False
    if criteria.area_lv and not set(record.area_lv_tags()) & set(criteria.area_lv):
        return False

    # Numeric ranges; a record without the measure never satisfies a bound
    if criteria.min_price is not None and (record.price is None or record.price < criteria.min_price):
        return False
    if criteria.max_price is not None and (record.price is None or record.price > criteria.max_price):
        return False
    if criteria.min_area_size is not None and (
        record.area_size is None or record.area_size < criteria.min_area_size
    ):
        return False
    if criteria.max_area_size is not None and (
        record.area_size is None or record.area_size > criteria.max_area_size
    ):
        return False

    if criteria.pet_allowed and record.pet_allowed != PetAllowed.ALLOW.value:
        return False
    if criteria.exclusive and record.exclusive != ExclusiveFlag.EXCLUSIVE.value:
        return False

    if criteria.tel is not None:
        if record.phone is None or digits_only(criteria.tel) not in digits_only(record.phone):
            return False

    return True


def filter_listings(
    records: Iterable[ListingRecord],
    criteria: Optional[FilterCriteria],
    now: Optional[datetime] = None,
) -> List[ListingRecord]:
    """Keep matching records in their input order."""
    if now is None:
        now = datetime.now(timezone.utc)
    return [r for r in records if matches(r, criteria, now)]


def filter_and_sort(
    records: Iterable[ListingRecord],
    criteria: Optional[FilterCriteria] = None,
    now: Optional[datetime] = None,
) -> List[ListingRecord]:
    """Filter then sort by SKU. Neither argument is modified."""
    return sort_listings(filter_listings(records, criteria, now))
