"""
Distinct field values for the search form's option lists.
"""
from typing import Iterable, List, Tuple

from .models import FacetSets, ListingRecord
from .utils import parse_number


def _unique(values: Iterable[str]) -> List[str]:
    return sorted({v for v in values if v})


def _room_sort_key(value: str) -> Tuple:
    # "Studio" and other labels before numbers, numbers ascending
    number = parse_number(value)
    if number is None:
        return (0, value, 0.0)
    return (1, "", number)


def _unique_rooms(values: Iterable[str]) -> List[str]:
    return sorted({v for v in values if v}, key=_room_sort_key)


def derive_facets(records: Iterable[ListingRecord]) -> FacetSets:
    """Collect the distinct values of every categorical field."""
    records = list(records)
    area_lv_tags = (
        tag.strip()
        for r in records if r.area_lv
        for tag in r.area_lv.split(",")
    )
    return FacetSets(
        project_names=_unique(r.title_en for r in records),
        skus=_unique(r.sku for r in records),
        area_lp=_unique(r.area_lp for r in records),
        area_lv=_unique(area_lv_tags),
        property_types=_unique(r.property_type for r in records),
        post_types=_unique(r.post_type for r in records),
        post_from=_unique(r.post_from for r in records),
        bedrooms=_unique_rooms(r.bedroom for r in records),
        bathrooms=_unique_rooms(r.bathroom for r in records),
        availability=_unique(r.availability for r in records),
    )
