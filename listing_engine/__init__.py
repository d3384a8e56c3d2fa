"""
Listing filter & sort engine for the listing console.
"""
from .models import (
    BEDROOM_BUCKET_MIN,
    ExclusiveFlag,
    FacetSets,
    FilterCriteria,
    ListingRecord,
    PetAllowed,
    UpdateAvailabilityWindow,
)
from .filters import filter_and_sort, filter_listings, matches
from .sorting import compare_listings, sort_listings, split_sku, sku_sort_key
from .facets import derive_facets
from .export import listings_to_csv, listings_to_frame, save_output_rows
from .utils import init_logger, now_iso

__version__ = "1.0.0"

__all__ = [
    "BEDROOM_BUCKET_MIN",
    "ExclusiveFlag",
    "FacetSets",
    "FilterCriteria",
    "ListingRecord",
    "PetAllowed",
    "UpdateAvailabilityWindow",
    "filter_and_sort",
    "filter_listings",
    "matches",
    "compare_listings",
    "sort_listings",
    "split_sku",
    "sku_sort_key",
    "derive_facets",
    "listings_to_csv",
    "listings_to_frame",
    "save_output_rows",
    "init_logger",
    "now_iso",
]
