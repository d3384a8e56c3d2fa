"""
Command line filter/export for a saved listings dump.

The input is the JSON body of the listings API's "all" endpoint
(``{"data": [...]}``) or a plain list of listing objects.
"""
import argparse
import json
import os
from dataclasses import asdict
from typing import Any, List, Optional

from .facets import derive_facets
from .export import save_output_rows
from .filters import filter_and_sort
from .models import FilterCriteria, ListingRecord, UpdateAvailabilityWindow
from .utils import init_logger, now_iso


def load_listings(path: str) -> List[ListingRecord]:
    """Read listings from a JSON dump."""
    with open(path, "r", encoding="utf-8") as fh:
        payload: Any = json.load(fh)
    if isinstance(payload, dict):
        payload = payload.get("data") or []
    return [ListingRecord.from_dict(row) for row in payload]


def criteria_from_args(args: argparse.Namespace) -> FilterCriteria:
    return FilterCriteria(
        project_names=args.project_name,
        skus=args.sku,
        area_lp=args.area_lp,
        post_types=args.post_type,
        property_types=args.property_type,
        availability=args.availability,
        bedrooms=args.bedroom,
        bathrooms=args.bathroom,
        post_from=args.post_from,
        area_lv=args.area_lv,
        min_price=args.min_price,
        max_price=args.max_price,
        min_area_size=args.min_area_size,
        max_area_size=args.max_area_size,
        pet_allowed=args.pet_allowed,
        exclusive=args.exclusive,
        update_availability=args.update_availability,
        tel=args.tel,
    )


def parse_args(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(description="Filter and sort a listings dump, then export it to CSV/XLSX")
    ap.add_argument("input", help="Path to the listings JSON dump")
    ap.add_argument("--out", type=str, default="listings_export.csv", help="CSV/XLSX output path")
    ap.add_argument("--facets", action="store_true", help="Print the distinct option values as JSON instead of exporting")
    # Multi-select filters (repeatable)
    ap.add_argument("--project-name", action="append", default=[], help="Project name (titleEN)")
    ap.add_argument("--sku", action="append", default=[], help="Listing SKU, e.g. AB-12")
    ap.add_argument("--area-lp", action="append", default=[], help="Area LP")
    ap.add_argument("--area-lv", action="append", default=[], help="Area group tag")
    ap.add_argument("--post-type", action="append", default=[], help="Post type")
    ap.add_argument("--property-type", action="append", default=[], help="Property type")
    ap.add_argument("--post-from", action="append", default=[], help="Post from")
    ap.add_argument("--availability", action="append", default=[], help="Availability status")
    ap.add_argument("--bedroom", action="append", default=[], help="Bedroom count; 3 means 3 or more")
    ap.add_argument("--bathroom", action="append", default=[], help="Bathroom count; 3 means 3 or more")
    # Scalar filters
    ap.add_argument("--min-price", type=float, default=None, help="Minimum price")
    ap.add_argument("--max-price", type=float, default=None, help="Maximum price")
    ap.add_argument("--min-area-size", type=float, default=None, help="Minimum floor size")
    ap.add_argument("--max-area-size", type=float, default=None, help="Maximum floor size")
    ap.add_argument("--pet-allowed", action="store_true", help="Only pet-friendly listings")
    ap.add_argument("--exclusive", action="store_true", help="Only exclusive listings")
    ap.add_argument("--update-availability", choices=[w.value for w in UpdateAvailabilityWindow],
                    default=None, help="Only listings whose status was updated recently")
    ap.add_argument("--tel", type=str, default=None, help="Phone digits to search for")
    # Logging
    lvl_choices = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ap.add_argument("--log-console", choices=lvl_choices, default=os.getenv("LOG_CONSOLE", "INFO"),
                    help="Console log level (default from env LOG_CONSOLE or INFO).")
    ap.add_argument("--log-file", choices=lvl_choices, default=os.getenv("LOG_FILE_LEVEL", "DEBUG"),
                    help="File log level (default from env LOG_FILE_LEVEL or DEBUG).")
    ap.add_argument("--log-file-path", default=os.getenv("LOG_FILE_PATH", "listing_engine.log"),
                    help="Path to log file (default from env LOG_FILE_PATH or listing_engine.log).")
    ap.add_argument("--no-file-log", action="store_true",
                    help="Disable file logging (only console output).")

    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logger = init_logger(
        console_level=args.log_console,
        file_level=args.log_file,
        log_file=None if args.no_file_log else args.log_file_path
    )
    logger.info(f">>> Run started at {now_iso()}")

    listings = load_listings(args.input)
    logger.info(f">>> Loaded {len(listings)} listings from {args.input}")

    if args.facets:
        print(json.dumps(asdict(derive_facets(listings)), ensure_ascii=False, indent=2))
        return 0

    criteria = criteria_from_args(args)
    rows = filter_and_sort(listings, criteria)
    logger.info(f">>> {len(rows)} of {len(listings)} listings match")
    save_output_rows(rows, args.out, logger=logger)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
