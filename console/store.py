"""
Cached listing collection backed by the remote listings API.

The full collection is fetched once and reused until the TTL expires; every
search is answered by filtering that in-memory copy. Mutations go to the API
first and are then applied to the cached copy so the table reflects them
without a refetch.
"""
import asyncio
import logging
import re
import time
from dataclasses import replace
from typing import Any, Dict, List, Optional

from fastapi import Request

from listing_engine.facets import derive_facets
from listing_engine.filters import filter_and_sort
from listing_engine.models import FacetSets, FilterCriteria, ListingRecord

from .client import ListingsApiClient

logger = logging.getLogger(__name__)

SKU_PATTERN = re.compile(r"^[A-Za-z]+-\d+$")


class ListingNotFoundError(Exception):
    """No cached listing has the requested SKU (and post type)."""


class InvalidSkuError(ValueError):
    """A new listing's SKU is not of the form PREFIX-NUMBER."""


class DuplicateSkuError(Exception):
    """A new listing reuses an existing SKU."""


class MissingPsCodeError(Exception):
    """Availability refresh requested for a listing without a PS code."""


class ListingStore:
    def __init__(self, client: ListingsApiClient, ttl_seconds: float = 300.0):
        self.client = client
        self.ttl_seconds = ttl_seconds
        self._records: Optional[List[ListingRecord]] = None
        self._loaded_at: Optional[float] = None
        self._lock = asyncio.Lock()

    def _is_fresh(self) -> bool:
        if self._records is None or self._loaded_at is None:
            return False
        return (time.monotonic() - self._loaded_at) < self.ttl_seconds

    def invalidate(self) -> None:
        self._records = None
        self._loaded_at = None

    async def get_all(self, force: bool = False) -> List[ListingRecord]:
        """Return the cached collection, fetching it when missing or stale."""
        async with self._lock:
            if force or not self._is_fresh():
                records = await self.client.get_all_listings()
                self._records = records
                self._loaded_at = time.monotonic()
                logger.info(f"Loaded {len(records)} listings from the listings API")
            return list(self._records)

    async def search(self, criteria: Optional[FilterCriteria] = None) -> List[ListingRecord]:
        records = await self.get_all()
        rows = filter_and_sort(records, criteria)
        logger.debug(f"Search matched {len(rows)} of {len(records)} listings")
        return rows

    async def facets(self) -> FacetSets:
        return derive_facets(await self.get_all())

    async def get(self, sku: str, post_type: Optional[str] = None) -> ListingRecord:
        for record in await self.get_all():
            if record.sku == sku and (post_type is None or record.post_type == post_type):
                return record
        raise ListingNotFoundError(f"Listing {sku} not found")

    async def zones(self) -> List[str]:
        return await self.client.get_all_zones()

    async def images(self, sku: str, limit: Optional[int] = None) -> List[Any]:
        await self.get(sku)
        return await self.client.get_images(sku, limit)

    async def update_status(self, post_type: str, sku: str, comment: str, availability: str) -> ListingRecord:
        """Save a listing's status and comment, then refresh the cached copy."""
        current = await self.get(sku, post_type)
        updated = await self.client.update_listing(
            post_type, sku, {"comment": comment, "availability": availability}
        )
        if not updated.sku:
            updated = replace(current, comment=comment, availability=availability)
        self._replace_cached(post_type, sku, updated)
        logger.info(f"Updated status of {sku}/{post_type} to {availability!r}")
        return updated

    async def create(self, record: ListingRecord) -> ListingRecord:
        if not SKU_PATTERN.match(record.sku or ""):
            raise InvalidSkuError(f"Invalid SKU {record.sku!r}; expected PREFIX-NUMBER")
        if any(r.sku == record.sku for r in await self.get_all()):
            raise DuplicateSkuError(f"SKU {record.sku} already exists")

        created = await self.client.create_listing(record)
        if self._records is not None:
            self._records.append(created)
        logger.info(f"Created listing {created.sku}/{created.post_type}")
        return created

    async def delete(self, post_type: str, sku: str) -> None:
        await self.get(sku, post_type)
        await self.client.delete_listing(post_type, sku)
        if self._records is not None:
            self._records = [
                r for r in self._records if not (r.sku == sku and r.post_type == post_type)
            ]
        logger.info(f"Deleted listing {sku}/{post_type}")

    async def fetch_availability(self, post_type: str, sku: str) -> Dict[str, Any]:
        """External availability/comment for a listing; nothing is saved."""
        record = await self.get(sku, post_type)
        if record.ps_code is None:
            raise MissingPsCodeError(f"Listing {sku} has no PS code")
        return await self.client.get_availability(record.ps_code)

    def _replace_cached(self, post_type: str, sku: str, updated: ListingRecord) -> None:
        if self._records is None:
            return
        self._records = [
            updated if (r.sku == sku and r.post_type == post_type) else r
            for r in self._records
        ]


def get_store(request: Request) -> ListingStore:
    """FastAPI dependency returning the application's store."""
    return request.app.state.store
