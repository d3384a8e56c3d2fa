"""
HTTP client for the remote listings API.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from listing_engine.models import ListingRecord

from .config import config

logger = logging.getLogger(__name__)


class ListingsApiError(Exception):
    """Raised when the listings API is unreachable or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ListingsApiClient:
    """Thin async wrapper around the listings and PS endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        listings_path: Optional[str] = None,
        ps_path: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        token = token if token is not None else config.LISTINGS_API_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.listings_path = (listings_path or config.LISTINGS_BASE_PATH).rstrip("/")
        self.ps_path = (ps_path or config.PS_BASE_PATH).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=base_url or config.LISTINGS_API_URL,
            headers=headers,
            timeout=httpx.Timeout(timeout or config.REQUEST_TIMEOUT),
            transport=transport,
        )

    async def close(self):
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        logger.debug(f"{method} {url}")
        try:
            r = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Listings API request failed: {method} {url}: {e}")
            raise ListingsApiError(f"Listings API unreachable: {e}") from e

        if r.is_error:
            logger.error(f"Listings API error {r.status_code}: {method} {url}")
            raise ListingsApiError(
                f"Listings API returned {r.status_code} for {method} {url}",
                status_code=r.status_code,
            )
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    async def get_all_listings(self) -> List[ListingRecord]:
        """GET /listings/all"""
        payload = await self._request("GET", f"{self.listings_path}/all")
        rows = (payload or {}).get("data") or []
        return [ListingRecord.from_dict(row) for row in rows]

    async def get_all_zones(self) -> List[str]:
        payload = await self._request("GET", f"{self.listings_path}/zone/all")
        return [str(z) for z in (payload or {}).get("data") or []]

    async def get_images(self, sku: str, limit: Optional[int] = None) -> List[Any]:
        params = {"limit": limit} if limit is not None else None
        payload = await self._request("GET", f"{self.listings_path}/images/{sku}", params=params)
        return (payload or {}).get("files") or []

    async def create_listing(self, record: ListingRecord) -> ListingRecord:
        payload = await self._request(
            "POST", f"{self.listings_path}/{record.post_type}", json=record.to_dict()
        )
        return ListingRecord.from_dict((payload or {}).get("data") or record.to_dict())

    async def update_listing(self, post_type: str, sku: str, changes: Dict[str, Any]) -> ListingRecord:
        """PUT a partial update (wire keys) and return the updated listing."""
        payload = await self._request("PUT", f"{self.listings_path}/{post_type}/{sku}", json=changes)
        return ListingRecord.from_dict((payload or {}).get("data") or {})

    async def delete_listing(self, post_type: str, sku: str) -> None:
        await self._request("DELETE", f"{self.listings_path}/{post_type}/{sku}")

    async def get_availability(self, ps_code: int) -> Dict[str, Any]:
        """Current availability and comment for a PS code."""
        payload = await self._request("GET", f"{self.ps_path}/available/{ps_code}")
        payload = payload or {}
        return {
            "availability": payload.get("availability") or "",
            "comment": payload.get("comment") or "",
        }
