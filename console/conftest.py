"""
Shared fixtures: an in-memory listings API served through httpx.MockTransport.
"""
import json

import httpx
import pytest

from .client import ListingsApiClient
from .store import ListingStore

SAMPLE_LISTINGS = [
    {
        "sku": "AB-2", "titleEN": "Tower A", "areaLP": "Sukhumvit", "areaLV": "Asoke, Nana",
        "postType": "Rent", "propertyType": "Condo", "postFrom": "Owner", "availability": "Available",
        "bedroom": 2, "bathroom": 1, "price": 25000, "areaSize": 35, "petAllowed": "Allow",
        "exclusive": "", "tel": "081-234-5678", "psCode": 101, "comment": "",
    },
    {
        "sku": "AB-10", "titleEN": "Tower A", "areaLP": "Sukhumvit", "areaLV": "Asoke",
        "postType": "Sale", "propertyType": "Condo", "postFrom": "Agent", "availability": "Available",
        "bedroom": 3, "bathroom": 2, "price": 6500000, "areaSize": 80, "petAllowed": "",
        "exclusive": "Exclusive", "tel": "089 999 0000",
    },
    {
        "sku": "AA-1", "titleEN": "Garden Home", "areaLP": "Bangna", "areaLV": "Bangna",
        "postType": "Rent", "propertyType": "House", "postFrom": "Agent", "availability": "Sold",
        "bedroom": "Studio", "bathroom": 1, "price": 15000, "areaSize": 28,
    },
]


class FakeListingsApi:
    """Just enough of the listings and PS endpoints to drive the client."""

    def __init__(self, rows=None):
        self.rows = [dict(r) for r in (SAMPLE_LISTINGS if rows is None else rows)]
        self.requests = []
        self.fail_with = None
        self.echo_updates = True

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with)

        path = request.url.path
        method = request.method
        if method == "GET" and path == "/api/listings/all":
            return httpx.Response(200, json={"data": self.rows})
        if method == "GET" and path == "/api/listings/zone/all":
            return httpx.Response(200, json={"data": ["Bangna", "Sukhumvit"]})
        if method == "GET" and path.startswith("/api/listings/images/"):
            return httpx.Response(200, json={"files": [{"name": "front.jpg"}, {"name": "room.jpg"}]})
        if method == "GET" and path.startswith("/api/ps/available/"):
            return httpx.Response(200, json={"availability": "Sold", "comment": "closed by owner"})

        parts = path[len("/api/listings/"):].split("/")
        if method == "POST" and len(parts) == 1:
            body = json.loads(request.content)
            self.rows.append(body)
            return httpx.Response(201, json={"data": body})
        if method == "PUT" and len(parts) == 2:
            row = self._find(*parts)
            if row is None:
                return httpx.Response(404)
            row.update(json.loads(request.content))
            if not self.echo_updates:
                return httpx.Response(204)
            return httpx.Response(200, json={"data": row})
        if method == "DELETE" and len(parts) == 2:
            row = self._find(*parts)
            if row is None:
                return httpx.Response(404)
            self.rows.remove(row)
            return httpx.Response(204)
        return httpx.Response(404)

    def _find(self, post_type, sku):
        for row in self.rows:
            if row.get("sku") == sku and row.get("postType") == post_type:
                return row
        return None

    def client(self) -> ListingsApiClient:
        return ListingsApiClient(
            base_url="http://listings.test",
            token="secret",
            transport=httpx.MockTransport(self.handler),
        )

    def count(self, method, path):
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)


@pytest.fixture
def fake_api():
    return FakeListingsApi()


@pytest.fixture
def store(fake_api):
    return ListingStore(fake_api.client(), ttl_seconds=300)
