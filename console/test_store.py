"""
Tests for the cached listing store.
"""
import asyncio

import pytest

from console.client import ListingsApiError
from console.store import (
    DuplicateSkuError,
    InvalidSkuError,
    ListingNotFoundError,
    ListingStore,
    MissingPsCodeError,
)
from listing_engine.models import FilterCriteria, ListingRecord

ALL_PATH = "/api/listings/all"


def run(coro):
    return asyncio.run(coro)


def test_collection_is_cached(store, fake_api):
    run(store.get_all())
    run(store.search(FilterCriteria(post_types=["Rent"])))
    run(store.facets())
    assert fake_api.count("GET", ALL_PATH) == 1


def test_force_and_invalidate_refetch(store, fake_api):
    run(store.get_all())
    run(store.get_all(force=True))
    assert fake_api.count("GET", ALL_PATH) == 2

    store.invalidate()
    run(store.get_all())
    assert fake_api.count("GET", ALL_PATH) == 3


def test_expired_cache_refetches(fake_api):
    store = ListingStore(fake_api.client(), ttl_seconds=0)
    run(store.get_all())
    run(store.get_all())
    assert fake_api.count("GET", ALL_PATH) == 2


def test_search_filters_and_sorts(store):
    rows = run(store.search(None))
    assert [r.sku for r in rows] == ["AA-1", "AB-2", "AB-10"]

    rows = run(store.search(FilterCriteria(bedrooms=["3"])))
    assert [r.sku for r in rows] == ["AB-10"]


def test_facets(store):
    facets = run(store.facets())
    assert facets.project_names == ["Garden Home", "Tower A"]
    assert facets.area_lv == ["Asoke", "Bangna", "Nana"]
    assert facets.bedrooms == ["Studio", "2", "3"]


def test_get_by_sku_and_post_type(store):
    assert run(store.get("AB-10")).post_type == "Sale"
    with pytest.raises(ListingNotFoundError):
        run(store.get("AB-10", "Rent"))
    with pytest.raises(ListingNotFoundError):
        run(store.get("XX-1"))


def test_update_status_refreshes_cache(store, fake_api):
    updated = run(store.update_status("Rent", "AB-2", "called owner", "Reserved"))
    assert updated.availability == "Reserved"

    cached = run(store.get("AB-2"))
    assert cached.availability == "Reserved"
    assert cached.comment == "called owner"
    assert fake_api.count("GET", ALL_PATH) == 1


def test_update_status_without_echo_keeps_other_fields(store, fake_api):
    fake_api.echo_updates = False
    updated = run(store.update_status("Rent", "AB-2", "no echo", "Sold"))
    assert updated.sku == "AB-2"
    assert updated.title_en == "Tower A"
    assert updated.availability == "Sold"
    assert updated.comment == "no echo"


def test_create_validates_sku(store):
    with pytest.raises(InvalidSkuError):
        run(store.create(ListingRecord(sku="AB12", post_type="Rent")))
    with pytest.raises(InvalidSkuError):
        run(store.create(ListingRecord(sku="AB-", post_type="Rent")))
    with pytest.raises(DuplicateSkuError):
        run(store.create(ListingRecord(sku="AB-2", post_type="Sale")))


def test_create_appends_to_cache(store, fake_api):
    run(store.create(ListingRecord(sku="AC-3", post_type="Rent", title_en="New Place")))
    rows = run(store.search(None))
    assert [r.sku for r in rows] == ["AA-1", "AB-2", "AB-10", "AC-3"]
    assert fake_api.count("GET", ALL_PATH) == 1


def test_delete_removes_from_cache(store):
    run(store.delete("Sale", "AB-10"))
    assert [r.sku for r in run(store.search(None))] == ["AA-1", "AB-2"]
    with pytest.raises(ListingNotFoundError):
        run(store.delete("Sale", "AB-10"))


def test_fetch_availability_requires_ps_code(store):
    assert run(store.fetch_availability("Rent", "AB-2")) == {
        "availability": "Sold", "comment": "closed by owner",
    }
    with pytest.raises(MissingPsCodeError):
        run(store.fetch_availability("Sale", "AB-10"))


def test_images_check_listing_exists(store):
    assert len(run(store.images("AB-2"))) == 2
    with pytest.raises(ListingNotFoundError):
        run(store.images("XX-9"))


def test_upstream_failure_propagates(store, fake_api):
    fake_api.fail_with = 503
    with pytest.raises(ListingsApiError):
        run(store.get_all())
