"""
Tests for SKU ordering.
"""
from functools import cmp_to_key

from listing_engine.models import ListingRecord
from listing_engine.sorting import compare_listings, sort_listings, split_sku


def records(*skus):
    return [ListingRecord(sku=s) for s in skus]


def test_split_sku():
    assert split_sku("AB-12") == ("AB", 12)
    assert split_sku("AB-12-3") == ("AB", 12)
    assert split_sku("AB-007") == ("AB", 7)
    assert split_sku("AB") == ("AB", None)
    assert split_sku("AB-x1") == ("AB", None)
    assert split_sku(None) == ("", None)


def test_prefix_then_numeric_suffix():
    result = sort_listings(records("AB-2", "AA-10", "AB-1", "AA-2"))
    assert [r.sku for r in result] == ["AA-2", "AA-10", "AB-1", "AB-2"]


def test_malformed_skus_sort_last_in_input_order():
    result = sort_listings(records("ZZ", "AB-2", "AA-x", "AB-1", "A"))
    assert [r.sku for r in result] == ["AB-1", "AB-2", "ZZ", "AA-x", "A"]


def test_compare_listings_three_way():
    a, b, bad = records("AA-2", "AA-10", "AA")
    assert compare_listings(a, b) == -1
    assert compare_listings(b, a) == 1
    assert compare_listings(a, a) == 0
    assert compare_listings(a, bad) == -1
    assert compare_listings(bad, bad) == 0


def test_compare_agrees_with_sort_key():
    rows = records("C-3", "B-20", "B-3", "C", "A-100")
    by_cmp = sorted(rows, key=cmp_to_key(compare_listings))
    assert [r.sku for r in by_cmp] == [r.sku for r in sort_listings(rows)]
