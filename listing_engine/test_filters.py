"""
Tests for the listing filter predicate and filter_and_sort.
"""
from datetime import datetime, timedelta, timezone

import pytest

from listing_engine.filters import filter_and_sort, filter_listings, matches
from listing_engine.models import FilterCriteria, ListingRecord, UpdateAvailabilityWindow

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


def make_listing(sku="AB-1", **kwargs) -> ListingRecord:
    return ListingRecord(sku=sku, **kwargs)


def skus(rows):
    return [r.sku for r in rows]


def test_no_criteria_matches_everything():
    """Without criteria every record is kept, sorted by SKU."""
    rows = [make_listing("AB-2"), make_listing("AA-10"), make_listing("AB-1"), make_listing("AA-2")]
    assert skus(filter_and_sort(rows, None)) == ["AA-2", "AA-10", "AB-1", "AB-2"]
    assert skus(filter_and_sort(rows, FilterCriteria())) == ["AA-2", "AA-10", "AB-1", "AB-2"]


def test_inputs_are_not_mutated():
    rows = [make_listing("AB-2"), make_listing("AB-1")]
    filter_and_sort(rows, FilterCriteria(skus=["AB-2", "AB-1"]))
    assert skus(rows) == ["AB-2", "AB-1"]


@pytest.mark.parametrize("field_name, criteria_field", [
    ("title_en", "project_names"),
    ("area_lp", "area_lp"),
    ("post_type", "post_types"),
    ("property_type", "property_types"),
    ("availability", "availability"),
    ("post_from", "post_from"),
])
def test_categorical_membership(field_name, criteria_field):
    """Categorical fields are exact-match set membership."""
    hit = make_listing("AB-1", **{field_name: "Alpha"})
    miss = make_listing("AB-2", **{field_name: "Beta"})
    criteria = FilterCriteria(**{criteria_field: ["Alpha", "Gamma"]})
    assert skus(filter_and_sort([hit, miss], criteria)) == ["AB-1"]


def test_sku_membership():
    rows = [make_listing("AB-1"), make_listing("AB-2"), make_listing("AC-1")]
    assert skus(filter_and_sort(rows, FilterCriteria(skus=["AC-1", "AB-1"]))) == ["AB-1", "AC-1"]


def test_bedroom_bucket_three_or_more():
    """Selecting "3" keeps numeric counts >= 3 and drops Studio."""
    rows = [make_listing(f"AB-{i}", bedroom=value)
            for i, value in enumerate(["1", "2", "3", "4", "Studio"], start=1)]
    result = filter_and_sort(rows, FilterCriteria(bedrooms=["3"]))
    assert [r.bedroom for r in result] == ["3", "4"]


def test_bedroom_bucket_overrides_other_selections():
    rows = [make_listing("AB-1", bedroom="1"), make_listing("AB-2", bedroom="5")]
    assert skus(filter_and_sort(rows, FilterCriteria(bedrooms=["1", "3"]))) == ["AB-2"]


def test_bedroom_exact_match_without_bucket():
    rows = [make_listing("AB-1", bedroom="Studio"), make_listing("AB-2", bedroom="1"),
            make_listing("AB-3", bedroom="2")]
    assert skus(filter_and_sort(rows, FilterCriteria(bedrooms=["Studio", "2"]))) == ["AB-1", "AB-3"]


def test_bathroom_bucket():
    rows = [make_listing("AB-1", bathroom="2"), make_listing("AB-2", bathroom="3"),
            make_listing("AB-3", bathroom="")]
    assert skus(filter_and_sort(rows, FilterCriteria(bathrooms=["3"]))) == ["AB-2"]


def test_area_lv_intersection():
    """A record matches when any of its area group tags is selected."""
    record = make_listing(area_lv="North, Central")
    assert matches(record, FilterCriteria(area_lv=["South", "Central"]))
    assert not matches(record, FilterCriteria(area_lv=["South"]))
    assert not matches(make_listing(area_lv=""), FilterCriteria(area_lv=["South"]))


def test_price_range():
    record = make_listing(price=1000)
    assert matches(record, FilterCriteria(min_price=500, max_price=1500))
    assert not matches(record, FilterCriteria(max_price=900))
    assert not matches(record, FilterCriteria(min_price=1001))


def test_zero_is_an_active_bound():
    assert not matches(make_listing(price=10), FilterCriteria(max_price=0))
    assert matches(make_listing(price=0), FilterCriteria(max_price=0))


def test_missing_price_fails_price_bounds():
    assert not matches(make_listing(price=None), FilterCriteria(min_price=0))
    assert matches(make_listing(price=None), FilterCriteria())


def test_area_size_range():
    record = make_listing(area_size=35.5)
    assert matches(record, FilterCriteria(min_area_size=30, max_area_size=40))
    assert not matches(record, FilterCriteria(min_area_size=36))
    assert not matches(record, FilterCriteria(max_area_size=35))


def test_pet_allowed_and_exclusive_flags():
    pets = make_listing("AB-1", pet_allowed="Allow")
    exclusive = make_listing("AB-2", exclusive="Exclusive")
    plain = make_listing("AB-3")
    rows = [pets, exclusive, plain]
    assert skus(filter_and_sort(rows, FilterCriteria(pet_allowed=True))) == ["AB-1"]
    assert skus(filter_and_sort(rows, FilterCriteria(exclusive=True))) == ["AB-2"]
    assert skus(filter_and_sort(rows, FilterCriteria(pet_allowed=False, exclusive=False))) == [
        "AB-1", "AB-2", "AB-3"]


def test_tel_normalization():
    """Digits are compared after stripping formatting on both sides."""
    record = make_listing(phone="(02) 123-4567")
    assert matches(record, FilterCriteria(tel="02 123 4567"))
    assert matches(record, FilterCriteria(tel="1234"))
    assert not matches(record, FilterCriteria(tel="999"))


def test_tel_without_phone_never_matches():
    assert not matches(make_listing(phone=None), FilterCriteria(tel="02"))


def test_blank_tel_is_inactive():
    assert matches(make_listing(phone=None), FilterCriteria(tel="   "))


def test_update_availability_windows():
    recent = make_listing("AB-1", update_availability=(NOW - timedelta(days=3)).isoformat())
    older = make_listing("AB-2", update_availability=(NOW - timedelta(days=10)).isoformat())
    stale = make_listing("AB-3", update_availability=(NOW - timedelta(days=45)).isoformat())
    rows = [recent, older, stale]

    week = FilterCriteria(update_availability=UpdateAvailabilityWindow.LESS_THAN_7_DAYS)
    month = FilterCriteria(update_availability="Less than 30 days")
    assert skus(filter_and_sort(rows, week, now=NOW)) == ["AB-1"]
    assert skus(filter_and_sort(rows, month, now=NOW)) == ["AB-1", "AB-2"]


def test_update_availability_day_boundary_truncates():
    """6 days 23 hours counts as 6 whole days."""
    ts = (NOW - timedelta(days=6, hours=23)).isoformat()
    assert matches(make_listing(update_availability=ts),
                   FilterCriteria(update_availability="Less than 7 days"), now=NOW)
    ts = (NOW - timedelta(days=7)).isoformat()
    assert not matches(make_listing(update_availability=ts),
                       FilterCriteria(update_availability="Less than 7 days"), now=NOW)


def test_update_availability_hard_reject_without_timestamp():
    """No timestamp excludes the record even when everything else matches."""
    record = make_listing(title_en="Tower", price=1000, update_availability=None)
    criteria = FilterCriteria(project_names=["Tower"], min_price=1,
                              update_availability="Less than 30 days")
    assert not matches(record, criteria, now=NOW)


def test_update_availability_unknown_window_rejects():
    record = make_listing(update_availability=NOW.isoformat())
    assert not matches(record, FilterCriteria(update_availability="Whenever"), now=NOW)


def test_update_availability_zulu_and_naive_timestamps():
    criteria = FilterCriteria(update_availability="Less than 7 days")
    assert matches(make_listing(update_availability="2024-06-29T08:00:00Z"), criteria, now=NOW)
    assert matches(make_listing(update_availability="2024-06-29T08:00:00"), criteria, now=NOW)
    assert not matches(make_listing(update_availability="not a date"), criteria, now=NOW)


def test_and_semantics_narrow_results():
    rows = [
        make_listing("AB-1", post_type="Rent", price=1000),
        make_listing("AB-2", post_type="Rent", price=5000),
        make_listing("AB-3", post_type="Sale", price=1000),
    ]
    one = filter_listings(rows, FilterCriteria(post_types=["Rent"]))
    two = filter_listings(rows, FilterCriteria(post_types=["Rent"], max_price=2000))
    assert skus(one) == ["AB-1", "AB-2"]
    assert skus(two) == ["AB-1"]
    assert set(skus(two)) <= set(skus(one))
