import pytest

from gmaps_reviews.exceptions import FetchError, HTTPStatusError
from gmaps_reviews.extraction.fallback import resolve_business, resolve_listings
from gmaps_reviews.models import BusinessRecord


def fail():
    raise FetchError("boom", "https://www.google.com/search")


def test_named_business_is_kept_without_fetching():
    business = BusinessRecord(name="Joe's Pizza", place_id="p1")
    assert resolve_business(business, fail) is business


def test_sparse_business_replaced_by_panel(panel_html):
    business = BusinessRecord(place_id="p1")
    resolved = resolve_business(business, lambda: panel_html)

    assert resolved.name == "Joe's Pizza"
    assert resolved.place_id == "p1"
    assert resolved.rating == 4.5


def test_panel_without_name_keeps_original(sparse_html):
    business = BusinessRecord(place_id="p1", rating=4.0)
    assert resolve_business(business, lambda: sparse_html) is business


def test_fetch_failure_keeps_original():
    business = BusinessRecord(place_id="p1")
    assert resolve_business(business, fail) is business


def test_listings_are_truncated_without_fallback():
    businesses = [BusinessRecord(name=f"Shop {i}") for i in range(5)]
    assert resolve_listings(businesses, fail, 3) == businesses[:3]


def test_empty_listings_use_local_search(local_html):
    resolved = resolve_listings([], lambda: local_html, 1)
    assert [business.name for business in resolved] == ["Tartine Bakery"]


def test_listing_fallback_errors_propagate():
    def blocked():
        raise HTTPStatusError(503, "https://www.google.com/search")

    with pytest.raises(HTTPStatusError):
        resolve_listings([], blocked, 10)
