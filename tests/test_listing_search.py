from __future__ import annotations

import itertools

from app.config import PropertyType, SortKey
from conftest import make_listing
from database.models import ListingModel
from services.listing_search import ListingFilters, search_listings, sort_listings


def _listing(listing_id: str, price: float = 485000, **overrides) -> ListingModel:
    return ListingModel.model_validate(make_listing(listing_id, price, **overrides))


def test_price_range_includes_listing_inside_bounds():
    listing = _listing("listing-1", 485000)

    assert search_listings([listing], filters={"minPrice": 400000, "maxPrice": 500000}) == [listing]
    assert search_listings([listing], filters={"minPrice": 500000}) == []


def test_price_bounds_are_inclusive():
    listing = _listing("listing-1", 500000)
    assert search_listings([listing], filters={"min_price": 500000, "max_price": 500000}) == [listing]


def test_empty_filter_values_match_everything():
    listings = [_listing("a"), _listing("b", type="condo")]
    filters = {"minPrice": "", "type": "", "communityId": None}
    assert search_listings(listings, "", filters) == listings


def test_bedrooms_and_bathrooms_are_minimums():
    listings = [
        _listing("small", bedrooms=2, bathrooms=1),
        _listing("large", bedrooms=5, bathrooms=3.5),
    ]
    result = search_listings(listings, filters={"bedrooms": 3, "bathrooms": 2.5})
    assert [listing.id for listing in result] == ["large"]


def test_type_and_status_filters_ignore_casing():
    listings = [
        _listing("house"),
        _listing("town", type="TOWNHOME"),
        _listing("sold-town", type="townhome", status="SOLD"),
    ]
    result = search_listings(listings, filters=ListingFilters(type="townhome", status="available"))
    assert [listing.id for listing in result] == ["town"]


def test_unknown_type_or_status_matches_nothing():
    listings = [_listing("a"), _listing("b", type="condo")]

    assert search_listings(listings, filters={"type": "land"}) == []
    assert search_listings(listings, filters={"status": "archived"}) == []


def test_enum_members_are_accepted_as_filter_values():
    listings = [_listing("a"), _listing("b", type="condo")]
    result = search_listings(listings, filters={"type": PropertyType.CONDO})
    assert [listing.id for listing in result] == ["b"]


def test_query_matches_text_fields_case_insensitively():
    listings = [
        _listing("a", title="Lakefront Villa"),
        _listing("b", address="42 LAKE Rd"),
        _listing("c", description="Near the lake"),
        _listing("d", title="Hilltop"),
    ]
    result = search_listings(listings, "lake")
    assert [listing.id for listing in result] == ["a", "b", "c"]


def test_query_matches_community_name_when_known():
    listing = _listing("a", title="Corner lot", communityId="riverstone")

    assert search_listings([listing], "riverstone pointe") == []
    assert search_listings(
        [listing], "river", community_names={"riverstone": "Riverstone"}
    ) == [listing]


def test_filter_order_does_not_change_result():
    listings = [
        _listing("a", 350000, bedrooms=3, type="house"),
        _listing("b", 450000, bedrooms=4, type="house"),
        _listing("c", 450000, bedrooms=4, type="condo"),
        _listing("d", 650000, bedrooms=5, type="house", communityId="brookewater"),
    ]
    criteria = {
        "minPrice": 400000,
        "bedrooms": 4,
        "type": "house",
        "communityId": "riverstone",
    }
    expected = search_listings(listings, filters=criteria)
    assert [listing.id for listing in expected] == ["b"]

    for order in itertools.permutations(criteria):
        remaining = listings
        for name in order:
            remaining = search_listings(remaining, filters={name: criteria[name]})
        assert remaining == expected


def test_sort_by_price():
    listings = [_listing("a", 300000), _listing("b", 100000), _listing("c", 200000)]

    ascending = sort_listings(listings, SortKey.PRICE_ASC)
    descending = sort_listings(listings, "price-desc")

    assert [listing.price for listing in ascending] == [100000, 200000, 300000]
    assert [listing.price for listing in descending] == [300000, 200000, 100000]
    assert [listing.id for listing in listings] == ["a", "b", "c"]


def test_sort_is_stable_for_equal_keys():
    listings = [_listing("first", 100), _listing("second", 100), _listing("third", 50)]

    assert [item.id for item in sort_listings(listings, "price-asc")] == ["third", "first", "second"]
    assert [item.id for item in sort_listings(listings, "price-desc")] == ["first", "second", "third"]


def test_unknown_sort_key_keeps_input_order():
    listings = [_listing("a", 300), _listing("b", 100)]
    assert sort_listings(listings, "cheapest") == listings
    assert sort_listings(listings, None) == listings


def test_sort_works_on_plain_dicts():
    records = [
        {"id": "old", "createdAt": "2024-01-01T00:00:00Z", "sqft": 1800},
        {"id": "new", "createdAt": "2024-06-01T00:00:00Z", "sqft": 2400},
    ]

    assert [r["id"] for r in sort_listings(records, "newest")] == ["new", "old"]
    assert [r["id"] for r in sort_listings(records, "oldest")] == ["old", "new"]
    assert [r["id"] for r in sort_listings(records, "sqft-desc")] == ["new", "old"]
