"""Listing search and sorting.

Pure functions over already-fetched listings. All filters are ANDed and an
absent or empty filter value matches everything, so the order in which
filters are applied never changes the result.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from app.config import SortKey
from database.models import ListingModel
from utils.helpers import normalize_enum_value


logger = logging.getLogger(__name__)


class ListingFilters(BaseModel):
    """Structured listing filters (snake_case or camelCase keys)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    min_price: Optional[float] = None
    max_price: Optional[float] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    type: Optional[str] = None
    community_id: Optional[str] = None
    status: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def empty_as_absent(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("type", "status", mode="before")
    @classmethod
    def normalize_casing(cls, v: Any) -> Any:
        """Exact-match keys; an unknown value simply matches nothing."""
        if isinstance(v, Enum):
            v = v.value
        return normalize_enum_value(v, upper=True)

    def matches(self, listing: ListingModel) -> bool:
        """True if ``listing`` passes every filter that is set."""
        if self.min_price is not None and listing.price < self.min_price:
            return False
        if self.max_price is not None and listing.price > self.max_price:
            return False
        if self.bedrooms is not None and listing.bedrooms < self.bedrooms:
            return False
        if self.bathrooms is not None and listing.bathrooms < self.bathrooms:
            return False
        if self.type is not None and listing.type.value != self.type:
            return False
        if self.community_id is not None and listing.community_id != self.community_id:
            return False
        if self.status is not None and listing.status.value != self.status:
            return False
        return True


FiltersLike = Union[ListingFilters, Mapping[str, Any], None]


def coerce_filters(filters: FiltersLike) -> ListingFilters:
    """Accept a `ListingFilters`, a plain dict, or None."""
    if filters is None:
        return ListingFilters()
    if isinstance(filters, ListingFilters):
        return filters
    return ListingFilters.model_validate(dict(filters))


def _matches_query(
    listing: ListingModel,
    needle: str,
    community_names: Mapping[str, str],
) -> bool:
    haystacks = [listing.title, listing.address, listing.description]
    if listing.community_id and listing.community_id in community_names:
        haystacks.append(community_names[listing.community_id])
    return any(needle in (text or "").lower() for text in haystacks)


def search_listings(
    listings: Iterable[ListingModel],
    query: str = "",
    filters: FiltersLike = None,
    community_names: Optional[Mapping[str, str]] = None,
) -> List[ListingModel]:
    """
    Filter listings by free text and structured filters.

    Args:
        listings: Listings to search
        query: Case-insensitive substring matched against title, address,
            description and (when ``community_names`` is given) community name
        filters: Price range, minimum bedrooms/bathrooms, type, community, status
        community_names: Optional community ID -> name map

    Returns:
        Matching listings in input order
    """
    criteria = coerce_filters(filters)
    needle = (query or "").strip().lower()
    names = community_names or {}

    return [
        listing for listing in listings
        if (not needle or _matches_query(listing, needle, names))
        and criteria.matches(listing)
    ]


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        if name in item:
            return item[name]
        return item.get(to_camel(name))
    return getattr(item, name, None)


def _number(item: Any, name: str) -> float:
    value = _field(item, name)
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _timestamp(item: Any) -> float:
    value = _field(item, "created_at")
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return 0.0
    if isinstance(value, datetime):
        return value.timestamp()
    return 0.0


_SORTS = {
    SortKey.PRICE_ASC: (lambda item: _number(item, "price"), False),
    SortKey.PRICE_DESC: (lambda item: _number(item, "price"), True),
    SortKey.SQFT_ASC: (lambda item: _number(item, "sqft"), False),
    SortKey.SQFT_DESC: (lambda item: _number(item, "sqft"), True),
    SortKey.BEDROOMS_ASC: (lambda item: _number(item, "bedrooms"), False),
    SortKey.BEDROOMS_DESC: (lambda item: _number(item, "bedrooms"), True),
    SortKey.NEWEST: (_timestamp, True),
    SortKey.OLDEST: (_timestamp, False),
}


def sort_listings(listings: Sequence[Any], key: Union[SortKey, str, None]) -> List[Any]:
    """
    Stable sort by one named key.

    Works on `ListingModel` instances and on plain dicts. Items with equal
    keys keep their input order; an unknown key returns the input order.

    Args:
        listings: Listings to sort
        key: A `SortKey` or its value ("price-asc", "newest", ...)

    Returns:
        New sorted list
    """
    try:
        sort_key = SortKey(key)
    except ValueError:
        logger.debug(f"Unknown sort key {key!r}, keeping input order")
        return list(listings)

    key_func, descending = _SORTS[sort_key]
    return sorted(listings, key=key_func, reverse=descending)


__all__ = [
    "ListingFilters",
    "coerce_filters",
    "search_listings",
    "sort_listings",
]
