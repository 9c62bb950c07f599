# src/umkmnearby/discovery/matching.py
"""
Listing predicates.

A listing matches a query when ALL three predicates hold:
- category: selector is "all", or equals the listing's category id or category name,
- text: empty query, or a case-insensitive substring of name/address/category,
- radius: no usable origin, or the listing is within `radius_km` of the origin.

Category identification is dual: some callers filter by the provider's opaque id,
others by the human-readable name. `category_keys` folds both into one key set so
callers never need to know which scheme is in effect.
"""

from __future__ import annotations

from umkmnearby.core.geo import haversine_km
from umkmnearby.domain.models import ALL_CATEGORIES, Listing, SearchCriteria


def category_keys(listing: Listing) -> frozenset[str]:
    """Canonical category keys for a listing (id and/or name, whichever are present)."""
    return frozenset(k for k in (listing.category_id, listing.category) if k)


def normalize_query(text: str | None) -> str:
    return (text or "").strip().lower()


def matches_category(listing: Listing, selector: str) -> bool:
    if selector == ALL_CATEGORIES:
        return True
    return selector in category_keys(listing)


def matches_text(listing: Listing, text: str | None) -> bool:
    q = normalize_query(text)
    if not q:
        return True
    return (
        q in listing.name.lower()
        or q in listing.address.lower()
        or (listing.category is not None and q in listing.category.lower())
    )


def distance_to(listing: Listing, criteria: SearchCriteria) -> float | None:
    """Distance from the origin in km, or None when either side has no usable coordinate."""
    if criteria.origin is None or not criteria.origin.is_finite or not listing.has_coordinate:
        return None
    return haversine_km(criteria.origin, listing.coordinate)


def matches_radius(listing: Listing, criteria: SearchCriteria) -> bool:
    if criteria.origin is None or not criteria.origin.is_finite:
        return True
    d = distance_to(listing, criteria)
    return d is not None and d <= criteria.radius_km


def matches(listing: Listing, criteria: SearchCriteria) -> bool:
    return (
        matches_category(listing, criteria.category_selector)
        and matches_text(listing, criteria.text)
        and matches_radius(listing, criteria)
    )
