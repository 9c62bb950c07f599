# src/umkmnearby/discovery/ranking.py
"""
Search-submission ranking and autocomplete.

- `top_matches`: what the user sees after pressing Enter. A full-catalog text search
  (category and radius filters are NOT applied), nearest first when the origin is known.
- `suggest`: what the user sees while typing (listings by name, then by address,
  then category names).
- `category_options`: the category names offered in the selector.
"""

from __future__ import annotations

from typing import Sequence

from umkmnearby.discovery.matching import distance_to, matches_text, normalize_query
from umkmnearby.domain.models import Category, Listing, RankedResult, SearchCriteria, Suggestion


def top_matches(listings: Sequence[Listing], criteria: SearchCriteria, n: int = 3) -> list[RankedResult]:
    """Return at most `n` text matches, ordered by distance when `criteria.origin` is set.

    A blank query matches every listing. Listings without a usable coordinate keep
    `distance_km=None` and rank after those with one.
    """
    if n <= 0:
        return []

    pool = [
        RankedResult(listing=l, distance_km=distance_to(l, criteria))
        for l in listings
        if matches_text(l, criteria.text)
    ]
    if criteria.origin is not None:
        pool = sorted(pool, key=lambda r: (1, 0.0) if r.distance_km is None else (0, r.distance_km))
    return pool[:n]


def _listing_suggestion(listing: Listing) -> Suggestion:
    return Suggestion(
        kind="listing",
        id=listing.id,
        label=listing.name,
        address=listing.address or None,
        category=listing.category,
        coordinate=listing.coordinate,
    )


def suggest(
    listings: Sequence[Listing],
    text: str,
    *,
    category_names: Sequence[str] = (),
    limit: int = 12,
    per_group_limit: int = 10,
) -> list[Suggestion]:
    """Autocomplete entries for `text`: name matches, then address matches, then categories."""
    q = normalize_query(text)
    if not q:
        return []

    by_name = [_listing_suggestion(l) for l in listings if q in l.name.lower()][:per_group_limit]

    seen = {s.id for s in by_name}
    by_address: list[Suggestion] = []
    for l in listings:
        if len(by_address) >= per_group_limit:
            break
        addr = l.address.strip()
        if not addr or l.id in seen or q not in addr.lower():
            continue
        seen.add(l.id)
        by_address.append(_listing_suggestion(l))

    by_category = [
        Suggestion(kind="category", id=name, label=name) for name in category_names if q in name.lower()
    ][:per_group_limit]

    return [*by_name, *by_address, *by_category][:limit]


def category_options(categories: Sequence[Category], allowed_names: Sequence[str]) -> list[str]:
    """Allowed category names the provider actually knows; the full allow-list if none match.

    With an empty allow-list every provider category name is offered.
    """
    names_from_provider = [c.name for c in categories if c.name]
    if not allowed_names:
        return names_from_provider
    filtered = [name for name in allowed_names if name in names_from_provider]
    return filtered or list(allowed_names)
