# src/umkmnearby/discovery/pipeline.py
"""
Live filter + sort pipeline (recomputed on every input change).

`filter_and_sort` is a pure function of (listings, criteria, sort_key): it never
mutates its input and holds no state between calls. All sorts rely on Python's
stable `sorted`, so tied listings keep their relative input order.

Fallbacks (not errors):
- unknown sort keys behave like "none" (input order),
- "distance" without an origin is a no-op (input order),
- listings without a usable price or coordinate sort after the comparable ones.
"""

from __future__ import annotations

import logging
import math
import unicodedata
from typing import Sequence

from umkmnearby.discovery.matching import distance_to, matches
from umkmnearby.domain.models import SORT_KEYS, Listing, Page, RankedResult, SearchCriteria

logger = logging.getLogger(__name__)


def collation_key(text: str) -> tuple[str, str]:
    """Locale-style sort key: accents and case are ignored first, then used as tie-breakers.

    "édith" sorts next to "Edith" instead of after "z" as raw code-point ordering would.
    On ties lowercase comes before uppercase ("apple" < "Apple"), like ICU root collation.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text.swapcase()


def _finite(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def _price_asc_key(listing: Listing) -> tuple[int, float]:
    pr = listing.price_range
    if pr is None or not _finite(pr.minimum):
        return 1, 0.0
    return 0, pr.minimum


def _price_desc_key(listing: Listing) -> tuple[int, float]:
    pr = listing.price_range
    if pr is None or not _finite(pr.maximum):
        return 1, 0.0
    return 0, -pr.maximum


def _sort(listings: list[Listing], criteria: SearchCriteria, sort_key: str) -> list[Listing]:
    if sort_key == "price-asc":
        return sorted(listings, key=_price_asc_key)
    if sort_key == "price-desc":
        return sorted(listings, key=_price_desc_key)
    if sort_key == "name-asc":
        return sorted(listings, key=lambda l: collation_key(l.name))
    if sort_key == "distance":
        if criteria.origin is None:
            return listings

        def _distance_key(listing: Listing) -> tuple[int, float]:
            d = distance_to(listing, criteria)
            return (1, 0.0) if d is None else (0, d)

        return sorted(listings, key=_distance_key)
    if sort_key not in SORT_KEYS:
        logger.debug("Unknown sort key %r; keeping input order", sort_key)
    return listings


def filter_and_sort(
    listings: Sequence[Listing], criteria: SearchCriteria, sort_key: str = "none"
) -> list[Listing]:
    """Filter `listings` by `criteria` then stable-sort them by `sort_key`."""
    filtered = [l for l in listings if matches(l, criteria)]
    return _sort(filtered, criteria, sort_key)


def with_distances(listings: Sequence[Listing], criteria: SearchCriteria) -> list[RankedResult]:
    """Attach the distance from `criteria.origin` (None when unavailable) to each listing."""
    return [RankedResult(listing=l, distance_km=distance_to(l, criteria)) for l in listings]


def paginate(items: Sequence[RankedResult], *, page: int, page_size: int) -> Page:
    """Slice one page out of `items`; out-of-range pages are clamped into [1, page_count]."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    total = len(items)
    page_count = max(1, math.ceil(total / page_size))
    current = min(max(1, int(page)), page_count)
    start = (current - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page=current,
        page_size=page_size,
        page_count=page_count,
        total=total,
    )
