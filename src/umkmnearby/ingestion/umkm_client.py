"""
Remote catalog client (UMKM marketplace API).

Fetches the two inputs the discovery engine consumes:
- listings: `GET {base_url}/umkm/all[?latitude=..&longitude=..]`
- categories: `GET {base_url}/category/all`

Both endpoints wrap their payload as `{"data": [...]}` and use the provider's own
field names (`_id`, `nama_umkm`, `alamat`, `kategori`, ...). `to_listing` and
`to_category` normalize those records into domain models at this boundary so the
engine never sees provider quirks (string coordinates, nested categories, etc.).

Nothing is cached: listings are fetched fresh for every view.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable

import httpx
from pydantic import ValidationError

from umkmnearby.config.settings import Settings
from umkmnearby.core.http import get_json
from umkmnearby.core.money import coerce_price
from umkmnearby.domain.models import Category, Coordinate, Listing

logger = logging.getLogger(__name__)


def _first(raw: dict[str, Any], *keys: str) -> Any:
    for k in keys:
        v = raw.get(k)
        if v is not None and v != "":
            return v
    return None


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def _to_coordinate(raw: dict[str, Any]) -> Coordinate | None:
    nested = raw.get("coordinate")
    if isinstance(nested, dict):
        raw = nested
    lat = _to_float(_first(raw, "latitude", "lat"))
    lon = _to_float(_first(raw, "longitude", "lng", "lon"))
    if lat is None or lon is None:
        # Unparseable or non-finite: the listing stays usable for text/category views.
        return None
    return Coordinate(latitude=lat, longitude=lon)


def to_listing(raw: Any) -> Listing | None:
    """Normalize one provider record into a `Listing` (None when it has no id or name)."""
    if not isinstance(raw, dict):
        return None
    listing_id = _first(raw, "_id", "id")
    name = _first(raw, "nama_umkm", "name")
    if listing_id is None or name is None:
        return None

    category = _first(raw, "kategori", "category")
    category_id = _first(raw, "kategori_id", "category_id")
    if isinstance(category, dict):
        category_id = category_id or _first(category, "_id", "id")
        category = _first(category, "nama_kategori", "name")

    thumbnail = _first(raw, "thumbnail", "thumbnail_url")
    price = _first(raw, "harga", "price")
    price_text = _first(raw, "rentang_harga", "price_text")
    if isinstance(price, str) and coerce_price(price) is None:
        # Display-formatted range such as "Rp20.000 - Rp50.000".
        price_text = price_text or price
        price = None

    return Listing(
        id=str(listing_id),
        name=str(name),
        address=_first(raw, "alamat", "address") or "",
        category=str(category) if category is not None else None,
        category_id=str(category_id) if category_id is not None else None,
        coordinate=_to_coordinate(raw),
        thumbnail_url=thumbnail if isinstance(thumbnail, str) else None,
        price=price,
        price_text=str(price_text) if price_text is not None else None,
    )


def to_listings(records: Iterable[Any]) -> list[Listing]:
    out: list[Listing] = []
    skipped = 0
    for raw in records:
        try:
            listing = to_listing(raw)
        except ValidationError as e:
            logger.debug("Invalid listing record: %s", e)
            listing = None
        if listing is None:
            skipped += 1
            continue
        out.append(listing)
    if skipped:
        logger.warning("Skipped %d unusable listing record(s)", skipped)
    return out


def to_category(raw: Any) -> Category | None:
    if not isinstance(raw, dict):
        return None
    cid = _first(raw, "_id", "id")
    name = _first(raw, "nama_kategori", "name")
    if cid is None or name is None:
        return None
    return Category(id=str(cid), name=str(name))


def unwrap_data(payload: Any) -> list[Any]:
    """Return the record list from a `{"data": [...]}` envelope (or a bare list)."""
    if isinstance(payload, dict):
        payload = payload.get("data")
    return payload if isinstance(payload, list) else []


class UmkmClient:
    """Thin client for the marketplace API; every call hits the network."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def describe(self) -> str:
        return self._settings.api.base_url

    def _url(self, path: str) -> str:
        return self._settings.api.base_url.rstrip("/") + "/" + path.lstrip("/")

    def get_listings(self, *, origin: Coordinate | None = None) -> list[Listing]:
        """Fetch all listings (optionally hinting the user's location to the provider).

        Raises:
            httpx.HTTPError: On transport errors or non-2xx status codes.
        """
        params = None
        if origin is not None and origin.is_finite:
            params = {"latitude": origin.latitude, "longitude": origin.longitude}
        logger.info("Fetching listings from %s", self._settings.api.base_url)
        payload = get_json(
            self._url(self._settings.api.listings_path),
            params=params,
            timeout_seconds=self._settings.app.http_timeout_seconds,
        )
        return to_listings(unwrap_data(payload))

    def get_categories(self) -> list[Category]:
        """Fetch categories; failures degrade to an empty list (the UI falls back to defaults)."""
        try:
            payload = get_json(
                self._url(self._settings.api.categories_path),
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Error fetching categories: %s", e)
            return []
        return [c for c in (to_category(r) for r in unwrap_data(payload)) if c is not None]
