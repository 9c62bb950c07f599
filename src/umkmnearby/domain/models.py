"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- catalog entities (`Listing`, `Category`) normalized from the remote provider
- per-query input (`SearchCriteria`)
- discovery output (`RankedResult`, `Page`, `Suggestion`)

Coordinates are NOT range-validated: garbage-in coordinates must not
crash the engine, they simply drop out of distance-based operations.
"""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from umkmnearby.core.geo import is_finite_coordinate
from umkmnearby.core.money import coerce_price, parse_price_range

ALL_CATEGORIES = "all"

SortKey = Literal["price-asc", "price-desc", "distance", "name-asc", "none"]
SORT_KEYS: tuple[str, ...] = ("price-asc", "price-desc", "distance", "name-asc", "none")


class Coordinate(BaseModel):
    """A latitude/longitude pair in decimal degrees (unvalidated range)."""

    latitude: float
    longitude: float

    @property
    def is_finite(self) -> bool:
        return is_finite_coordinate(self)

    @classmethod
    def from_optional(cls, latitude: float | None, longitude: float | None) -> "Coordinate | None":
        """Build an origin from optional inputs; None when either part is missing or non-finite."""
        if latitude is None or longitude is None:
            return None
        point = cls(latitude=latitude, longitude=longitude)
        return point if point.is_finite else None


class Category(BaseModel):
    """A category option supplied by the category provider."""

    id: str
    name: str


class PriceRange(BaseModel):
    minimum: float
    maximum: float


class Listing(BaseModel):
    """One discoverable business."""

    id: str
    name: str
    address: str = ""
    category: str | None = None
    category_id: str | None = None
    coordinate: Coordinate | None = None
    thumbnail_url: str | None = None

    # Single fixed price, or a free-text range such as "Rp20.000 - Rp50.000".
    price: float | None = None
    price_text: str | None = None

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> float | None:
        return coerce_price(value)

    @field_validator("address", mode="before")
    @classmethod
    def _default_address(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def has_coordinate(self) -> bool:
        return is_finite_coordinate(self.coordinate)

    @property
    def price_range(self) -> PriceRange | None:
        """Usable price bounds: the fixed price wins, otherwise the range parsed from `price_text`."""
        if self.price is not None and math.isfinite(self.price):
            return PriceRange(minimum=self.price, maximum=self.price)
        parsed = parse_price_range(self.price_text)
        if parsed is None:
            return None
        return PriceRange(minimum=parsed[0], maximum=parsed[1])


class SearchCriteria(BaseModel):
    """Ephemeral per-query filter input. `origin=None` means location unknown or denied."""

    text: str = ""
    category_selector: str = ALL_CATEGORIES
    radius_km: float = Field(5.0, ge=0)
    origin: Coordinate | None = None

    @field_validator("origin")
    @classmethod
    def _drop_unusable_origin(cls, value: Coordinate | None) -> Coordinate | None:
        # A non-finite origin is treated as "location unknown" everywhere.
        if value is not None and not value.is_finite:
            return None
        return value


class RankedResult(BaseModel):
    listing: Listing
    distance_km: float | None = None


class Page(BaseModel):
    items: list[RankedResult]
    page: int
    page_size: int
    page_count: int
    total: int


class Suggestion(BaseModel):
    """Autocomplete entry: either a listing or a category name."""

    kind: Literal["listing", "category"]
    id: str
    label: str
    address: str | None = None
    category: str | None = None
    coordinate: Coordinate | None = None
