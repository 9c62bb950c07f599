from __future__ import annotations

import pytest

from umkmnearby.domain.models import Coordinate, Listing


def make_listing(
    listing_id: str,
    name: str,
    *,
    lat: float | None = None,
    lon: float | None = None,
    address: str = "",
    category: str | None = None,
    category_id: str | None = None,
    price: float | str | None = None,
    price_text: str | None = None,
) -> Listing:
    coordinate = None if lat is None or lon is None else Coordinate(latitude=lat, longitude=lon)
    return Listing(
        id=listing_id,
        name=name,
        address=address,
        category=category,
        category_id=category_id,
        coordinate=coordinate,
        price=price,
        price_text=price_text,
    )


@pytest.fixture
def toko_listings() -> list[Listing]:
    # Two shops in Banda Aceh, roughly 9 km apart.
    return [
        make_listing("1", "Toko Kopi", lat=5.54, lon=95.34, price=20, category="Makanan & Minuman", category_id="cat-food"),
        make_listing("2", "Toko Teh", lat=5.60, lon=95.40, price=50, category="Minuman", category_id="cat-drink"),
    ]


@pytest.fixture
def origin() -> Coordinate:
    return Coordinate(latitude=5.54, longitude=95.34)


@pytest.fixture
def listing():
    """Factory fixture: `listing("id", "name", lat=..., lon=..., price=...)`."""
    return make_listing
