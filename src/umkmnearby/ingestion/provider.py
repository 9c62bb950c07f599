"""
Listing/category provider selection.

The API and CLI only need "give me listings and categories". Where they come from
is a config decision:
- `catalog.path` set -> the local JSON catalog (offline, deterministic),
- otherwise -> the remote marketplace API.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from umkmnearby.catalog.loader import load_categories, load_listings
from umkmnearby.config.settings import Settings
from umkmnearby.core.env import resolve_project_path
from umkmnearby.domain.models import Category, Coordinate, Listing
from umkmnearby.ingestion.umkm_client import UmkmClient


class ListingProvider(Protocol):
    def get_listings(self, *, origin: Coordinate | None = None) -> list[Listing]: ...

    def get_categories(self) -> list[Category]: ...

    def describe(self) -> str: ...


class CatalogProvider:
    """Reads listings from a local catalog file on every call (no in-process cache)."""

    def __init__(self, path: str | Path):
        self.path = resolve_project_path(path)

    def get_listings(self, *, origin: Coordinate | None = None) -> list[Listing]:
        return load_listings(self.path)

    def get_categories(self) -> list[Category]:
        return load_categories(self.path)

    def describe(self) -> str:
        return str(self.path)


def build_provider(settings: Settings, *, catalog_path: str | Path | None = None) -> ListingProvider:
    path = catalog_path or settings.catalog.path
    if path:
        return CatalogProvider(path)
    return UmkmClient(settings)
