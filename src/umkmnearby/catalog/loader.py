"""
Offline listing catalog loader.

The catalog is a local JSON file (e.g. `data/catalogs/listings.json`) used for demos,
tests and offline runs instead of the remote API. It accepts either:
- normalized `Listing` records (`{"id", "name", "coordinate": {...}, ...}`), or
- raw provider records (`{"_id", "nama_umkm", "latitude", ...}`),
optionally wrapped in the provider's `{"data": [...]}` envelope or in
`{"listings": [...], "categories": [...]}` (the offline bundle format).
"""

from __future__ import annotations

import json
from pathlib import Path

from umkmnearby.core.env import resolve_project_path
from umkmnearby.domain.models import Category, Listing
from umkmnearby.ingestion.umkm_client import to_category, to_listings, unwrap_data


def _read_records(path: str | Path) -> list:
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    if isinstance(payload, dict) and "listings" in payload:
        payload = payload["listings"]
    return unwrap_data(payload)


def load_listings(path: str | Path) -> list[Listing]:
    """Load and normalize a listing catalog JSON file."""
    return to_listings(_read_records(path))


def load_categories(path: str | Path) -> list[Category]:
    """Load the optional `categories` array stored next to the listings in a catalog file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        return []
    raw = payload.get("categories") or []
    return [c for c in (to_category(r) for r in raw) if c is not None]


def write_catalog(path: str | Path, listings: list[Listing], categories: list[Category]) -> Path:
    """Write listings + categories as an offline bundle readable by `load_listings`."""
    resolved = resolve_project_path(path)
    payload = {
        "categories": [c.model_dump(mode="json") for c in categories],
        "listings": [l.model_dump(mode="json") for l in listings],
    }
    resolved.parent.mkdir(parents=True, exist_ok=True)
    resolved.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return resolved
