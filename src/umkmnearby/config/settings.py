# src/umkmnearby/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/umkmnearby/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `UMKMNEARBY_API_BASE_URL`, `UMKMNEARBY_LOG_LEVEL`)
- an external YAML file via `UMKMNEARBY_CONFIG_PATH`

Design rule:
- Tuning knobs (default radius, page size, top-N) live in YAML, not in the discovery code.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from umkmnearby.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field, model_validator


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `umkmnearby.config`."""
    text = resources.files("umkmnearby.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "UMKM Nearby"
    http_timeout_seconds: float = 10
    log_level: str = "INFO"


class ApiSettings(BaseModel):
    base_url: str = "https://levelup-backend-production-839e.up.railway.app/api"
    listings_path: str = "/umkm/all"
    categories_path: str = "/category/all"


class CatalogSettings(BaseModel):
    # When set, listings are read from this local JSON file instead of the remote API.
    path: str | None = None


class SuggestionSettings(BaseModel):
    limit: int = Field(12, ge=1)
    per_group_limit: int = Field(10, ge=1)


class DiscoverySettings(BaseModel):
    default_radius_km: float = Field(5.0, gt=0)
    min_radius_km: float = Field(0.5, gt=0)
    max_radius_km: float = Field(10.0, gt=0)
    top_n: int = Field(3, ge=1)
    page_size: int = Field(9, ge=1)
    default_sort: str = "none"
    suggestions: SuggestionSettings = Field(default_factory=SuggestionSettings)
    allowed_category_names: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_radius_bounds(self) -> "DiscoverySettings":
        if self.min_radius_km > self.max_radius_km:
            raise ValueError("discovery.min_radius_km must not exceed discovery.max_radius_km")
        return self

    def clamp_radius(self, radius_km: float | None) -> float:
        """Clamp a requested radius into the configured slider range."""
        if radius_km is None:
            return self.default_radius_km
        return max(self.min_radius_km, min(self.max_radius_km, float(radius_km)))


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Only the keys below are read from the environment.
    """
    load_dotenv_if_present()
    data = dict(data)
    log_level = os.getenv("UMKMNEARBY_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    base_url = os.getenv("UMKMNEARBY_API_BASE_URL")
    if base_url:
        data.setdefault("api", {})["base_url"] = base_url

    catalog_path = os.getenv("UMKMNEARBY_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("UMKMNEARBY_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
