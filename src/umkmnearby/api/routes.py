"""
API routes.

Endpoints:
- GET  `/api/nearby`: live filtered/sorted/paginated listing view.
- POST `/api/nearby/search`: top-N nearest matches for a submitted query.
- GET  `/api/nearby/suggestions`: autocomplete entries while typing.
- GET  `/api/categories`: category names for the selector.
- GET  `/api/quality`: data quality report for the current listings.
- GET  `/api/settings`: public discovery settings for the UI.

Listings are fetched fresh from the provider on every request.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from umkmnearby.config.overrides import apply_settings_overrides
from umkmnearby.config.settings import get_settings
from umkmnearby.discovery.pipeline import filter_and_sort, paginate, with_distances
from umkmnearby.discovery.ranking import category_options, suggest, top_matches
from umkmnearby.domain.models import ALL_CATEGORIES, Coordinate, Page, RankedResult, SearchCriteria, Suggestion
from umkmnearby.ingestion.provider import ListingProvider, build_provider
from umkmnearby.quality.report import build_quality_report

logger = logging.getLogger(__name__)

router = APIRouter()


def _provider() -> ListingProvider:
    return build_provider(get_settings())


def _upstream_error(e: Exception) -> HTTPException:
    logger.warning("Listing provider failed: %s", e)
    return HTTPException(status_code=502, detail={"code": "UPSTREAM_ERROR", "message": str(e)})


@router.get("/api/nearby", response_model=Page)
def get_nearby(
    text: str = "",
    category: str = ALL_CATEGORIES,
    radius_km: float | None = Query(default=None, gt=0),
    lat: float | None = None,
    lon: float | None = None,
    sort: str | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=100),
) -> Page:
    """Filter + sort listings around (lat, lon); without a location no radius applies."""
    settings = get_settings()
    discovery = settings.discovery
    origin = Coordinate.from_optional(lat, lon)
    criteria = SearchCriteria(
        text=text,
        category_selector=category,
        radius_km=discovery.clamp_radius(radius_km),
        origin=origin,
    )
    try:
        listings = _provider().get_listings(origin=origin)
    except httpx.HTTPError as e:
        raise _upstream_error(e) from e

    items = filter_and_sort(listings, criteria, sort or discovery.default_sort)
    return paginate(with_distances(items, criteria), page=page, page_size=page_size or discovery.page_size)


class SearchRequest(BaseModel):
    criteria: SearchCriteria
    n: int | None = Field(default=None, ge=1, le=50)
    settings_overrides: dict[str, Any] | None = None


class SearchResponse(BaseModel):
    query: SearchCriteria
    results: list[RankedResult]


@router.post("/api/nearby/search", response_model=SearchResponse)
def post_search(request: SearchRequest) -> SearchResponse:
    """Top-N text matches for a submitted query, nearest first when an origin is given."""
    try:
        settings = apply_settings_overrides(get_settings(), request.settings_overrides)
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"code": "VALIDATION_ERROR", "message": str(e)}) from e

    criteria = request.criteria
    try:
        listings = _provider().get_listings(origin=criteria.origin)
    except httpx.HTTPError as e:
        raise _upstream_error(e) from e

    n = request.n or settings.discovery.top_n
    return SearchResponse(query=criteria, results=top_matches(listings, criteria, n))


@router.get("/api/nearby/suggestions", response_model=list[Suggestion])
def get_suggestions(text: str = "") -> list[Suggestion]:
    settings = get_settings()
    provider = _provider()
    try:
        listings = provider.get_listings()
    except httpx.HTTPError as e:
        raise _upstream_error(e) from e
    names = category_options(provider.get_categories(), settings.discovery.allowed_category_names)
    return suggest(
        listings,
        text,
        category_names=names,
        limit=settings.discovery.suggestions.limit,
        per_group_limit=settings.discovery.suggestions.per_group_limit,
    )


@router.get("/api/categories")
def get_categories() -> dict:
    """Return the category selector options ("all" first)."""
    settings = get_settings()
    names = category_options(_provider().get_categories(), settings.discovery.allowed_category_names)
    return {"default": ALL_CATEGORIES, "categories": names}


@router.get("/api/quality")
def get_quality() -> dict:
    provider = _provider()
    try:
        listings = provider.get_listings()
    except httpx.HTTPError as e:
        raise _upstream_error(e) from e
    return build_quality_report(listings, source=provider.describe())


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings for UI defaults (provider URL and paths removed)."""
    settings = get_settings()
    return {
        "app": {"name": settings.app.name},
        "discovery": settings.discovery.model_dump(mode="json"),
    }
