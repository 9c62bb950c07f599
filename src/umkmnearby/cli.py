"""
UMKM Nearby CLI entrypoint.

This CLI is intended for quick local demos and debugging without a frontend.
It delegates all discovery logic to `umkmnearby.discovery`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from umkmnearby.config.settings import get_settings
from umkmnearby.core.logging import configure_logging
from umkmnearby.discovery.pipeline import filter_and_sort, paginate, with_distances
from umkmnearby.discovery.ranking import category_options, suggest, top_matches
from umkmnearby.domain.models import ALL_CATEGORIES, SORT_KEYS, Coordinate, RankedResult, SearchCriteria
from umkmnearby.ingestion.provider import build_provider
from umkmnearby.quality.report import build_quality_report


def _origin(args: argparse.Namespace) -> Coordinate | None:
    return Coordinate.from_optional(args.lat, args.lon)


def one_line_summary(result: RankedResult) -> str:
    """Render a compact single-line summary for a ranked listing."""
    listing = result.listing
    parts = [listing.name, listing.category or "-"]
    if result.distance_km is not None:
        parts.append(f"{result.distance_km:.1f} km")
    pr = listing.price_range
    if pr is not None:
        parts.append(f"Rp{pr.minimum:,.0f}" if pr.minimum == pr.maximum else f"Rp{pr.minimum:,.0f}-{pr.maximum:,.0f}")
    return " | ".join(parts)


def _print_results(results: list[RankedResult], *, as_json: bool) -> None:
    if as_json:
        print(json.dumps([r.model_dump(mode="json") for r in results], ensure_ascii=False, indent=2))
        return
    if not results:
        print("No listings found.")
        return
    for i, r in enumerate(results, start=1):
        print(f"{i:>2}. {one_line_summary(r)}")
        if r.listing.address:
            print(f"    {r.listing.address}")


def _cmd_nearby(args: argparse.Namespace) -> int:
    settings = get_settings()
    provider = build_provider(settings, catalog_path=args.catalog)
    origin = _origin(args)
    criteria = SearchCriteria(
        text=args.text or "",
        category_selector=args.category,
        radius_km=settings.discovery.clamp_radius(args.radius_km),
        origin=origin,
    )
    items = filter_and_sort(provider.get_listings(origin=origin), criteria, args.sort or settings.discovery.default_sort)
    page = paginate(
        with_distances(items, criteria),
        page=int(args.page),
        page_size=int(args.page_size or settings.discovery.page_size),
    )
    if args.json:
        print(json.dumps(page.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0
    print(f"Showing {len(page.items)} of {page.total} listings (page {page.page}/{page.page_count})")
    _print_results(page.items, as_json=False)
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    settings = get_settings()
    provider = build_provider(settings, catalog_path=args.catalog)
    origin = _origin(args)
    criteria = SearchCriteria(text=args.text, origin=origin, radius_km=settings.discovery.default_radius_km)
    results = top_matches(provider.get_listings(origin=origin), criteria, int(args.n or settings.discovery.top_n))
    _print_results(results, as_json=args.json)
    return 0


def _cmd_suggest(args: argparse.Namespace) -> int:
    settings = get_settings()
    provider = build_provider(settings, catalog_path=args.catalog)
    names = category_options(provider.get_categories(), settings.discovery.allowed_category_names)
    suggestions = suggest(
        provider.get_listings(),
        args.text,
        category_names=names,
        limit=settings.discovery.suggestions.limit,
        per_group_limit=settings.discovery.suggestions.per_group_limit,
    )
    if args.json:
        print(json.dumps([s.model_dump(mode="json") for s in suggestions], ensure_ascii=False, indent=2))
        return 0
    for s in suggestions:
        print(f"[{s.kind}] {s.label}" + (f"  ({s.address})" if s.address else ""))
    return 0


def _cmd_quality_report(args: argparse.Namespace) -> int:
    settings = get_settings()
    provider = build_provider(settings, catalog_path=args.catalog)
    report = build_quality_report(provider.get_listings(), source=provider.describe())
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--catalog", type=str, default=None, help="Local catalog JSON (default: settings / remote API)")
    p.add_argument("--json", action="store_true", help="Output machine-readable JSON")


def _add_location(p: argparse.ArgumentParser) -> None:
    p.add_argument("--lat", type=float, default=None, help="Your latitude (omit if unknown)")
    p.add_argument("--lon", type=float, default=None, help="Your longitude (omit if unknown)")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the UMKM Nearby CLI."""
    parser = argparse.ArgumentParser(prog="umkmnearby")
    sub = parser.add_subparsers(dest="command", required=True)

    near = sub.add_parser("nearby", help="List nearby businesses (live filter + sort).")
    _add_common(near)
    _add_location(near)
    near.add_argument("--text", type=str, default="", help="Free-text filter on name/address/category")
    near.add_argument("--category", type=str, default=ALL_CATEGORIES, help="Category name or id ('all' for any)")
    near.add_argument("--radius-km", type=float, default=None, help="Only applies when --lat/--lon are given")
    near.add_argument("--sort", type=str, default=None, choices=list(SORT_KEYS))
    near.add_argument("--page", type=int, default=1)
    near.add_argument("--page-size", type=int, default=None)
    near.set_defaults(func=_cmd_nearby)

    search = sub.add_parser("search", help="Submit a query and show the nearest top-N matches.")
    _add_common(search)
    _add_location(search)
    search.add_argument("text", type=str)
    search.add_argument("-n", type=int, default=None, help="Number of cards (default from settings)")
    search.set_defaults(func=_cmd_search)

    sug = sub.add_parser("suggest", help="Autocomplete suggestions for a partial query.")
    _add_common(sug)
    sug.add_argument("text", type=str)
    sug.set_defaults(func=_cmd_suggest)

    q = sub.add_parser("quality-report", help="Data quality report for the current listings.")
    _add_common(q)
    q.set_defaults(func=_cmd_quality_report)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m umkmnearby.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
