from __future__ import annotations

import argparse

from umkmnearby.catalog.loader import write_catalog
from umkmnearby.config.settings import get_settings
from umkmnearby.core.logging import configure_logging
from umkmnearby.ingestion.umkm_client import UmkmClient
from umkmnearby.quality.report import build_quality_report


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Snapshot the remote marketplace API into an offline catalog file.")
    p.add_argument("--out", type=str, default="data/catalogs/snapshot.json")
    p.add_argument("--base-url", type=str, default=None, help="Override api.base_url for this run")
    args = p.parse_args(argv)

    configure_logging()
    settings = get_settings()
    if args.base_url:
        settings = settings.model_copy(
            update={"api": settings.api.model_copy(update={"base_url": args.base_url})}
        )

    client = UmkmClient(settings)
    listings = client.get_listings()
    categories = client.get_categories()
    out = write_catalog(args.out, listings, categories)

    report = build_quality_report(listings, source=client.describe())
    print("Wrote catalog:", out)
    print("Listings:", len(listings), "Categories:", len(categories))
    print("Quality:", report["overall"], "Issues:", len(report["issues"]))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
