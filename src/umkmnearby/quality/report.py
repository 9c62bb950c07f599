"""
Listing data quality report.

A deterministic, network-free view of "can the discovery engine use this catalog?":
listings without usable coordinates silently drop out of radius filtering, listings
without a price sort last, and so on. The report makes those cases visible.

Used by:
- CLI debugging (`umkmnearby quality-report`)
- API status endpoint (`GET /api/quality`)
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Sequence

from umkmnearby.domain.models import Listing


@dataclass(frozen=True)
class Issue:
    severity: str  # "info" | "warning" | "error"
    code: str
    message: str
    count: int = 1
    sample: list[str] | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "code": self.code,
            "message": self.message,
            "count": int(self.count),
            "sample": list(self.sample or []),
        }


def _issue(severity: str, code: str, message: str, ids: list[str]) -> Issue:
    return Issue(severity=severity, code=code, message=message, count=len(ids), sample=ids[:8])


def listing_issues(listings: Sequence[Listing]) -> list[Issue]:
    issues: list[Issue] = []

    counts = Counter(l.id for l in listings)
    dup = sorted(i for i, n in counts.items() if n > 1)
    if dup:
        issues.append(_issue("error", "LISTING_DUPLICATE_ID", "Duplicate listing ids.", dup))

    missing_coords = [l.id for l in listings if l.coordinate is None]
    if missing_coords:
        issues.append(
            _issue(
                "warning",
                "LISTING_MISSING_COORDS",
                "Some listings have no coordinate (excluded whenever a radius applies).",
                missing_coords,
            )
        )

    bad_coords = [l.id for l in listings if l.coordinate is not None and not l.has_coordinate]
    if bad_coords:
        issues.append(
            _issue("error", "LISTING_NONFINITE_COORDS", "Some listings have non-finite coordinates.", bad_coords)
        )

    out_of_range = [
        l.id
        for l in listings
        if l.has_coordinate
        and not (-90 <= l.coordinate.latitude <= 90 and -180 <= l.coordinate.longitude <= 180)
    ]
    if out_of_range:
        issues.append(
            _issue("warning", "LISTING_COORDS_OUT_OF_RANGE", "Some listings have out-of-range coordinates.", out_of_range)
        )

    no_category = [l.id for l in listings if not l.category and not l.category_id]
    if no_category:
        issues.append(
            _issue("warning", "LISTING_MISSING_CATEGORY", "Some listings have neither category nor category_id.", no_category)
        )

    unparsed_price = [l.id for l in listings if l.price is None and l.price_text and l.price_range is None]
    if unparsed_price:
        issues.append(
            _issue("warning", "LISTING_UNPARSEABLE_PRICE", "Some price texts could not be parsed.", unparsed_price)
        )

    no_price = [l.id for l in listings if l.price_range is None]
    if no_price:
        issues.append(_issue("info", "LISTING_NO_PRICE", "Some listings have no usable price.", no_price))

    return issues


def build_quality_report(listings: Sequence[Listing], *, source: str | None = None) -> dict[str, Any]:
    issues = listing_issues(listings)

    severity_rank = {"error": 3, "warning": 2, "info": 1}
    worst = "info"
    for i in issues:
        if severity_rank.get(i.severity, 0) > severity_rank.get(worst, 0):
            worst = i.severity

    return {
        "overall": {"severity": worst, "issue_count": len(issues)},
        "source": source,
        "listing_count": len(listings),
        "issues": [i.as_dict() for i in issues],
    }
