from umkmnearby.domain.models import Coordinate, Listing
from umkmnearby.quality.report import build_quality_report


def test_quality_report_flags_unusable_listings(listing):
    listings = [
        listing("1", "Ok", lat=5.5, lon=95.3, price=1000, category="Kuliner"),
        listing("1", "Duplicate", lat=5.5, lon=95.3, price=1000, category="Kuliner"),
        listing("2", "No coords", price=1000, category="Kuliner"),
        Listing(id="3", name="NaN", coordinate=Coordinate(latitude=float("nan"), longitude=1.0), category="Kuliner"),
        listing("4", "No category", lat=5.5, lon=95.3, price_text="hubungi kami"),
    ]
    report = build_quality_report(listings, source="test")
    codes = {i["code"]: i for i in report["issues"]}

    assert report["overall"]["severity"] == "error"
    assert report["listing_count"] == 5
    assert codes["LISTING_DUPLICATE_ID"]["sample"] == ["1"]
    assert codes["LISTING_MISSING_COORDS"]["sample"] == ["2"]
    assert codes["LISTING_NONFINITE_COORDS"]["sample"] == ["3"]
    assert codes["LISTING_MISSING_CATEGORY"]["sample"] == ["4"]
    assert codes["LISTING_UNPARSEABLE_PRICE"]["sample"] == ["4"]
    assert codes["LISTING_NO_PRICE"]["count"] == 2


def test_quality_report_clean_catalog(listing):
    report = build_quality_report([listing("1", "Ok", lat=5.5, lon=95.3, price=1000, category="Kuliner")])
    assert report["overall"] == {"severity": "info", "issue_count": 0}
    assert report["issues"] == []
