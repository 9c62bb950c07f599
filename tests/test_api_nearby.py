from starlette.testclient import TestClient

import httpx

from umkmnearby.api.app import app
from umkmnearby.domain.models import Category, Coordinate, Listing


class _StubProvider:
    def __init__(self, listings: list[Listing], categories: list[Category] | None = None):
        self._listings = listings
        self._categories = categories or []
        self.origins: list[Coordinate | None] = []

    def get_listings(self, *, origin: Coordinate | None = None) -> list[Listing]:
        self.origins.append(origin)
        return list(self._listings)

    def get_categories(self) -> list[Category]:
        return list(self._categories)

    def describe(self) -> str:
        return "stub"


class _FailingProvider(_StubProvider):
    def get_listings(self, *, origin: Coordinate | None = None) -> list[Listing]:
        raise httpx.ConnectError("upstream down")


def _stub(monkeypatch, provider):
    # Patch the provider factory so API tests stay offline.
    import umkmnearby.api.routes as routes

    monkeypatch.setattr(routes, "_provider", lambda: provider)
    return provider


def test_nearby_filters_by_radius_and_reports_distance(monkeypatch, toko_listings):
    provider = _stub(monkeypatch, _StubProvider(toko_listings))
    with TestClient(app) as c:
        resp = c.get("/api/nearby", params={"lat": 5.54, "lon": 95.34, "radius_km": 5})
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 1
    assert data["items"][0]["listing"]["name"] == "Toko Kopi"
    assert data["items"][0]["distance_km"] == 0.0
    assert provider.origins[0] == Coordinate(latitude=5.54, longitude=95.34)


def test_nearby_without_location_sorts_and_paginates(monkeypatch, toko_listings):
    _stub(monkeypatch, _StubProvider(toko_listings))
    with TestClient(app) as c:
        resp = c.get("/api/nearby", params={"sort": "price-desc", "page_size": 1, "page": 1})
    data = resp.json()
    assert resp.status_code == 200
    assert (data["total"], data["page_count"]) == (2, 2)
    assert data["items"][0]["listing"]["name"] == "Toko Teh"
    assert data["items"][0]["distance_km"] is None


def test_nearby_unknown_sort_is_tolerated(monkeypatch, toko_listings):
    _stub(monkeypatch, _StubProvider(toko_listings))
    with TestClient(app) as c:
        resp = c.get("/api/nearby", params={"sort": "rating"})
    assert resp.status_code == 200
    assert [i["listing"]["name"] for i in resp.json()["items"]] == ["Toko Kopi", "Toko Teh"]


def test_search_returns_top_matches(monkeypatch, toko_listings):
    _stub(monkeypatch, _StubProvider(toko_listings))
    payload = {"criteria": {"text": "toko", "origin": {"latitude": 5.60, "longitude": 95.40}}, "n": 1}
    with TestClient(app) as c:
        resp = c.post("/api/nearby/search", json=payload)
    assert resp.status_code == 200
    results = resp.json()["results"]
    assert [r["listing"]["name"] for r in results] == ["Toko Teh"]


def test_search_rejects_disallowed_overrides(monkeypatch, toko_listings):
    _stub(monkeypatch, _StubProvider(toko_listings))
    payload = {"criteria": {"text": "toko"}, "settings_overrides": {"api": {"base_url": "x"}}}
    with TestClient(app) as c:
        resp = c.post("/api/nearby/search", json=payload)
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"


def test_upstream_failure_maps_to_502(monkeypatch):
    _stub(monkeypatch, _FailingProvider([]))
    with TestClient(app) as c:
        resp = c.get("/api/nearby")
    assert resp.status_code == 502
    assert resp.json()["detail"]["code"] == "UPSTREAM_ERROR"


def test_suggestions_and_categories(monkeypatch, toko_listings):
    categories = [Category(id="c1", name="Makanan & Minuman"), Category(id="c2", name="Otomotif")]
    _stub(monkeypatch, _StubProvider(toko_listings, categories))
    with TestClient(app) as c:
        sug = c.get("/api/nearby/suggestions", params={"text": "makan"}).json()
        cats = c.get("/api/categories").json()
    assert [(s["kind"], s["label"]) for s in sug] == [("category", "Makanan & Minuman")]
    assert cats == {"default": "all", "categories": ["Makanan & Minuman"]}


def test_quality_and_public_settings(monkeypatch, toko_listings):
    _stub(monkeypatch, _StubProvider(toko_listings))
    with TestClient(app) as c:
        quality = c.get("/api/quality").json()
        settings = c.get("/api/settings").json()
    assert quality["source"] == "stub"
    assert quality["listing_count"] == 2
    assert "api" not in settings
    assert settings["discovery"]["top_n"] == 3


def test_search_applies_top_n_override(monkeypatch, toko_listings):
    _stub(monkeypatch, _StubProvider(toko_listings))
    payload = {"criteria": {"text": "toko"}, "settings_overrides": {"discovery": {"top_n": 1}}}
    with TestClient(app) as c:
        resp = c.post("/api/nearby/search", json=payload)
    assert resp.status_code == 200
    assert [r["listing"]["name"] for r in resp.json()["results"]] == ["Toko Kopi"]
