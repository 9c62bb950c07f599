from umkmnearby.discovery.ranking import category_options, suggest, top_matches
from umkmnearby.domain.models import Category, Coordinate, SearchCriteria


def test_top_matches_without_origin_keeps_input_order(toko_listings):
    results = top_matches(toko_listings, SearchCriteria(text="toko"), 3)
    assert [r.listing.name for r in results] == ["Toko Kopi", "Toko Teh"]
    assert all(r.distance_km is None for r in results)


def test_top_matches_sorts_by_distance_when_origin_known(listing):
    origin = Coordinate(latitude=5.60, longitude=95.40)
    items = [
        listing("1", "Toko Kopi", lat=5.54, lon=95.34),
        listing("2", "Toko Tanpa Lokasi"),
        listing("3", "Toko Teh", lat=5.60, lon=95.40),
        listing("4", "Toko Batik", lat=5.58, lon=95.38),
    ]
    results = top_matches(items, SearchCriteria(text="toko", origin=origin), 3)
    assert [r.listing.id for r in results] == ["3", "4", "1"]
    assert results[0].distance_km == 0.0

    everything = top_matches(items, SearchCriteria(text="toko", origin=origin), 10)
    assert everything[-1].listing.id == "2"
    assert everything[-1].distance_km is None


def test_top_matches_ignores_category_and_radius(listing):
    items = [listing("1", "Toko Kopi", lat=5.54, lon=95.34, category="Makanan & Minuman")]
    criteria = SearchCriteria(
        text="kopi",
        category_selector="Elektronik",
        radius_km=0.001,
        origin=Coordinate(latitude=-6.2, longitude=106.8),
    )
    assert [r.listing.id for r in top_matches(items, criteria)] == ["1"]


def test_top_matches_bound(listing):
    items = [listing(str(i), f"Warung {i}") for i in range(7)] + [listing("x", "Bengkel")]
    for n in range(0, 10):
        results = top_matches(items, SearchCriteria(text="warung"), n)
        assert len(results) <= n
        assert len(results) <= 7


def test_top_matches_matches_address_and_category(listing):
    items = [
        listing("1", "Sulaman Gayo", address="Jl. Chik Ditiro", category="Kerajinan Tangan"),
        listing("2", "Butik Hijab", address="Peunayong"),
    ]
    assert [r.listing.id for r in top_matches(items, SearchCriteria(text="kerajinan"))] == ["1"]
    assert [r.listing.id for r in top_matches(items, SearchCriteria(text="peunayong"))] == ["2"]


def test_suggest_orders_name_then_address_then_category(listing):
    items = [
        listing("1", "Kopi Gayo", address="Jl. Kopi No. 1"),
        listing("2", "Teh Tarik", address="Jl. Kopi No. 2"),
        listing("3", "Batik", address="Jl. Merdeka"),
    ]
    out = suggest(items, "kopi", category_names=["Kopi & Teh", "Elektronik"])
    assert [(s.kind, s.id) for s in out] == [("listing", "1"), ("listing", "2"), ("category", "Kopi & Teh")]
    assert suggest(items, "  ") == []


def test_suggest_respects_limits(listing):
    items = [listing(str(i), f"Toko {i}", address=f"Jl. Toko {i}") for i in range(15)]
    out = suggest(items, "toko", category_names=["Toko Online"], limit=12, per_group_limit=10)
    assert len(out) == 12
    # Name matches fill their group first; address matches never repeat them.
    assert [s.id for s in out[:10]] == [str(i) for i in range(10)]
    assert [s.id for s in out[10:]] == ["10", "11"]


def test_category_options_restricts_to_allowed_names():
    allowed = ["Makanan & Minuman", "Elektronik", "Jasa & Layanan"]
    cats = [Category(id="1", name="Elektronik"), Category(id="2", name="Otomotif"), Category(id="3", name="Makanan & Minuman")]
    assert category_options(cats, allowed) == ["Makanan & Minuman", "Elektronik"]
    # Provider unavailable or unrelated: fall back to the allow-list.
    assert category_options([], allowed) == allowed
    assert category_options(cats, []) == ["Elektronik", "Otomotif", "Makanan & Minuman"]
