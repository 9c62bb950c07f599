from umkmnearby.discovery.matching import (
    category_keys,
    matches,
    matches_category,
    matches_radius,
    matches_text,
)
from umkmnearby.domain.models import Coordinate, SearchCriteria


def test_category_matches_by_id_or_name(listing):
    item = listing("1", "Toko Kopi", category="Makanan & Minuman", category_id="cat-food")
    assert category_keys(item) == frozenset({"Makanan & Minuman", "cat-food"})
    assert matches_category(item, "all")
    assert matches_category(item, "cat-food")
    assert matches_category(item, "Makanan & Minuman")
    assert not matches_category(item, "Elektronik")


def test_unknown_selector_matches_nothing(listing):
    item = listing("1", "Toko Kopi", category="Makanan & Minuman")
    assert not matches_category(item, "does-not-exist")
    assert not matches_category(listing("2", "No category"), "cat-food")


def test_text_is_case_insensitive_substring_on_name_address_category(listing):
    item = listing("1", "Toko Teh", address="Jl. Kartini, Peunayong", category="Minuman")
    assert matches_text(item, "teh")
    assert matches_text(item, "PEUNAYONG")
    assert matches_text(item, "minum")
    assert matches_text(item, "   ")
    assert not matches_text(item, "kopi")
    # Exact substring only: no tokenization or fuzzy matching.
    assert not matches_text(item, "teh toko")


def test_radius_only_applies_with_origin(listing):
    far = listing("1", "Jauh", lat=5.60, lon=95.40)
    origin = Coordinate(latitude=5.54, longitude=95.34)
    assert matches_radius(far, SearchCriteria(radius_km=1, origin=None))
    assert not matches_radius(far, SearchCriteria(radius_km=1, origin=origin))
    assert matches_radius(far, SearchCriteria(radius_km=20, origin=origin))


def test_radius_excludes_missing_or_non_finite_coordinates(listing):
    origin = Coordinate(latitude=5.54, longitude=95.34)
    missing = listing("1", "Tanpa Lokasi")
    nan = listing("2", "Rusak", lat=float("nan"), lon=95.34)
    criteria = SearchCriteria(radius_km=10_000, origin=origin)
    assert not matches_radius(missing, criteria)
    assert not matches_radius(nan, criteria)


def test_all_predicates_are_required(listing):
    item = listing("1", "Toko Kopi", lat=5.54, lon=95.34, category="Makanan & Minuman")
    origin = Coordinate(latitude=5.54, longitude=95.34)
    ok = SearchCriteria(text="kopi", category_selector="Makanan & Minuman", radius_km=1, origin=origin)
    assert matches(item, ok)
    assert not matches(item, ok.model_copy(update={"text": "teh"}))
    assert not matches(item, ok.model_copy(update={"category_selector": "Elektronik"}))
    assert not matches(item, ok.model_copy(update={"origin": Coordinate(latitude=6.5, longitude=95.34)}))
