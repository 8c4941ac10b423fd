from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

import pytest

from viraleats.services.enrichment import TripAdvisorLookup, enrich_restaurant
from viraleats.services.stores import RestaurantNotFound
from tests.fakes import START_TIME, FakeClock, FakeRestaurantStore, make_row

CACHE = {
    "nasi-lemak-wanjo": {
        "ranking": "#3 of 5,210 Restaurants in Kuala Lumpur",
        "priceRange": "RM 10 - RM 25",
        "tags": ["Malaysian", "Halal"],
        "reviewSnippet": "The sambal is worth the queue.",
        "lastUpdated": "2025-01-05T00:00:00Z",
    },
    "village-park": {"ranking": "#12 of 900 Restaurants in Petaling Jaya", "tags": []},
}


@pytest.fixture
def lookup() -> TripAdvisorLookup:
    return TripAdvisorLookup(CACHE)


def test_lookup_by_name_slug(lookup):
    data = lookup.get("Nasi Lemak Wanjo!")
    assert data.rank.startswith("#3")
    assert data.price_text == "RM 10 - RM 25"
    assert data.tags == ["Malaysian", "Halal"]
    assert lookup.get("Unknown Place") is None


def test_lookup_from_file(tmp_path):
    path = tmp_path / "tripadvisor.json"
    path.write_text(json.dumps(CACHE), encoding="utf-8")
    assert len(TripAdvisorLookup.from_file(path)) == 2


def test_missing_or_corrupt_file_gives_empty_lookup(tmp_path):
    assert len(TripAdvisorLookup.from_file(tmp_path / "nope.json")) == 0

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    assert len(TripAdvisorLookup.from_file(corrupt)) == 0

    wrong_shape = tmp_path / "list.json"
    wrong_shape.write_text("[1, 2]", encoding="utf-8")
    assert len(TripAdvisorLookup.from_file(wrong_shape)) == 0


def test_enrich_stores_tripadvisor_fields(lookup):
    store = FakeRestaurantStore([make_row("r1", name="Nasi Lemak Wanjo")])

    out = asyncio.run(enrich_restaurant("r1", store, lookup, FakeClock()))

    assert out.tripadvisor_enriched is True
    assert out.tripadvisor_rank.startswith("#3")
    assert out.tripadvisor_top_review_snippet == "The sambal is worth the queue."
    stored = store.rows["r1"]
    assert stored["tripadvisor_enriched"] is True
    assert stored["tripadvisor_enriched_at"] == datetime.fromtimestamp(START_TIME, tz=timezone.utc)
    assert stored["tripadvisor_tags"] == ["Malaysian", "Halal"]
    assert store.commits == 1


def test_enrich_keeps_existing_values_for_missing_fields(lookup):
    store = FakeRestaurantStore([
        make_row("r2", name="Village Park", tripadvisor_price_text="RM 20 - RM 40"),
    ])
    out = asyncio.run(enrich_restaurant("r2", store, lookup, FakeClock()))
    assert out.tripadvisor_rank.startswith("#12")
    assert out.tripadvisor_price_text == "RM 20 - RM 40"
    assert out.tripadvisor_tags is None


def test_enrich_without_cache_entry_returns_row_unchanged(lookup):
    store = FakeRestaurantStore([make_row("r3", name="Somewhere Else")])
    out = asyncio.run(enrich_restaurant("r3", store, lookup, FakeClock()))
    assert out.tripadvisor_enriched is False
    assert store.commits == 0


def test_enrich_update_failure_still_returns_data(lookup):
    store = FakeRestaurantStore([make_row("r1", name="Nasi Lemak Wanjo")], fail_ids=["r1"])
    out = asyncio.run(enrich_restaurant("r1", store, lookup, FakeClock()))
    assert out.tripadvisor_enriched is True
    assert store.rows["r1"]["tripadvisor_enriched"] is False


def test_enrich_unknown_restaurant(lookup):
    with pytest.raises(RestaurantNotFound):
        asyncio.run(enrich_restaurant("missing", FakeRestaurantStore(), lookup, FakeClock()))
