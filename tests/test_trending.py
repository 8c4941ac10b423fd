from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from viraleats.services.trending import (
    build_trending_dish,
    list_trending_dishes,
    recommend_percentage,
    trending_count,
    update_viral_scores,
)
from viraleats.services.viral_score import calculate_viral_score
from tests.fakes import FakeRestaurantStore, FakeTrendingDishStore, make_row

NOW = datetime(2025, 3, 14, 3, 0)


def _catalogue(n: int) -> list[dict]:
    # ids share a first character so the daily rotation is identical for all
    return [
        make_row(f"r{i:02d}", google_rating=3.0 + i * 0.1, viral_mentions=50 * (i + 1))
        for i in range(n)
    ]


@pytest.mark.parametrize(
    "total, percentage, expected",
    [(10, 0.15, 2), (1, 0.15, 1), (0, 0.15, 0), (20, 0.15, 3), (100, 0.10, 10), (3, 0.10, 1)],
)
def test_trending_count(total, percentage, expected):
    assert trending_count(total, percentage) == expected


def test_recommend_percentage_clamped():
    assert recommend_percentage(None) == 80
    assert recommend_percentage(3.0) == 75
    assert recommend_percentage(4.5) == 90
    assert recommend_percentage(5.0) == 95


def test_top_fifteen_percent_marked_trending():
    store = FakeRestaurantStore(_catalogue(10))
    dishes = FakeTrendingDishStore()

    stats = asyncio.run(update_viral_scores(store, dishes, NOW, percentage=0.15))

    assert stats.processed == 10
    assert stats.updated == 10
    assert stats.failed == 0
    assert stats.trending == 2
    flagged = sorted(r["id"] for r in store.rows.values() if r["is_trending"])
    assert flagged == ["r08", "r09"]


def test_single_restaurant_is_always_trending():
    store = FakeRestaurantStore(_catalogue(1))
    stats = asyncio.run(update_viral_scores(store, FakeTrendingDishStore(), NOW))
    assert stats.trending == 1
    assert store.rows["r00"]["is_trending"] is True


def test_scores_persisted():
    store = FakeRestaurantStore([make_row("a1", google_rating=4.5, viral_mentions=999, is_halal=True)])
    asyncio.run(update_viral_scores(store, FakeTrendingDishStore(), NOW))
    expected = calculate_viral_score(4.5, 999, True, "a1", day_of_month=NOW.day)
    assert store.rows["a1"]["trending_score"] == expected


def test_ties_keep_fetch_order():
    rows = [make_row("a1", google_rating=4.0, viral_mentions=10),
            make_row("a2", google_rating=4.0, viral_mentions=10)]
    store = FakeRestaurantStore(rows)
    asyncio.run(update_viral_scores(store, FakeTrendingDishStore(), NOW, percentage=0.15))
    assert store.rows["a1"]["is_trending"] is True
    assert store.rows["a2"]["is_trending"] is False


def test_one_failed_write_does_not_stop_the_batch():
    store = FakeRestaurantStore(_catalogue(5), fail_ids=["r02"])
    stats = asyncio.run(update_viral_scores(store, FakeTrendingDishStore(), NOW))
    assert stats.failed == 1
    assert stats.updated == 4
    assert store.rows["r04"]["trending_score"] > 0
    assert store.commits == 1


def test_previously_trending_rows_are_cleared():
    rows = _catalogue(10)
    rows[0]["is_trending"] = True
    store = FakeRestaurantStore(rows)
    asyncio.run(update_viral_scores(store, FakeTrendingDishStore(), NOW))
    assert store.rows["r00"]["is_trending"] is False


def test_empty_catalogue():
    store = FakeRestaurantStore([])
    stats = asyncio.run(update_viral_scores(store, FakeTrendingDishStore(), NOW))
    assert stats.processed == 0
    assert stats.trending == 0


def test_dishes_created_for_top_candidates_only_once():
    store = FakeRestaurantStore(_catalogue(8))
    dishes = FakeTrendingDishStore(store)

    first = asyncio.run(update_viral_scores(store, dishes, NOW, dish_candidates=5))
    second = asyncio.run(update_viral_scores(store, dishes, NOW, dish_candidates=5))

    assert first.dishes_created == 5
    assert second.dishes_created == 0
    assert len(dishes.dishes) == 5
    assert {d["restaurant_id"] for d in dishes.dishes} == {"r03", "r04", "r05", "r06", "r07"}


def test_dish_failure_is_counted():
    store = FakeRestaurantStore(_catalogue(3))
    dishes = FakeTrendingDishStore(store)
    dishes.fail_ids = {"r02"}
    stats = asyncio.run(update_viral_scores(store, dishes, NOW, dish_candidates=3))
    assert stats.dish_errors == 1
    assert stats.dishes_created == 2


def test_build_trending_dish():
    row = make_row("r1", name="Nasi Lemak Antarabangsa", viral_mentions=1234,
                   google_rating=4.6, photos=["https://img/1.jpg", "https://img/2.jpg"])
    dish = build_trending_dish(row, 88.5)
    assert dish["restaurant_id"] == "r1"
    assert dish["dish_name"] in {"Nasi Lemak Special", "Nasi Goreng Kampung", "Nasi Kerabu"}
    assert dish["mention_count"] == 1234
    assert dish["recommend_percentage"] == 92
    assert dish["viral_score"] == 88.5
    assert dish["photo_url"] == "https://img/1.jpg"
    assert "Nasi Lemak Antarabangsa" in dish["description"]


def test_trending_feed_served_from_cache_until_new_dishes():
    store = FakeRestaurantStore(_catalogue(6))
    dishes = FakeTrendingDishStore(store)
    asyncio.run(update_viral_scores(store, dishes, NOW, dish_candidates=2))

    feed, source = asyncio.run(list_trending_dishes(dishes))
    assert source == "database"
    assert len(feed) == 2
    assert feed[0].viral_score >= feed[1].viral_score
    assert feed[0].restaurant_name.startswith("Restaurant ")

    again, source = asyncio.run(list_trending_dishes(dishes))
    assert source == "cache"
    assert again == feed
    assert dishes.fetch_count == 1

    asyncio.run(update_viral_scores(store, dishes, NOW, dish_candidates=4))
    refreshed, source = asyncio.run(list_trending_dishes(dishes))
    assert source == "database"
    assert len(refreshed) == 4


def test_trending_feed_cache_respects_limit():
    store = FakeRestaurantStore(_catalogue(8))
    dishes = FakeTrendingDishStore(store)
    asyncio.run(update_viral_scores(store, dishes, NOW, dish_candidates=6))

    wide, _ = asyncio.run(list_trending_dishes(dishes, limit=6))
    narrow, source = asyncio.run(list_trending_dishes(dishes, limit=2))

    assert len(wide) == 6
    assert source == "database"
    assert narrow == wide[:2]

    _, source = asyncio.run(list_trending_dishes(dishes, limit=2))
    assert source == "cache"
