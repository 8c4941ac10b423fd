from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from viraleats.services.reviews import list_reviews
from tests.fakes import FakeReviewStore


def _review(review_id: str, restaurant_id: str, rating: float, day: int, source: str = "google") -> dict:
    return {
        "id": review_id,
        "restaurant_id": restaurant_id,
        "source": source,
        "author": f"Diner {review_id}",
        "rating": rating,
        "text": "Sambal was spot on.",
        "created_date": datetime(2025, 2, day, tzinfo=timezone.utc),
    }


def _store() -> FakeReviewStore:
    return FakeReviewStore([
        _review("a", "r1", 4.0, 10),
        _review("b", "r1", 5.0, 3, source="tripadvisor"),
        _review("c", "r1", 5.0, 20),
        _review("d", "r2", 3.0, 1),
    ])


def test_reviews_ordered_by_rating_then_newest():
    reviews, source = asyncio.run(list_reviews(_store(), "r1"))
    assert source == "database"
    assert [r.id for r in reviews] == ["c", "b", "a"]
    assert reviews[1].source == "tripadvisor"


def test_reviews_limit_is_passed_to_store():
    store = _store()
    reviews, _ = asyncio.run(list_reviews(store, "r1", limit=2))
    assert len(reviews) == 2
    assert store.fetch_calls == [("r1", 2)]


def test_second_read_comes_from_cache():
    store = _store()
    first, _ = asyncio.run(list_reviews(store, "r1"))
    store.reviews.clear()

    again, source = asyncio.run(list_reviews(store, "r1"))

    assert source == "cache"
    assert again == first
    assert len(store.fetch_calls) == 1


def test_cache_is_per_restaurant():
    store = _store()
    asyncio.run(list_reviews(store, "r1"))
    reviews, source = asyncio.run(list_reviews(store, "r2"))
    assert source == "database"
    assert [r.id for r in reviews] == ["d"]


def test_no_reviews_is_an_empty_list():
    reviews, source = asyncio.run(list_reviews(_store(), "r9"))
    assert reviews == []
    assert source == "database"


def test_store_failure_propagates():
    store = _store()
    store.fail_fetch = True
    with pytest.raises(RuntimeError):
        asyncio.run(list_reviews(store, "r1"))
