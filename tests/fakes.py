"""In-memory stand-ins for the store Protocols, a controllable clock and a fake Places API."""

from __future__ import annotations

import copy
import itertools
from datetime import datetime
from typing import Any, Optional, Sequence

from viraleats.services.stores import RestaurantNotFound

START_TIME = 1_700_000_000.0


class FakeClock:
    """Callable clock; tests move it forward with advance()."""

    def __init__(self, start: float = START_TIME) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_row(restaurant_id: str, **fields: Any) -> dict[str, Any]:
    row = {
        "id": restaurant_id,
        "google_place_id": None,
        "name": f"Restaurant {restaurant_id}",
        "address": "Jalan Ampang, Kuala Lumpur",
        "lat": 3.1390,
        "lng": 101.6869,
        "category": "hawker",
        "cuisine": None,
        "google_rating": 4.2,
        "tripadvisor_rating": None,
        "aggregate_rating": None,
        "must_try_dish": None,
        "must_try_confidence": None,
        "price_range": "$$",
        "operating_hours": {},
        "viral_mentions": 100,
        "trending_score": 0.0,
        "is_trending": False,
        "photos": [],
        "is_halal": False,
        "halal_cert_number": None,
        "tripadvisor_rank": None,
        "tripadvisor_price_text": None,
        "tripadvisor_tags": None,
        "tripadvisor_top_review_snippet": None,
        "tripadvisor_enriched": False,
        "tripadvisor_enriched_at": None,
    }
    row.update(fields)
    return row


class FakeRestaurantStore:
    def __init__(self, rows: Sequence[dict[str, Any]] = (), fail_ids: Sequence[str] = ()) -> None:
        self.rows: dict[str, dict[str, Any]] = {r["id"]: dict(r) for r in rows}
        self.fail_ids = set(fail_ids)
        self.fail_fetch = False
        self.fail_insert = False
        self.fetch_calls: list[dict[str, Any]] = []
        self.commits = 0
        self._ids = itertools.count(1)

    async def fetch_all(
        self,
        columns: Optional[Sequence[str]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        self.fetch_calls.append({"columns": columns, "order_by": order_by, "limit": limit})
        if self.fail_fetch:
            raise RuntimeError("database unavailable")

        rows = sorted(self.rows.values(), key=lambda r: r["id"])
        if order_by:
            present = [r for r in rows if r.get(order_by) is not None]
            missing = [r for r in rows if r.get(order_by) is None]
            rows = sorted(present, key=lambda r: r[order_by], reverse=True) + missing
        if limit is not None:
            rows = rows[:limit]
        if columns:
            return [{c: copy.deepcopy(r.get(c)) for c in columns} for r in rows]
        return [copy.deepcopy(r) for r in rows]

    async def fetch_by_id(self, restaurant_id: str) -> Optional[dict[str, Any]]:
        row = self.rows.get(restaurant_id)
        return copy.deepcopy(row) if row else None

    async def find_id_by_place_id(self, google_place_id: str) -> Optional[str]:
        for row in self.rows.values():
            if row.get("google_place_id") == google_place_id:
                return row["id"]
        return None

    async def update_fields(self, restaurant_id: str, fields: dict[str, Any]) -> None:
        if restaurant_id in self.fail_ids:
            raise RuntimeError(f"write failed for {restaurant_id}")
        if restaurant_id not in self.rows:
            raise RestaurantNotFound(restaurant_id)
        self.rows[restaurant_id].update(copy.deepcopy(fields))

    async def insert(self, row: dict[str, Any]) -> str:
        if self.fail_insert:
            raise RuntimeError("insert failed")
        restaurant_id = row.get("id") or f"new-{next(self._ids)}"
        self.rows[restaurant_id] = {**copy.deepcopy(row), "id": restaurant_id}
        return restaurant_id

    async def commit(self) -> None:
        self.commits += 1


class FakeCacheStore:
    def __init__(self) -> None:
        self.entries: dict[str, tuple[dict[str, Any], datetime]] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.deleted: list[str] = []

    async def get(self, key: str) -> Optional[tuple[dict[str, Any], datetime]]:
        if self.fail_reads:
            raise RuntimeError("cache table unavailable")
        entry = self.entries.get(key)
        return copy.deepcopy(entry) if entry else None

    async def put(self, key: str, value: dict[str, Any], created_at: datetime) -> None:
        if self.fail_writes:
            raise RuntimeError("cache table unavailable")
        self.entries[key] = (copy.deepcopy(value), created_at)

    async def delete(self, key: str) -> None:
        self.deleted.append(key)
        self.entries.pop(key, None)


class FakeTrendingDishStore:
    def __init__(self, restaurants: Optional[FakeRestaurantStore] = None) -> None:
        self.dishes: list[dict[str, Any]] = []
        self.restaurants = restaurants
        self.fail_ids: set[str] = set()
        self.fetch_count = 0
        self.commits = 0

    async def exists_for_restaurant(self, restaurant_id: str) -> bool:
        return any(d["restaurant_id"] == restaurant_id for d in self.dishes)

    async def insert(self, dish: dict[str, Any]) -> None:
        if dish["restaurant_id"] in self.fail_ids:
            raise RuntimeError("dish insert failed")
        self.dishes.append({"id": f"dish-{len(self.dishes) + 1}", **dish})

    async def fetch_top(self, limit: int) -> list[dict[str, Any]]:
        self.fetch_count += 1
        ranked = sorted(self.dishes, key=lambda d: d["viral_score"], reverse=True)[:limit]
        out = []
        for dish in ranked:
            row = dict(dish)
            restaurant = (self.restaurants.rows.get(dish["restaurant_id"])
                          if self.restaurants else None)
            row["restaurant_name"] = restaurant["name"] if restaurant else None
            row["restaurant_is_halal"] = restaurant["is_halal"] if restaurant else None
            out.append(row)
        return out

    async def commit(self) -> None:
        self.commits += 1


class FakeReviewStore:
    def __init__(self, reviews: Sequence[dict[str, Any]] = ()) -> None:
        self.reviews = [dict(r) for r in reviews]
        self.fail_fetch = False
        self.fetch_calls: list[tuple[str, int]] = []

    async def fetch_for_restaurant(self, restaurant_id: str, limit: int) -> list[dict[str, Any]]:
        self.fetch_calls.append((restaurant_id, limit))
        if self.fail_fetch:
            raise RuntimeError("database unavailable")
        mine = [r for r in self.reviews if r["restaurant_id"] == restaurant_id]
        mine.sort(key=lambda r: r["created_date"], reverse=True)
        mine.sort(key=lambda r: r["rating"], reverse=True)
        return copy.deepcopy(mine[:limit])


class FakePlaces:
    """PlacesProvider returning canned search results keyed by query."""

    def __init__(
        self,
        results: Optional[dict[str, list[dict[str, Any]]]] = None,
        details: Optional[dict[str, dict[str, Any]]] = None,
    ) -> None:
        self.results = results or {}
        self.details = details or {}
        self.queries: list[str] = []
        self.detail_calls: list[str] = []
        self.failing_queries: set[str] = set()

    async def text_search(self, query: str) -> list[dict[str, Any]]:
        self.queries.append(query)
        if query in self.failing_queries:
            raise RuntimeError("upstream exploded")
        return copy.deepcopy(self.results.get(query, []))

    async def place_details(self, place_id: str) -> Optional[dict[str, Any]]:
        self.detail_calls.append(place_id)
        return copy.deepcopy(self.details.get(place_id))

    def photo_url(self, photo_reference: str) -> str:
        return f"https://photos.test/{photo_reference}"
