"""
Storage seams used by the ranking and caching services.

Services depend only on the Protocols below; the Sql* classes are the
Postgres implementations wired in by viraleats.dependencies. Store methods
raise on failure — deciding whether a failure is fatal is the caller's job.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from sqlalchemy import insert, select, text, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from viraleats.database import session_scope
from viraleats.models import CacheEntry, Restaurant, TrendingDish

logger = logging.getLogger(__name__)

_RESTAURANTS = Restaurant.__table__
_ORDERABLE = ("trending_score", "aggregate_rating", "google_rating", "created_at", "name")


class RestaurantNotFound(LookupError):
    """Raised when a restaurant id does not exist (HTTP 404 at the boundary)."""

    def __init__(self, restaurant_id: str) -> None:
        super().__init__(f"Restaurant {restaurant_id} not found")
        self.restaurant_id = restaurant_id


# ── Protocols ────────────────────────────────────────────────────────────────


class RestaurantStore(Protocol):
    async def fetch_all(
        self,
        columns: Optional[Sequence[str]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]: ...

    async def fetch_by_id(self, restaurant_id: str) -> Optional[dict[str, Any]]: ...

    async def find_id_by_place_id(self, google_place_id: str) -> Optional[str]: ...

    async def update_fields(self, restaurant_id: str, fields: dict[str, Any]) -> None: ...

    async def insert(self, row: dict[str, Any]) -> str: ...

    async def commit(self) -> None: ...


class CacheStore(Protocol):
    async def get(self, key: str) -> Optional[tuple[dict[str, Any], datetime]]: ...

    async def put(self, key: str, value: dict[str, Any], created_at: datetime) -> None: ...

    async def delete(self, key: str) -> None: ...


class TrendingDishStore(Protocol):
    async def exists_for_restaurant(self, restaurant_id: str) -> bool: ...

    async def insert(self, dish: dict[str, Any]) -> None: ...

    async def fetch_top(self, limit: int) -> list[dict[str, Any]]: ...

    async def commit(self) -> None: ...


class ReviewStore(Protocol):
    async def fetch_for_restaurant(self, restaurant_id: str, limit: int) -> list[dict[str, Any]]: ...


# ── Postgres implementations ─────────────────────────────────────────────────


class SqlRestaurantStore:
    """Restaurant rows over the request session. Writes run inside savepoints."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def fetch_all(
        self,
        columns: Optional[Sequence[str]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        selected = [_RESTAURANTS.c[name] for name in columns] if columns else [_RESTAURANTS]
        stmt = select(*selected)
        if order_by:
            if order_by not in _ORDERABLE:
                raise ValueError(f"Cannot order restaurants by {order_by!r}")
            stmt = stmt.order_by(
                _RESTAURANTS.c[order_by].desc().nulls_last(), _RESTAURANTS.c.id
            )
        else:
            stmt = stmt.order_by(_RESTAURANTS.c.id)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def fetch_by_id(self, restaurant_id: str) -> Optional[dict[str, Any]]:
        result = await self._db.execute(
            text("SELECT * FROM restaurants WHERE id = :id"),
            {"id": restaurant_id},
        )
        row = result.mappings().first()
        return dict(row) if row else None

    async def find_id_by_place_id(self, google_place_id: str) -> Optional[str]:
        result = await self._db.execute(
            text("SELECT id FROM restaurants WHERE google_place_id = :pid LIMIT 1"),
            {"pid": google_place_id},
        )
        row = result.fetchone()
        return row.id if row else None

    async def update_fields(self, restaurant_id: str, fields: dict[str, Any]) -> None:
        async with self._db.begin_nested():
            result = await self._db.execute(
                update(Restaurant).where(Restaurant.id == restaurant_id).values(**fields)
            )
        if result.rowcount == 0:
            raise RestaurantNotFound(restaurant_id)

    async def insert(self, row: dict[str, Any]) -> str:
        async with self._db.begin_nested():
            result = await self._db.execute(
                insert(Restaurant).values(**row).returning(Restaurant.id)
            )
        return result.scalar_one()

    async def commit(self) -> None:
        await self._db.commit()


class SqlCacheStore:
    """
    Durable key/value tier stored in the `cache` table.
    Each call opens its own session so a failing cache write cannot abort
    the request's main transaction.
    """

    async def get(self, key: str) -> Optional[tuple[dict[str, Any], datetime]]:
        async with session_scope() as session:
            result = await session.execute(
                text("SELECT cache_data, created_at FROM cache WHERE cache_key = :key"),
                {"key": key},
            )
            row = result.fetchone()
        if not row:
            return None
        return dict(row.cache_data), row.created_at

    async def put(self, key: str, value: dict[str, Any], created_at: datetime) -> None:
        stmt = pg_insert(CacheEntry).values(
            cache_key=key, cache_data=value, created_at=created_at
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CacheEntry.cache_key],
            set_={"cache_data": stmt.excluded.cache_data, "created_at": stmt.excluded.created_at},
        )
        async with session_scope() as session:
            await session.execute(stmt)

    async def delete(self, key: str) -> None:
        async with session_scope() as session:
            await session.execute(
                text("DELETE FROM cache WHERE cache_key = :key"), {"key": key}
            )


class SqlTrendingDishStore:
    """Trending dishes over the request session."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def exists_for_restaurant(self, restaurant_id: str) -> bool:
        result = await self._db.execute(
            text("SELECT 1 FROM trending_dishes WHERE restaurant_id = :rid LIMIT 1"),
            {"rid": restaurant_id},
        )
        return result.fetchone() is not None

    async def insert(self, dish: dict[str, Any]) -> None:
        async with self._db.begin_nested():
            await self._db.execute(insert(TrendingDish).values(**dish))

    async def fetch_top(self, limit: int) -> list[dict[str, Any]]:
        result = await self._db.execute(
            text("""
                SELECT
                    d.id, d.restaurant_id, d.dish_name, d.description, d.price,
                    d.mention_count, d.recommend_percentage, d.viral_score,
                    d.photo_url,
                    r.name AS restaurant_name,
                    r.is_halal AS restaurant_is_halal
                FROM trending_dishes d
                LEFT JOIN restaurants r ON r.id = d.restaurant_id
                ORDER BY d.viral_score DESC
                LIMIT :limit
            """),
            {"limit": limit},
        )
        return [dict(row) for row in result.mappings().all()]

    async def commit(self) -> None:
        await self._db.commit()


class SqlReviewStore:
    """Read-only access to the reviews table."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def fetch_for_restaurant(self, restaurant_id: str, limit: int) -> list[dict[str, Any]]:
        result = await self._db.execute(
            text("""
                SELECT id, restaurant_id, source, author, rating, text, created_date
                FROM reviews
                WHERE restaurant_id = :rid
                ORDER BY rating DESC, created_date DESC
                LIMIT :limit
            """),
            {"rid": restaurant_id, "limit": limit},
        )
        return [dict(row) for row in result.mappings().all()]
