"""
Tiered read-through cache for single-restaurant lookups.

  Tier 1  process-local TTLCache (30 min)           → source "memory-cache"
  Tier 2  persisted `cache` table (7 days)           → source "persisted-cache"
  Tier 3  restaurants table (source of truth)        → source "source"

A miss on tier N populates every tier above it. Tier-2 reads, writes and
stale-entry deletes are best-effort: failures are logged and the lookup
carries on, so an unavailable durable cache never fails a read.

There is no per-key in-flight de-duplication; two concurrent misses for
the same id both hit the database and the last write wins, which is harmless
because entries are replaced wholesale.
"""

from __future__ import annotations

import logging
from datetime import timedelta, timezone
from typing import Literal

from cachetools import TTLCache

from viraleats.schemas.restaurant import RestaurantOut
from viraleats.services.projection import to_public
from viraleats.services.stores import CacheStore, RestaurantNotFound, RestaurantStore
from viraleats.utils.clock import Clock, system_clock, utc_now

logger = logging.getLogger(__name__)

CacheSource = Literal["memory-cache", "persisted-cache", "source"]


def cache_key(restaurant_id: str) -> str:
    return f"restaurant:{restaurant_id}"


class RestaurantCache:
    """
    Built once per process (see viraleats.main) and shared by request handlers.
    The clock drives both tier-1 expiry (as the TTLCache timer) and tier-2
    staleness, so tests can move time without sleeping.
    """

    def __init__(
        self,
        persisted: CacheStore,
        clock: Clock = system_clock,
        memory_ttl_seconds: float = 30 * 60,
        persisted_ttl_seconds: float = 7 * 24 * 60 * 60,
        maxsize: int = 2_000,
    ) -> None:
        self._persisted = persisted
        self._clock = clock
        self._persisted_ttl = timedelta(seconds=persisted_ttl_seconds)
        self._memory: TTLCache = TTLCache(maxsize=maxsize, ttl=memory_ttl_seconds, timer=clock)

    async def get(
        self,
        restaurant_id: str,
        source: RestaurantStore,
    ) -> tuple[RestaurantOut, CacheSource]:
        """
        Resolve one restaurant through the three tiers.
        Raises RestaurantNotFound when the id is absent from the source of truth.
        """
        key = cache_key(restaurant_id)

        # ── Tier 1 ──────────────────────────────────────────────────────────
        cached = self._memory.get(key)
        if cached is not None:
            logger.debug("Restaurant cache HIT memory (%s)", key)
            return cached, "memory-cache"

        # ── Tier 2 ──────────────────────────────────────────────────────────
        persisted = await self._read_persisted(key)
        if persisted is not None:
            self._memory[key] = persisted
            logger.debug("Restaurant cache HIT persisted (%s)", key)
            return persisted, "persisted-cache"

        # ── Tier 3 ──────────────────────────────────────────────────────────
        row = await source.fetch_by_id(restaurant_id)
        if row is None:
            raise RestaurantNotFound(restaurant_id)

        restaurant = to_public(row)
        self._memory[key] = restaurant
        await self._write_persisted(key, restaurant)
        return restaurant, "source"

    async def invalidate(self, restaurant_id: str) -> None:
        """Drop both tiers for one restaurant so the next read goes to the source."""
        key = cache_key(restaurant_id)
        self._memory.pop(key, None)
        try:
            await self._persisted.delete(key)
        except Exception as exc:
            logger.warning("Failed to invalidate persisted cache entry %s: %s", key, exc)

    # ── Tier-2 helpers (never raise) ─────────────────────────────────────────

    async def _read_persisted(self, key: str) -> RestaurantOut | None:
        try:
            entry = await self._persisted.get(key)
        except Exception as exc:
            logger.warning("Persisted cache read failed for %s: %s", key, exc)
            return None
        if entry is None:
            return None

        value, created_at = entry
        try:
            if created_at.tzinfo is None:
                # timestamp without time zone columns come back naive, in UTC
                created_at = created_at.replace(tzinfo=timezone.utc)
            if utc_now(self._clock) - created_at < self._persisted_ttl:
                return RestaurantOut.model_validate(value)
        except (TypeError, AttributeError, ValueError) as exc:
            logger.warning("Discarding unreadable cache entry %s: %s", key, exc)

        try:
            await self._persisted.delete(key)
        except Exception as exc:
            logger.warning("Failed to delete expired cache entry %s: %s", key, exc)
        return None

    async def _write_persisted(self, key: str, restaurant: RestaurantOut) -> None:
        try:
            await self._persisted.put(
                key,
                restaurant.model_dump(mode="json"),
                utc_now(self._clock),
            )
        except Exception as exc:
            logger.warning("Failed to store %s in persisted cache: %s", key, exc)
