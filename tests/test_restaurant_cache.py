from __future__ import annotations

import asyncio

import pytest

from viraleats.services.restaurant_cache import RestaurantCache, cache_key
from viraleats.services.stores import RestaurantNotFound
from tests.fakes import FakeCacheStore, FakeClock, FakeRestaurantStore, make_row

MINUTE = 60
DAY = 24 * 60 * MINUTE


def _setup(clock: FakeClock):
    source = FakeRestaurantStore([make_row("r1", name="Village Park", must_try_dish="Nasi Lemak")])
    persisted = FakeCacheStore()
    cache = RestaurantCache(
        persisted,
        clock=clock,
        memory_ttl_seconds=30 * MINUTE,
        persisted_ttl_seconds=7 * DAY,
    )
    return cache, persisted, source


def test_miss_populates_both_tiers(clock):
    cache, persisted, source = _setup(clock)

    restaurant, tier = asyncio.run(cache.get("r1", source))

    assert tier == "source"
    assert restaurant.name == "Village Park"
    assert cache_key("r1") in persisted.entries


def test_second_lookup_hits_memory_with_identical_payload(clock):
    cache, _, source = _setup(clock)
    first, _ = asyncio.run(cache.get("r1", source))

    second, tier = asyncio.run(cache.get("r1", source))

    assert tier == "memory-cache"
    assert second == first


def test_memory_expiry_falls_back_to_persisted_then_repopulates(clock):
    cache, _, source = _setup(clock)
    first, _ = asyncio.run(cache.get("r1", source))

    clock.advance(31 * MINUTE)
    again, tier = asyncio.run(cache.get("r1", source))
    assert tier == "persisted-cache"
    assert again.model_dump() == first.model_dump()

    _, tier = asyncio.run(cache.get("r1", source))
    assert tier == "memory-cache"


def test_stale_persisted_entry_is_deleted_and_reloaded(clock):
    cache, persisted, source = _setup(clock)
    asyncio.run(cache.get("r1", source))
    source.rows["r1"]["name"] = "Village Park Damansara"

    clock.advance(8 * DAY)
    restaurant, tier = asyncio.run(cache.get("r1", source))

    assert tier == "source"
    assert restaurant.name == "Village Park Damansara"
    assert cache_key("r1") in persisted.deleted
    assert cache_key("r1") in persisted.entries


def test_persisted_read_failure_is_not_fatal(clock):
    cache, persisted, source = _setup(clock)
    persisted.fail_reads = True

    restaurant, tier = asyncio.run(cache.get("r1", source))

    assert tier == "source"
    assert restaurant.id == "r1"


def test_persisted_write_failure_is_not_fatal(clock):
    cache, persisted, source = _setup(clock)
    persisted.fail_writes = True

    _, tier = asyncio.run(cache.get("r1", source))
    assert tier == "source"
    assert persisted.entries == {}

    _, tier = asyncio.run(cache.get("r1", source))
    assert tier == "memory-cache"


def test_unknown_id_raises(clock):
    cache, _, source = _setup(clock)
    with pytest.raises(RestaurantNotFound):
        asyncio.run(cache.get("missing", source))


def test_invalidate_drops_both_tiers(clock):
    cache, persisted, source = _setup(clock)
    asyncio.run(cache.get("r1", source))
    source.rows["r1"]["tripadvisor_rank"] = "#2 of 900"

    asyncio.run(cache.invalidate("r1"))
    restaurant, tier = asyncio.run(cache.get("r1", source))

    assert cache_key("r1") in persisted.deleted
    assert tier == "source"
    assert restaurant.tripadvisor_rank == "#2 of 900"


def test_naive_persisted_timestamp_is_read_as_utc(clock):
    cache, persisted, source = _setup(clock)
    asyncio.run(cache.get("r1", source))
    payload, created_at = persisted.entries[cache_key("r1")]
    persisted.entries[cache_key("r1")] = (payload, created_at.replace(tzinfo=None))

    fresh = RestaurantCache(persisted, clock=clock)
    restaurant, tier = asyncio.run(fresh.get("r1", source))

    assert tier == "persisted-cache"
    assert restaurant.id == "r1"


def test_unusable_persisted_timestamp_falls_through_to_source(clock):
    cache, persisted, source = _setup(clock)
    asyncio.run(cache.get("r1", source))
    payload, _ = persisted.entries[cache_key("r1")]
    persisted.entries[cache_key("r1")] = (payload, "2025-01-01")

    fresh = RestaurantCache(persisted, clock=clock)
    _, tier = asyncio.run(fresh.get("r1", source))

    assert tier == "source"
    assert cache_key("r1") in persisted.deleted
