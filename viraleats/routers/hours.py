"""Cached opening hours for the map, keyed by restaurant id."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from viraleats.dependencies import get_hours_cache, get_restaurant_store
from viraleats.services.place_hours import HoursCache, hours_by_restaurant
from viraleats.services.stores import RestaurantStore

router = APIRouter(tags=["hours"])


@router.get("/hours")
async def get_hours(
    store: RestaurantStore = Depends(get_restaurant_store),
    hours: HoursCache = Depends(get_hours_cache),
) -> dict[str, Any]:
    """Plain {restaurantId: hours} object; {} when nothing is cached or lookup fails."""
    return await hours_by_restaurant(store, hours)
