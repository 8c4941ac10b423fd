"""Pydantic schemas package."""

from viraleats.schemas.common import ApiResponse
from viraleats.schemas.restaurant import (
    CATEGORIES,
    PRICE_TIERS,
    RestaurantFilters,
    RestaurantOut,
)
from viraleats.schemas.trending import (
    SeedStats,
    TrendingDishOut,
    TrendingUpdateStats,
)

__all__ = [
    "ApiResponse",
    "CATEGORIES", "PRICE_TIERS", "RestaurantFilters", "RestaurantOut",
    "SeedStats", "TrendingDishOut", "TrendingUpdateStats",
]
