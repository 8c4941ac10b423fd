"""Pydantic schemas for trending dishes and the cron batch jobs."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TrendingDishOut(BaseModel):
    """A trending dish card, joined with its restaurant's name and halal flag."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    restaurant_id: str
    restaurant_name: Optional[str] = None
    restaurant_is_halal: Optional[bool] = None
    dish_name: str
    description: str = ""
    price: float = 0.0
    mention_count: int = 0
    recommend_percentage: int = 80
    viral_score: float = 0.0
    photo_url: str = ""


class TrendingUpdateStats(BaseModel):
    """Aggregate counters reported by the viral-score job."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    processed: int = 0
    updated: int = 0
    failed: int = 0
    trending: int = 0
    dishes_created: int = 0
    dish_errors: int = 0


class SeedStats(BaseModel):
    """Aggregate counters reported by the seeding job."""

    added: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
