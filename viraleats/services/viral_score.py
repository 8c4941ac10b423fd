"""
Viral score — pure numeric ranking signal recomputed by the trending job.

Breakdown (nominally 0–100):
  Rating          rating × 10                      (max 50)
  Review volume   min(log10(count + 1) × 10, 30)   (max 30)
  Halal bonus     10                               (Malaysia market)
  Daily rotation  (ord(id[0]) + day_of_month) % 10 (0–9)

The rotation reshuffles the ranking a little every day while staying
reproducible for a given (id, day).
"""

from __future__ import annotations

import math
from typing import Optional

MAX_RATING_POINTS = 50
MAX_VOLUME_POINTS = 30
HALAL_BONUS = 10
ROTATION_MODULUS = 10


def rotation_bonus(restaurant_id: str, day_of_month: int) -> int:
    """Deterministic 0–9 daily bump derived from the id's first character."""
    first = ord(restaurant_id[0]) if restaurant_id else 0
    return (first + day_of_month) % ROTATION_MODULUS


def calculate_viral_score(
    rating: Optional[float],
    review_count: Optional[int],
    is_halal: bool,
    restaurant_id: str,
    day_of_month: int,
) -> float:
    """Score one restaurant; missing rating or count count as 0. Rounded to 2 dp."""
    score = (rating or 0.0) * 10
    score += min(math.log10(max(review_count or 0, 0) + 1) * 10, MAX_VOLUME_POINTS)
    if is_halal:
        score += HALAL_BONUS
    score += rotation_bonus(restaurant_id, day_of_month)
    return round(score, 2)


def seed_trending_score(rating: Optional[float], review_count: Optional[int]) -> int:
    """Initial score written by the seeding job, before the first batch run."""
    score = ((review_count or 0) / 100) * (rating or 0.0) * 10
    return min(round(score), 100)
