"""
FastAPI dependency providers.
Routers only ever see the store Protocols; tests swap these providers out
through app.dependency_overrides.
"""

from __future__ import annotations

import logging
import secrets
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from viraleats.config import settings
from viraleats.database import get_db
from viraleats.services.enrichment import TripAdvisorLookup
from viraleats.services.google_places import GooglePlacesClient, PlacesProvider
from viraleats.services.halal_classifier import HalalClassifier
from viraleats.services.place_hours import HoursCache
from viraleats.services.restaurant_cache import RestaurantCache
from viraleats.services.stores import (
    RestaurantStore,
    ReviewStore,
    SqlRestaurantStore,
    SqlReviewStore,
    SqlTrendingDishStore,
    TrendingDishStore,
)
from viraleats.utils.clock import Clock, system_clock

logger = logging.getLogger(__name__)


# ── Stores ───────────────────────────────────────────────────────────────────


async def get_restaurant_store(db: AsyncSession = Depends(get_db)) -> RestaurantStore:
    return SqlRestaurantStore(db)


async def get_dish_store(db: AsyncSession = Depends(get_db)) -> TrendingDishStore:
    return SqlTrendingDishStore(db)


async def get_review_store(db: AsyncSession = Depends(get_db)) -> ReviewStore:
    return SqlReviewStore(db)


def get_restaurant_cache(request: Request) -> RestaurantCache:
    """The process-wide cache built in the app lifespan."""
    return request.app.state.restaurant_cache


# ── Collaborators ────────────────────────────────────────────────────────────


def get_clock() -> Clock:
    return system_clock


@lru_cache(maxsize=1)
def get_classifier() -> HalalClassifier:
    return HalalClassifier()


@lru_cache(maxsize=1)
def get_tripadvisor_lookup() -> TripAdvisorLookup:
    """Cache file is read once per process."""
    return TripAdvisorLookup.from_file(settings.tripadvisor_cache_path)


def get_hours_cache() -> HoursCache:
    """Re-read on every request so offline refreshes show up without a restart."""
    return HoursCache.from_file(settings.hours_cache_path)


def get_places_provider() -> PlacesProvider:
    if not settings.google_places_api_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Google Places API key not configured",
        )
    return GooglePlacesClient(settings.google_places_api_key)


# ── Cron auth ────────────────────────────────────────────────────────────────


async def verify_cron_secret(
    authorization: Optional[str] = Header(None),
    secret: Optional[str] = Query(None),
) -> None:
    """
    Shared-secret check for /cron/* — `?secret=` or `Authorization: Bearer <secret>`.
    An unset CRON_SECRET rejects everything with 500.
    """
    if not settings.cron_secret:
        logger.error("Cron request rejected: CRON_SECRET is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="CRON_SECRET not configured",
        )

    provided = secret
    if not provided and authorization and authorization.startswith("Bearer "):
        provided = authorization[len("Bearer "):]

    if not provided or not secrets.compare_digest(
        provided.encode(), settings.cron_secret.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
