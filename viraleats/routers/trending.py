"""Trending dishes feed."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from viraleats.dependencies import get_dish_store
from viraleats.schemas.common import ApiResponse
from viraleats.schemas.trending import TrendingDishOut
from viraleats.services.stores import TrendingDishStore
from viraleats.services.trending import list_trending_dishes

logger = logging.getLogger(__name__)

router = APIRouter(tags=["trending"])

FEED_SIZE = 10


@router.get(
    "/trending-dishes",
    response_model=ApiResponse[list[TrendingDishOut]],
    response_model_exclude_none=True,
)
async def trending_dishes(
    dishes: TrendingDishStore = Depends(get_dish_store),
) -> ApiResponse[list[TrendingDishOut]]:
    feed, source = await list_trending_dishes(dishes, limit=FEED_SIZE)
    return ApiResponse(data=feed, source=source, count=len(feed))
