"""Reviews router — top reviews for one restaurant."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from viraleats.dependencies import get_review_store
from viraleats.schemas.common import ApiResponse
from viraleats.schemas.review import ReviewOut
from viraleats.services.reviews import list_reviews
from viraleats.services.stores import ReviewStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews"])


@router.get(
    "/reviews",
    response_model=ApiResponse[list[ReviewOut]],
    response_model_exclude_none=True,
)
async def get_reviews(
    restaurant_id: Optional[str] = Query(default=None, alias="restaurantId"),
    reviews: ReviewStore = Depends(get_review_store),
) -> ApiResponse[list[ReviewOut]]:
    """Up to 10 reviews, best rated first, newest first within a rating."""
    if not restaurant_id or not restaurant_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="restaurantId query parameter is required",
        )
    result, source = await list_reviews(reviews, restaurant_id.strip())
    return ApiResponse(data=result, source=source, count=len(result))
