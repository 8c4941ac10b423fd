"""Pydantic schemas for public restaurant payloads and list filters."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CATEGORIES = ("hawker", "restaurant", "cafe", "foodcourt")
PRICE_TIERS = ("$", "$$", "$$$", "$$$$")

Category = Literal["hawker", "restaurant", "cafe", "foodcourt"]
PriceTier = Literal["$", "$$", "$$$", "$$$$"]


class RestaurantOut(BaseModel):
    """
    Public restaurant shape served to the map frontend (camelCase on the wire).
    aggregate_rating is always populated; distance only when the request
    carried a location.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    address: str = ""
    lat: float
    lng: float
    category: Category
    cuisine: Optional[str] = None

    google_rating: Optional[float] = None
    tripadvisor_rating: Optional[float] = None
    aggregate_rating: float = 0.0

    must_try_dish: str
    must_try_confidence: Optional[int] = None
    price_range: PriceTier = "$$"
    operating_hours: dict[str, str] = Field(default_factory=dict)

    viral_mentions: int = 0
    trending_score: float = 0.0
    is_trending: bool = False

    photos: list[str] = Field(default_factory=list)
    is_halal: bool = False
    halal_cert_number: Optional[str] = None

    tripadvisor_rank: Optional[str] = None
    tripadvisor_price_text: Optional[str] = None
    tripadvisor_tags: Optional[list[str]] = None
    tripadvisor_top_review_snippet: Optional[str] = None
    tripadvisor_enriched: bool = False
    tripadvisor_enriched_at: Optional[datetime] = None

    distance: Optional[float] = None


class RestaurantFilters(BaseModel):
    """Filters accepted by the restaurant list pipeline."""

    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)
    radius: Optional[float] = Field(default=None, gt=0)
    halal: bool = False
    category: Optional[Category] = None
    price_range: Optional[PriceTier] = None
    open_now: bool = False
    search_query: Optional[str] = None
    trending: bool = False
    limit: int = Field(default=100, ge=1)

    @property
    def has_location(self) -> bool:
        return self.lat is not None and self.lng is not None
