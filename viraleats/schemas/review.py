"""Pydantic schema for restaurant reviews."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ReviewOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    restaurant_id: str
    source: Literal["google", "tripadvisor"]
    author: str = ""
    rating: float
    text: str = ""
    created_date: datetime
