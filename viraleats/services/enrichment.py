"""
TripAdvisor enrichment — lazily copies cached TripAdvisor facts onto a
restaurant row the first time its detail page asks for them.

The scraping itself happens offline; at runtime we only read the JSON cache
file it produces, keyed by restaurant-name slug:

    {"nasi-lemak-wanjo": {"ranking": "#3 of 500 ...", "priceRange": "RM 15 - RM 25",
                          "tags": ["Halal"], "reviewSnippet": "...",
                          "lastUpdated": "2025-01-01T00:00:00Z"}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from viraleats.schemas.restaurant import RestaurantOut
from viraleats.services.projection import to_public
from viraleats.services.stores import RestaurantNotFound, RestaurantStore
from viraleats.utils.clock import Clock, system_clock, utc_now
from viraleats.utils.ids import to_slug

logger = logging.getLogger(__name__)


class TripAdvisorData(BaseModel):
    """One cache-file entry, renamed to our field vocabulary."""

    rank: Optional[str] = Field(default=None, alias="ranking")
    price_text: Optional[str] = Field(default=None, alias="priceRange")
    tags: list[str] = Field(default_factory=list)
    top_review_snippet: Optional[str] = Field(default=None, alias="reviewSnippet")


class TripAdvisorLookup:
    """In-memory view of the TripAdvisor cache file. Missing file → empty lookup."""

    def __init__(self, entries: Optional[dict[str, dict[str, Any]]] = None) -> None:
        self._entries = entries or {}

    @classmethod
    def from_file(cls, path: str | Path) -> "TripAdvisorLookup":
        path = Path(path)
        if not path.exists():
            logger.info("TripAdvisor cache %s not found — enrichment disabled", path)
            return cls()
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read TripAdvisor cache %s: %s", path, exc)
            return cls()
        if not isinstance(raw, dict):
            logger.warning("TripAdvisor cache %s is not a JSON object", path)
            return cls()
        logger.info("Loaded %d TripAdvisor cache entries", len(raw))
        return cls(raw)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, restaurant_name: str) -> Optional[TripAdvisorData]:
        entry = self._entries.get(to_slug(restaurant_name))
        if not isinstance(entry, dict):
            return None
        return TripAdvisorData.model_validate(entry)


def enrichment_fields(data: TripAdvisorData, clock: Clock = system_clock) -> dict[str, Any]:
    """Columns to write; empty values from the cache never overwrite stored ones."""
    fields: dict[str, Any] = {
        "tripadvisor_enriched": True,
        "tripadvisor_enriched_at": utc_now(clock),
    }
    if data.rank:
        fields["tripadvisor_rank"] = data.rank
    if data.price_text:
        fields["tripadvisor_price_text"] = data.price_text
    if data.tags:
        fields["tripadvisor_tags"] = data.tags
    if data.top_review_snippet:
        fields["tripadvisor_top_review_snippet"] = data.top_review_snippet
    return fields


async def enrich_restaurant(
    restaurant_id: str,
    store: RestaurantStore,
    lookup: TripAdvisorLookup,
    clock: Clock = system_clock,
) -> RestaurantOut:
    """
    Attach TripAdvisor data to one restaurant.
    Raises RestaurantNotFound; a failed update is logged and the enriched
    payload is still returned.
    """
    row = await store.fetch_by_id(restaurant_id)
    if row is None:
        raise RestaurantNotFound(restaurant_id)

    data = lookup.get(row.get("name") or "")
    if data is None:
        return to_public(row)

    fields = enrichment_fields(data, clock)
    try:
        await store.update_fields(restaurant_id, fields)
        await store.commit()
    except Exception as exc:
        logger.error("Failed to store TripAdvisor data for %s: %s", restaurant_id, exc)

    return to_public({**row, **fields})
