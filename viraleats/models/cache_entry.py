"""CacheEntry ORM model — durable tier of the restaurant detail cache."""

from sqlalchemy import Column, Text, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import JSONB

from viraleats.database import Base


class CacheEntry(Base):
    """
    Whole shaped payload keyed by cache key (e.g. 'restaurant:<id>').
    Replaced wholesale on write; staleness is judged from created_at.
    """

    __tablename__ = "cache"

    cache_key = Column(Text, primary_key=True)
    cache_data = Column(JSONB, nullable=False)
    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
