"""Restaurant ORM model — the central entity of the discovery map."""

from sqlalchemy import (
    Column, Integer, Text, String, Boolean,
    ARRAY, TIMESTAMP, Double, func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from viraleats.database import Base
from viraleats.utils.ids import new_id


class Restaurant(Base):
    """
    A restaurant discovered through Google Places seeding (or the bulk importer),
    optionally enriched with TripAdvisor data on first detail view.

    trending_score / is_trending are owned by the viral-score batch job and are
    never written by individual reads.
    """

    __tablename__ = "restaurants"

    id = Column(Text, primary_key=True, default=new_id)
    google_place_id = Column(Text, nullable=True, unique=True)

    name = Column(Text, nullable=False)
    address = Column(Text, nullable=False, server_default="")
    lat = Column(Double, nullable=False)
    lng = Column(Double, nullable=False)

    category = Column(String(16), nullable=False, server_default="hawker")
    # 'hawker' | 'restaurant' | 'cafe' | 'foodcourt'
    cuisine = Column(Text, nullable=True)

    google_rating = Column(Double, nullable=True)
    tripadvisor_rating = Column(Double, nullable=True)
    aggregate_rating = Column(Double, nullable=True)

    must_try_dish = Column(Text, nullable=True)
    must_try_confidence = Column(Integer, nullable=True)
    price_range = Column(String(4), nullable=False, server_default="$$")
    # '$' | '$$' | '$$$' | '$$$$'

    operating_hours = Column(JSONB, nullable=False, server_default="{}")
    viral_mentions = Column(Integer, nullable=False, server_default="0")
    trending_score = Column(Double, nullable=False, server_default="0")
    is_trending = Column(Boolean, nullable=False, server_default="false")

    photos = Column(ARRAY(Text), nullable=False, server_default="{}")

    is_halal = Column(Boolean, nullable=False, server_default="false")
    halal_certified = Column(Boolean, nullable=False, server_default="false")
    halal_cert_number = Column(Text, nullable=True)
    business_status = Column(String(32), nullable=True)

    # TripAdvisor enrichment, populated lazily
    tripadvisor_rank = Column(Text, nullable=True)
    tripadvisor_price_text = Column(Text, nullable=True)
    tripadvisor_tags = Column(ARRAY(Text), nullable=True)
    tripadvisor_top_review_snippet = Column(Text, nullable=True)
    tripadvisor_enriched = Column(Boolean, nullable=False, server_default="false")
    tripadvisor_enriched_at = Column(TIMESTAMP(timezone=True), nullable=True)

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    trending_dish = relationship(
        "TrendingDish", back_populates="restaurant", uselist=False,
        cascade="all, delete-orphan",
    )
