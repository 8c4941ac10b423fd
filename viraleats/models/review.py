"""Review ORM model — third-party reviews shown on the restaurant detail page."""

from sqlalchemy import Column, Text, String, Double, TIMESTAMP, ForeignKey, Index, func

from viraleats.database import Base
from viraleats.utils.ids import new_id


class Review(Base):
    """Imported offline from Google and TripAdvisor; read-only at runtime."""

    __tablename__ = "reviews"
    __table_args__ = (
        Index("ix_reviews_restaurant_rating", "restaurant_id", "rating", "created_date"),
    )

    id = Column(Text, primary_key=True, default=new_id)
    restaurant_id = Column(
        Text,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
    )

    source = Column(String(16), nullable=False)  # 'google' | 'tripadvisor'
    author = Column(Text, nullable=False, server_default="")
    rating = Column(Double, nullable=False)
    text = Column(Text, nullable=False, server_default="")
    created_date = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
