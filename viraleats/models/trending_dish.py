"""TrendingDish ORM model — one synthetic dish per top-ranked restaurant."""

from sqlalchemy import Column, Integer, Text, Double, TIMESTAMP, ForeignKey, func
from sqlalchemy.orm import relationship

from viraleats.database import Base
from viraleats.utils.ids import new_id


class TrendingDish(Base):
    """
    Created by the viral-score job for restaurants in the top ranks that do not
    have one yet. Never refreshed afterwards; restaurant_id is unique so at most
    one dish exists per restaurant.
    """

    __tablename__ = "trending_dishes"

    id = Column(Text, primary_key=True, default=new_id)
    restaurant_id = Column(
        Text,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    dish_name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, server_default="")
    price = Column(Double, nullable=False, server_default="0")
    mention_count = Column(Integer, nullable=False, server_default="0")
    recommend_percentage = Column(Integer, nullable=False, server_default="80")
    viral_score = Column(Double, nullable=False, server_default="0")
    photo_url = Column(Text, nullable=False, server_default="")

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    restaurant = relationship("Restaurant", back_populates="trending_dish")
