"""SQLAlchemy ORM models package."""

from viraleats.database import Base
from viraleats.models.restaurant import Restaurant
from viraleats.models.trending_dish import TrendingDish
from viraleats.models.review import Review
from viraleats.models.cache_entry import CacheEntry

__all__ = ["Base", "Restaurant", "TrendingDish", "Review", "CacheEntry"]
