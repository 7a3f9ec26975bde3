"""Database models package."""

from store_ratings.models.rating import Rating
from store_ratings.models.store import Store
from store_ratings.models.user import User

__all__ = ["User", "Store", "Rating"]
