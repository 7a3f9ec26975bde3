"""Pydantic schemas package."""

from store_ratings.schemas.auth import LoginResponse, SignupResponse, UserLogin, UserResponse, UserSignup
from store_ratings.schemas.rating import RatingResponse, RatingStatsResponse, RatingSubmit
from store_ratings.schemas.store import StoreCreate, StoreFilters, StoreResponse
from store_ratings.schemas.user import UserFilters

__all__ = [
    "UserSignup",
    "UserLogin",
    "UserResponse",
    "SignupResponse",
    "LoginResponse",
    "UserFilters",
    "StoreCreate",
    "StoreFilters",
    "StoreResponse",
    "RatingSubmit",
    "RatingResponse",
    "RatingStatsResponse",
]
