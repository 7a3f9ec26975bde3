"""Rating schemas."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict


class RatingSubmit(BaseModel):
    """Rating submission request schema."""

    store_id: int | None = None
    # Passed through unchanged so booleans, floats and numeric strings reach the range check
    rating: Any = None


class RatingResponse(BaseModel):
    """Rating row as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    store_id: int
    rating: int
    created_at: str
    updated_at: str


class RatingStatsResponse(BaseModel):
    avg_rating: float | None
    total_ratings: int


class StoreRatingEntry(RatingResponse):
    """Rating row with the rater's name."""

    user_name: str


class StoreRatingsResponse(BaseModel):
    ratings: list[StoreRatingEntry]
    stats: RatingStatsResponse


class OwnerRatingEntry(BaseModel):
    """One rating on an owner's store, with who left it."""

    name: str
    email: str
    rating: int
    created_at: str
    store_name: str


class OwnerStoreAverage(BaseModel):
    store_id: int
    store_name: str
    avg_rating: float | None
    total_ratings: int


class OwnerDashboardResponse(BaseModel):
    ratings: list[OwnerRatingEntry]
    averages: list[OwnerStoreAverage]


def rating_response(rating) -> RatingResponse:
    """Build the response view of a ``Rating`` row."""
    return RatingResponse(
        id=rating.id,
        user_id=rating.user_id,
        store_id=rating.store_id,
        rating=rating.rating,
        created_at=rating.created_at.isoformat(),
        updated_at=rating.updated_at.isoformat(),
    )


def average_value(average: Decimal | None) -> float | None:
    """JSON-friendly form of a rounded average."""
    return float(average) if average is not None else None
