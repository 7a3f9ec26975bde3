"""Ratings router."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from store_ratings.core.dependencies import CurrentUser
from store_ratings.database import get_db
from store_ratings.schemas.rating import (
    RatingResponse,
    RatingStatsResponse,
    RatingSubmit,
    StoreRatingEntry,
    StoreRatingsResponse,
    average_value,
    rating_response,
)
from store_ratings.services import ratings as ratings_service
from store_ratings.services import repository

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("", response_model=RatingResponse, status_code=status.HTTP_200_OK)
async def submit_rating(
    rating_data: RatingSubmit,
    current_user: CurrentUser,
    db: Annotated[Session, Depends(get_db)],
) -> RatingResponse:
    """Add or replace the caller's rating of a store.

    Args:
        rating_data: Store id and star value
        current_user: Current authenticated user; any role may rate
        db: Database session

    Returns:
        RatingResponse: The stored rating row
    """
    rating = ratings_service.submit_rating(
        db,
        user_id=current_user.id,
        store_id=rating_data.store_id,
        value=rating_data.rating,
    )
    return rating_response(rating)


@router.get("/{store_id}", response_model=StoreRatingsResponse)
async def get_store_ratings(
    store_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> StoreRatingsResponse:
    """All ratings of a store with rater names and summary stats. Public."""
    rows = repository.store_ratings(db, store_id)
    stats = repository.average_rating(db, store_id)

    return StoreRatingsResponse(
        ratings=[
            StoreRatingEntry(**rating_response(rating).model_dump(), user_name=user_name)
            for rating, user_name in rows
        ],
        stats=RatingStatsResponse(
            avg_rating=average_value(stats.average),
            total_ratings=stats.count,
        ),
    )
