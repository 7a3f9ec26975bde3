"""Stores router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from store_ratings.core.dependencies import AdminUser, CurrentUser
from store_ratings.core.exceptions import ForbiddenError
from store_ratings.database import get_db
from store_ratings.schemas.rating import RatingStatsResponse, average_value
from store_ratings.schemas.store import (
    StoreCreate,
    StoreFilters,
    StoreResponse,
    StoreWithRatingResponse,
    UserRatingSummary,
    store_response,
)
from store_ratings.services import repository

router = APIRouter(prefix="/stores", tags=["stores"])


@router.post("", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
async def create_store(
    store_data: StoreCreate,
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> StoreResponse:
    """Create a store. Admin only.

    Args:
        store_data: Store creation data (name, address, owner_id, optional email)
        current_user: Current authenticated admin
        db: Database session

    Returns:
        StoreResponse: Created store
    """
    store = repository.add_store(
        db,
        name=store_data.name,
        address=store_data.address,
        owner_id=store_data.owner_id,
        email=store_data.email,
    )
    return store_response(store)


@router.get("", response_model=list[StoreResponse])
async def list_stores(
    current_user: CurrentUser,
    db: Annotated[Session, Depends(get_db)],
    name: str | None = None,
    address: str | None = None,
    owner_id: int | None = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = "id",
    order: str = "asc",
) -> list[StoreResponse]:
    """List and filter stores."""
    filters = StoreFilters(name=name, address=address, owner_id=owner_id)
    stores = repository.list_stores(db, filters, sort_by=sort_by, order=order)
    return [store_response(store) for store in stores]


@router.get("/user/{user_id}", response_model=list[StoreWithRatingResponse])
async def list_stores_for_user(
    user_id: int,
    current_user: CurrentUser,
    db: Annotated[Session, Depends(get_db)],
    name: str | None = None,
    address: str | None = None,
    owner_id: int | None = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = "id",
    order: str = "asc",
) -> list[StoreWithRatingResponse]:
    """List stores with their averages and the given user's own ratings.

    Raises:
        ForbiddenError: If the caller asks for another user's ratings and is not an admin
    """
    if current_user.id != user_id and not current_user.is_admin:
        raise ForbiddenError()

    filters = StoreFilters(name=name, address=address, owner_id=owner_id)
    summaries = repository.stores_with_user_rating(db, user_id, filters, sort_by=sort_by, order=order)

    responses = []
    for summary in summaries:
        user_rating = None
        if summary.user_rating is not None:
            user_rating = UserRatingSummary(
                id=summary.user_rating.id,
                rating=summary.user_rating.rating,
                created_at=summary.user_rating.created_at.isoformat(),
                updated_at=summary.user_rating.updated_at.isoformat(),
            )
        responses.append(
            StoreWithRatingResponse(
                **store_response(summary.store).model_dump(),
                avg_rating=average_value(summary.average),
                total_ratings=summary.count,
                user_rating=user_rating,
            )
        )
    return responses


@router.get("/{store_id}/average-rating", response_model=RatingStatsResponse)
async def get_average_rating(
    store_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> RatingStatsResponse:
    """Live average and count of a store's ratings. Public."""
    stats = repository.average_rating(db, store_id)
    return RatingStatsResponse(
        avg_rating=average_value(stats.average),
        total_ratings=stats.count,
    )
