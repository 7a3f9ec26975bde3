"""Store owner dashboard router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from store_ratings.core.dependencies import AuthenticatedUser, require_roles
from store_ratings.core.exceptions import ForbiddenError
from store_ratings.database import get_db
from store_ratings.models.user import ROLE_STORE_OWNER
from store_ratings.schemas.rating import (
    OwnerDashboardResponse,
    OwnerRatingEntry,
    OwnerStoreAverage,
    average_value,
)
from store_ratings.services import repository
from store_ratings.services.repository import round_average

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/owner", tags=["owner"])


@router.get("/{owner_id}/ratings", response_model=OwnerDashboardResponse)
async def get_owner_ratings(
    owner_id: int,
    current_user: Annotated[AuthenticatedUser, Depends(require_roles(ROLE_STORE_OWNER))],
    db: Annotated[Session, Depends(get_db)],
) -> OwnerDashboardResponse:
    """Ratings and per-store averages for every store the owner has.

    Raises:
        ForbiddenError: If the caller is not this owner and not an admin
    """
    if current_user.id != owner_id and not current_user.is_admin:
        logger.warning(f"User {current_user.id} denied access to owner {owner_id} dashboard")
        raise ForbiddenError()

    ratings, averages = repository.owner_dashboard(db, owner_id)

    return OwnerDashboardResponse(
        ratings=[
            OwnerRatingEntry(
                name=row.name,
                email=row.email,
                rating=row.rating,
                created_at=row.created_at.isoformat(),
                store_name=row.store_name,
            )
            for row in ratings
        ],
        averages=[
            OwnerStoreAverage(
                store_id=row.store_id,
                store_name=row.store_name,
                avg_rating=average_value(round_average(row.avg_rating)),
                total_ratings=row.total_ratings,
            )
            for row in averages
        ],
    )
