"""Admin dashboard router."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from store_ratings.core.dependencies import AdminUser
from store_ratings.database import get_db
from store_ratings.schemas.admin import DashboardStatsResponse
from store_ratings.services import repository

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/dashboard", response_model=DashboardStatsResponse)
async def get_dashboard(
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> DashboardStatsResponse:
    """Total users, stores and ratings. Admin only."""
    counts = repository.dashboard_counts(db)
    return DashboardStatsResponse(
        total_users=counts.total_users,
        total_stores=counts.total_stores,
        total_ratings=counts.total_ratings,
    )
