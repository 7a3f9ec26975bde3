"""Admin dashboard schemas."""

from pydantic import BaseModel, ConfigDict, Field


class DashboardStatsResponse(BaseModel):
    """Totals for the admin dashboard, serialized in camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    total_users: int = Field(serialization_alias="totalUsers")
    total_stores: int = Field(serialization_alias="totalStores")
    total_ratings: int = Field(serialization_alias="totalRatings")
