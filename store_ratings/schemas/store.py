"""Store schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class StoreCreate(BaseModel):
    """Store creation request schema."""

    name: str | None = None
    address: str | None = None
    owner_id: int | None = None
    email: EmailStr | None = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_to_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class StoreResponse(BaseModel):
    """Store response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    email: str | None
    owner_id: int
    created_at: str


class UserRatingSummary(BaseModel):
    id: int
    rating: int
    created_at: str
    updated_at: str


class StoreWithRatingResponse(StoreResponse):
    """Store with its live rating stats and the requesting user's own rating."""

    avg_rating: float | None
    total_ratings: int
    user_rating: UserRatingSummary | None


class StoreFilters(BaseModel):
    """Optional filters for the store listing, combined with AND."""

    name: str | None = None
    address: str | None = None
    owner_id: int | None = None

    @field_validator("name", "address", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty query values as absent."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


def store_response(store) -> StoreResponse:
    """Build the response view of a ``Store`` row."""
    return StoreResponse(
        id=store.id,
        name=store.name,
        address=store.address,
        email=store.email,
        owner_id=store.owner_id,
        created_at=store.created_at.isoformat(),
    )
