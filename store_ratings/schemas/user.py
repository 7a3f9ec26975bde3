"""User management schemas."""

from pydantic import BaseModel, field_validator


class PasswordChange(BaseModel):
    """Password change request schema."""

    password: str | None = None


class MessageResponse(BaseModel):
    message: str


class UserFilters(BaseModel):
    """Optional filters for the user listing, combined with AND."""

    name: str | None = None
    email: str | None = None
    address: str | None = None
    role: str | None = None

    @field_validator("name", "email", "address", "role", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty query values as absent."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v
