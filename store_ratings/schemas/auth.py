"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict


class UserSignup(BaseModel):
    """Signup (and admin user creation) request schema.

    Fields are optional here so the service can report the first failing rule
    with its own message.
    """

    name: str | None = None
    email: str | None = None
    password: str | None = None
    address: str | None = None
    role: str | None = None


class UserResponse(BaseModel):
    """Public user view. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    address: str
    role: str
    created_at: str


class SignupResponse(UserResponse):
    """Created user plus a token so the new user is logged in straight away."""

    token: str
    token_type: str = "bearer"


class UserLogin(BaseModel):
    """User login request schema."""

    email: str | None = None
    password: str | None = None


class LoginResponse(BaseModel):
    """Login response schema with token and user info."""

    token: str
    token_type: str = "bearer"
    user: UserResponse


def user_response(user) -> UserResponse:
    """Build the public view of a ``User`` row."""
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        address=user.address,
        role=user.role,
        created_at=user.created_at.isoformat(),
    )
