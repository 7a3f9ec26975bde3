"""User management router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from store_ratings.core.dependencies import AdminUser, CurrentUser
from store_ratings.database import get_db
from store_ratings.schemas.auth import UserResponse, UserSignup, user_response
from store_ratings.schemas.user import MessageResponse, PasswordChange, UserFilters
from store_ratings.services import auth as auth_service
from store_ratings.services import repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: CurrentUser,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Return the authenticated user's profile."""
    return user_response(auth_service.get_user(db, current_user.id))


@router.put("/{user_id}/password", response_model=MessageResponse)
async def change_password(
    user_id: int,
    password_data: PasswordChange,
    current_user: CurrentUser,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Change a user's password.

    Callers may change their own password; admins may change anyone's.

    Raises:
        ForbiddenError: If the caller is neither the user nor an admin (403)
        ValidationError: If the new password is weak or missing (400)
    """
    auth_service.change_password(
        db,
        target_user_id=user_id,
        new_password=password_data.password,
        requester_id=current_user.id,
        requester_role=current_user.role,
    )
    return MessageResponse(message="Password updated successfully")


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserSignup,
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Add a user of any role. Admin only."""
    user = auth_service.signup(
        db,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        address=user_data.address,
        role=user_data.role,
    )
    logger.info(f"Admin {current_user.id} added user {user.id}")
    return user_response(user)


@router.get("", response_model=list[UserResponse])
async def list_users(
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    role: str | None = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = "id",
    order: str = "asc",
) -> list[UserResponse]:
    """List and filter users. Admin only.

    Args:
        name: Case-insensitive substring of the name
        email: Case-insensitive substring of the email
        address: Case-insensitive substring of the address
        role: Exact role
        sort_by: Column to sort by; unknown columns sort by id
        order: ``asc`` or ``desc``
    """
    filters = UserFilters(name=name, email=email, address=address, role=role)
    users = repository.list_users(db, filters, sort_by=sort_by, order=order)
    return [user_response(user) for user in users]
