"""Authentication router."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from store_ratings.database import get_db
from store_ratings.schemas.auth import LoginResponse, SignupResponse, UserLogin, UserSignup, user_response
from store_ratings.services import auth as auth_service

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    db: Annotated[Session, Depends(get_db)],
) -> SignupResponse:
    """Create a new user account and log it in.

    Args:
        user_data: Signup data (name, email, password, address, optional role)
        db: Database session

    Returns:
        SignupResponse: Created user information with an access token

    Raises:
        ValidationError: If any field is invalid (400)
        DuplicateEmailError: If the email already exists (409)
    """
    user = auth_service.signup(
        db,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        address=user_data.address,
        role=user_data.role,
    )
    token = auth_service.issue_token(user)

    return SignupResponse(**user_response(user).model_dump(), token=token)


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
async def login(
    user_data: UserLogin,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """Authenticate user and return access token.

    Args:
        user_data: User login data (email, password)
        db: Database session

    Returns:
        LoginResponse: Access token and user information

    Raises:
        InvalidCredentialsError: If email or password is invalid (401)
    """
    token, user = auth_service.login(db, email=user_data.email, password=user_data.password)

    return LoginResponse(token=token, user=user_response(user))
