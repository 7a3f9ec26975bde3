"""Signup, login and password-change flows."""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from store_ratings.core.exceptions import (
    DuplicateEmailError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from store_ratings.core.security import create_access_token, hash_password, verify_password
from store_ratings.core.validation import normalize_role, validate_password, validate_user_payload
from store_ratings.database import storage_errors
from store_ratings.models.user import ROLE_ADMIN, User

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    """Create a bearer token carrying the user's id and role."""
    return create_access_token(data={"sub": str(user.id), "role": user.role})


def signup(
    db: Session,
    name: str | None,
    email: str | None,
    password: str | None,
    address: str | None,
    role: str | None = None,
) -> User:
    """Create a user account.

    Used both by public signup and by administrators adding users. The email
    is stored lower-case and the role is folded into one of the known roles.

    Args:
        db: Database session
        name: Display name
        email: Email address
        password: Plain text password
        address: Postal address
        role: Requested role, ``normal`` when missing or unrecognized

    Returns:
        User: The persisted user

    Raises:
        ValidationError: If any field fails validation
        DuplicateEmailError: If the email is already registered
    """
    validate_user_payload(name, email, password, address)

    user = User(
        name=name.strip(),
        email=email.lower(),
        password_hash=hash_password(password),
        role=normalize_role(role),
        address=address.strip(),
        created_at=datetime.now(timezone.utc),
    )

    with storage_errors(db, "creating user"):
        db.add(user)
        try:
            db.commit()
        except IntegrityError as e:
            # users.email is the only unique column a new row can collide on
            raise DuplicateEmailError() from e
        db.refresh(user)

    logger.info(f"Created user {user.id} with role {user.role}")
    return user


def login(db: Session, email: str | None, password: str | None) -> tuple[str, User]:
    """Authenticate a user by email and password.

    Returns:
        Tuple of (access token, authenticated User)

    Raises:
        ValidationError: If email or password is missing
        InvalidCredentialsError: If the email is unknown or the password is wrong
    """
    if not email or not password:
        raise ValidationError("Email and password required.")

    with storage_errors(db, "looking up user for login"):
        user = db.query(User).filter(User.email == email.lower()).first()

    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Rejected login attempt")
        raise InvalidCredentialsError()

    return issue_token(user), user


def get_user(db: Session, user_id: int) -> User:
    """Fetch a user by id.

    Raises:
        NotFoundError: If no such user exists
    """
    with storage_errors(db, "fetching user"):
        user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def change_password(
    db: Session,
    target_user_id: int,
    new_password: str | None,
    requester_id: int,
    requester_role: str,
) -> None:
    """Replace a user's password.

    Only the user themselves or an administrator may do this. The current
    password is not checked; holding a valid token for the account is enough.

    Raises:
        ForbiddenError: If the requester is neither the target nor an admin
        ValidationError: If the new password is missing or too weak
        NotFoundError: If the target user does not exist
    """
    if requester_id != target_user_id and requester_role != ROLE_ADMIN:
        logger.warning(f"User {requester_id} denied password change for user {target_user_id}")
        raise ForbiddenError()

    validate_password(new_password)

    with storage_errors(db, "changing password"):
        user = db.get(User, target_user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.password_hash = hash_password(new_password)
        db.commit()

    logger.info(f"Password changed for user {target_user_id} by user {requester_id}")
