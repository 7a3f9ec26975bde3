"""Input validation rules shared by signup, admin user creation and password changes."""

import re

from store_ratings.core.exceptions import ValidationError
from store_ratings.models.user import ROLE_ADMIN, ROLE_NORMAL, ROLE_STORE_OWNER

NAME_MIN_LENGTH = 20
NAME_MAX_LENGTH = 60
ADDRESS_MAX_LENGTH = 400

SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

PASSWORD_PATTERN = re.compile(
    r"^(?=.{8,16}\Z)(?=.*[A-Z])(?=.*[" + re.escape(SPECIAL_CHARACTERS) + r"]).*\Z"
)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+\Z")

PASSWORD_RULE_MESSAGE = (
    "Password must be 8-16 characters, include at least one uppercase letter and one special character."
)

_STORE_OWNER_ALIASES = {"store_owner", "owner", "storeowner"}


def normalize_role(role: str | None) -> str:
    """Fold a requested role into one of the three known roles.

    Unknown or missing values become ``normal``.
    """
    if not role:
        return ROLE_NORMAL
    value = str(role).lower()
    if value == ROLE_ADMIN:
        return ROLE_ADMIN
    if value in _STORE_OWNER_ALIASES:
        return ROLE_STORE_OWNER
    return ROLE_NORMAL


def is_valid_password(password: str) -> bool:
    return bool(PASSWORD_PATTERN.match(password))


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def validate_password(password: str | None) -> str:
    """Check a new password against the complexity rule.

    Raises:
        ValidationError: If the password is missing or too weak
    """
    if not password:
        raise ValidationError("Password is required")
    if not is_valid_password(password):
        raise ValidationError(PASSWORD_RULE_MESSAGE)
    return password


def validate_user_payload(
    name: str | None,
    email: str | None,
    password: str | None,
    address: str | None,
) -> None:
    """Validate a signup or admin-create payload, raising on the first failing rule.

    Args:
        name: Display name, 20-60 characters once trimmed
        email: Email address in ``local@domain.tld`` shape
        password: Plain text password
        address: Postal address, at most 400 characters

    Raises:
        ValidationError: With the message of the first rule that fails
    """
    if not name or not email or not password or not address:
        raise ValidationError("All fields are required.")

    trimmed = name.strip()
    if len(trimmed) < NAME_MIN_LENGTH or len(trimmed) > NAME_MAX_LENGTH:
        raise ValidationError(
            f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters."
        )

    if len(address) > ADDRESS_MAX_LENGTH:
        raise ValidationError(f"Address must be at most {ADDRESS_MAX_LENGTH} characters.")

    if not is_valid_password(password):
        raise ValidationError(PASSWORD_RULE_MESSAGE)

    if not is_valid_email(email):
        raise ValidationError("Invalid email address.")
