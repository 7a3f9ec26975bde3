"""Application error taxonomy.

Services raise these; the FastAPI app renders them as ``{"message": ...}``
with the class's ``status_code``.
"""


class AppError(Exception):
    """Base exception for errors reported to API callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Raised when input is missing or malformed."""

    status_code = 400


class InvalidCredentialsError(AppError):
    """Raised when login fails, whatever the reason."""

    status_code = 401

    def __init__(self, message: str = "Invalid credentials.") -> None:
        super().__init__(message)


class UnauthenticatedError(AppError):
    """Raised when a bearer token is missing, invalid or expired."""

    status_code = 401


class ForbiddenError(AppError):
    """Raised when an authenticated caller lacks the role or identity required."""

    status_code = 403

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404


class DuplicateEmailError(AppError):
    """Raised when the users table rejects an email that already exists."""

    status_code = 409

    def __init__(self, message: str = "Email already exists.") -> None:
        super().__init__(message)


class StorageError(AppError):
    """Raised when the database fails. The detail is logged, never returned."""

    status_code = 500

    def __init__(self, message: str = "Server error.") -> None:
        super().__init__(message)
