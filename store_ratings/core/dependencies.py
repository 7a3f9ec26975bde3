"""Request authentication and role gating for the API routes."""

import logging
from typing import Annotated, Callable, Iterable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from store_ratings.core.exceptions import ForbiddenError, UnauthenticatedError
from store_ratings.core.security import decode_access_token
from store_ratings.models.user import ROLE_ADMIN, ROLES

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes our own 401 instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    """Identity carried by a verified bearer token."""

    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def is_authorized(requester_role: str, required_roles: Iterable[str]) -> bool:
    """Decide whether a role may call a route gated on ``required_roles``.

    Admins are authorized for every gated route; everyone else must hold one
    of the listed roles.
    """
    return requester_role == ROLE_ADMIN or requester_role in set(required_roles)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AuthenticatedUser:
    """Resolve the caller from the ``Authorization: Bearer`` header.

    Raises:
        UnauthenticatedError: If the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("No token provided")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthenticatedError("Invalid token")

    subject = payload.get("sub")
    role = payload.get("role")
    if subject is None or role not in ROLES:
        raise UnauthenticatedError("Invalid token")

    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise UnauthenticatedError("Invalid token")

    return AuthenticatedUser(id=user_id, role=role)


def require_roles(*roles: str) -> Callable:
    """Build a dependency that admits admins and callers holding one of ``roles``.

    Example:
        ```python
        @router.get("/users")
        async def list_users(current_user: Annotated[AuthenticatedUser, Depends(require_roles("admin"))]):
            ...
        ```
    """

    async def _require_roles(
        current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    ) -> AuthenticatedUser:
        if not is_authorized(current_user.role, roles):
            logger.warning(f"User {current_user.id} with role {current_user.role} denied; requires {roles}")
            raise ForbiddenError()
        return current_user

    return _require_roles


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
AdminUser = Annotated[AuthenticatedUser, Depends(require_roles(ROLE_ADMIN))]
