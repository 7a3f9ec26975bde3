"""User model."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from store_ratings.database import Base

ROLE_NORMAL = "normal"
ROLE_STORE_OWNER = "store_owner"
ROLE_ADMIN = "admin"

ROLES = (ROLE_NORMAL, ROLE_STORE_OWNER, ROLE_ADMIN)


class User(Base):
    """User model for authentication and authorization."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(60), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default=ROLE_NORMAL, nullable=False, index=True)
    address = Column(String(400), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
