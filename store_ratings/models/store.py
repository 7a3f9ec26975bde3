"""Store model."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from store_ratings.database import Base


class Store(Base):
    """A rateable store, created by an administrator and owned by one user."""

    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    address = Column(String(400), nullable=False)
    email = Column(String(255), nullable=True)
    owner_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    owner = relationship("User", backref="stores")

    def __repr__(self) -> str:
        """String representation of Store."""
        return f"<Store(id={self.id}, name={self.name}, owner_id={self.owner_id})>"
