"""Rating submission as a single atomic upsert."""

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from store_ratings.core.exceptions import StorageError, ValidationError
from store_ratings.database import storage_errors
from store_ratings.models.rating import Rating

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

# Dialects whose INSERT supports ON CONFLICT ... DO UPDATE
_UPSERT_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _upsert_insert(db: Session) -> Callable[..., Any]:
    dialect = db.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect]
    except KeyError:
        logger.error(f"Rating upsert is not supported on {dialect}")
        raise StorageError() from None


def validate_rating_value(value: Any) -> int:
    """Check that a rating is an integer from 1 to 5.

    Raises:
        ValidationError: If the value is not an integer in range
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    if value < MIN_RATING or value > MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return value


def submit_rating(
    db: Session,
    user_id: int | None,
    store_id: int | None,
    value: Any,
) -> Rating:
    """Insert or overwrite the caller's rating of a store.

    The write is one ``INSERT ... ON CONFLICT (user_id, store_id) DO UPDATE``
    statement, so concurrent submissions for the same pair never produce two
    rows. On conflict only ``rating`` and ``updated_at`` change.

    Args:
        db: Database session
        user_id: Rating user
        store_id: Rated store
        value: Star value, 1 to 5

    Returns:
        Rating: The inserted or updated row

    Raises:
        ValidationError: If an id or the value is missing or invalid, or the store does not exist
        StorageError: If the database dialect has no ON CONFLICT upsert
    """
    if user_id is None or store_id is None or value is None:
        raise ValidationError("Store and rating required")
    validate_rating_value(value)

    now = datetime.now(timezone.utc)
    insert = _upsert_insert(db)
    stmt = insert(Rating).values(
        user_id=user_id,
        store_id=store_id,
        rating=value,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "store_id"],
        set_={"rating": stmt.excluded.rating, "updated_at": now},
    ).returning(Rating)

    with storage_errors(db, "upserting rating"):
        try:
            rating = db.scalars(stmt, execution_options={"populate_existing": True}).one()
            # Keep the RETURNING values; a post-commit reload could see a later writer
            db.expunge(rating)
            db.commit()
        except IntegrityError as e:
            # Only the store foreign key can fail: user ids come from a token and the range is checked above
            raise ValidationError("Store does not exist.") from e

    logger.info(f"User {user_id} rated store {store_id}: {value}")
    return rating
