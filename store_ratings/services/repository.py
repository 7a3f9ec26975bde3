"""Filtered listings and aggregate queries over users, stores and ratings."""

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, NamedTuple

from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, aliased

from store_ratings.core.exceptions import ValidationError
from store_ratings.database import storage_errors
from store_ratings.models.rating import Rating
from store_ratings.models.store import Store
from store_ratings.models.user import User
from store_ratings.schemas.store import StoreFilters
from store_ratings.schemas.user import UserFilters

logger = logging.getLogger(__name__)

# Sortable columns per entity. Anything not listed sorts by id.
USER_SORT_COLUMNS = {
    "id": User.id,
    "name": User.name,
    "email": User.email,
    "address": User.address,
    "role": User.role,
    "user_role": User.role,
    "created_at": User.created_at,
    "createdAt": User.created_at,
}

STORE_SORT_COLUMNS = {
    "id": Store.id,
    "name": Store.name,
    "address": Store.address,
    "owner_id": Store.owner_id,
    "ownerId": Store.owner_id,
    "created_at": Store.created_at,
    "createdAt": Store.created_at,
}

_TWO_PLACES = Decimal("0.01")


class RatingStats(NamedTuple):
    average: Decimal | None
    count: int


class StoreRatingSummary(NamedTuple):
    store: Store
    average: Decimal | None
    count: int
    user_rating: Rating | None


class DashboardCounts(NamedTuple):
    total_users: int
    total_stores: int
    total_ratings: int


def round_average(value: Any) -> Decimal | None:
    """Round an aggregate average to two decimal places.

    PostgreSQL returns ``Decimal`` and SQLite returns ``float``; both come back
    as ``Decimal``. ``None`` (no rows) stays ``None``.
    """
    if value is None:
        return None
    return Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def _ordering(columns: dict[str, Any], sort_by: str | None, order: str | None) -> list[Any]:
    column = columns.get(sort_by or "id", columns["id"])
    descending = str(order or "asc").lower() == "desc"
    ordering = [column.desc() if descending else column.asc()]
    if column is not columns["id"]:
        # id breaks ties so equal keys come back in a stable order
        ordering.append(columns["id"].asc())
    return ordering


def _substring(value: str) -> str:
    return f"%{value}%"


def _filter_users(query: Query, filters: UserFilters) -> Query:
    if filters.name:
        query = query.filter(User.name.ilike(_substring(filters.name)))
    if filters.email:
        query = query.filter(User.email.ilike(_substring(filters.email)))
    if filters.address:
        query = query.filter(User.address.ilike(_substring(filters.address)))
    if filters.role:
        query = query.filter(User.role == filters.role)
    return query


def _filter_stores(query: Query, filters: StoreFilters) -> Query:
    if filters.name:
        query = query.filter(Store.name.ilike(_substring(filters.name)))
    if filters.address:
        query = query.filter(Store.address.ilike(_substring(filters.address)))
    if filters.owner_id is not None:
        query = query.filter(Store.owner_id == filters.owner_id)
    return query


def list_users(
    db: Session,
    filters: UserFilters | None = None,
    sort_by: str | None = "id",
    order: str | None = "asc",
) -> list[User]:
    """List users matching every given filter.

    String filters match case-insensitive substrings; ``role`` matches
    exactly. ``sort_by`` outside the allow-list falls back to ``id`` and
    ``order`` other than ``desc`` means ascending.
    """
    query = _filter_users(db.query(User), filters or UserFilters())
    with storage_errors(db, "listing users"):
        return query.order_by(*_ordering(USER_SORT_COLUMNS, sort_by, order)).all()


def list_stores(
    db: Session,
    filters: StoreFilters | None = None,
    sort_by: str | None = "id",
    order: str | None = "asc",
) -> list[Store]:
    """List stores matching every given filter, with the same sort rules as users."""
    query = _filter_stores(db.query(Store), filters or StoreFilters())
    with storage_errors(db, "listing stores"):
        return query.order_by(*_ordering(STORE_SORT_COLUMNS, sort_by, order)).all()


def add_store(
    db: Session,
    name: str | None,
    address: str | None,
    owner_id: int | None,
    email: str | None = None,
) -> Store:
    """Create a store.

    The owner is not required to hold the ``store_owner`` role.

    Raises:
        ValidationError: If name, address or owner is missing, or the owner does not exist
    """
    if not name or not address or owner_id is None:
        raise ValidationError("All fields are required.")

    store = Store(
        name=name.strip(),
        address=address.strip(),
        email=email.lower() if email else None,
        owner_id=owner_id,
        created_at=datetime.now(timezone.utc),
    )

    with storage_errors(db, "creating store"):
        db.add(store)
        try:
            db.commit()
        except IntegrityError as e:
            raise ValidationError("Owner does not exist.") from e
        db.refresh(store)

    logger.info(f"Created store {store.id} owned by user {owner_id}")
    return store


def average_rating(db: Session, store_id: int) -> RatingStats:
    """Aggregate a store's ratings live.

    Returns:
        RatingStats: Average rounded to two places (None when unrated) and count
    """
    with storage_errors(db, "aggregating ratings"):
        average, count = (
            db.query(func.avg(Rating.rating), func.count(Rating.id))
            .filter(Rating.store_id == store_id)
            .one()
        )
    return RatingStats(average=round_average(average), count=int(count or 0))


def store_ratings(db: Session, store_id: int) -> list[tuple[Rating, str]]:
    """All ratings of a store paired with the rater's name."""
    with storage_errors(db, "fetching store ratings"):
        return (
            db.query(Rating, User.name)
            .join(User, Rating.user_id == User.id)
            .filter(Rating.store_id == store_id)
            .order_by(Rating.id.asc())
            .all()
        )


def owner_dashboard(db: Session, owner_id: int) -> tuple[list[Any], list[Any]]:
    """Feedback for every store a user owns.

    Returns:
        Tuple of (rating rows, per-store average rows). Rating rows carry
        ``name``, ``email``, ``rating``, ``created_at`` and ``store_name``;
        average rows carry ``store_id``, ``store_name``, ``avg_rating`` and
        ``total_ratings``. Stores without ratings appear with a null average.
    """
    with storage_errors(db, "building owner dashboard"):
        ratings = (
            db.query(
                User.name.label("name"),
                User.email.label("email"),
                Rating.rating.label("rating"),
                Rating.created_at.label("created_at"),
                Store.name.label("store_name"),
            )
            .select_from(Rating)
            .join(User, Rating.user_id == User.id)
            .join(Store, Rating.store_id == Store.id)
            .filter(Store.owner_id == owner_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
            .all()
        )
        averages = (
            db.query(
                Store.id.label("store_id"),
                Store.name.label("store_name"),
                func.avg(Rating.rating).label("avg_rating"),
                func.count(Rating.id).label("total_ratings"),
            )
            .outerjoin(Rating, Rating.store_id == Store.id)
            .filter(Store.owner_id == owner_id)
            .group_by(Store.id, Store.name)
            .order_by(Store.id.asc())
            .all()
        )
    return ratings, averages


def stores_with_user_rating(
    db: Session,
    user_id: int,
    filters: StoreFilters | None = None,
    sort_by: str | None = "id",
    order: str | None = "asc",
) -> list[StoreRatingSummary]:
    """List stores with their live average and the given user's own rating."""
    stats = (
        db.query(
            Rating.store_id.label("store_id"),
            func.avg(Rating.rating).label("avg_rating"),
            func.count(Rating.id).label("total_ratings"),
        )
        .group_by(Rating.store_id)
        .subquery()
    )
    own_rating = aliased(Rating)

    query = (
        db.query(Store, stats.c.avg_rating, stats.c.total_ratings, own_rating)
        .outerjoin(stats, stats.c.store_id == Store.id)
        .outerjoin(
            own_rating,
            and_(own_rating.store_id == Store.id, own_rating.user_id == user_id),
        )
    )
    query = _filter_stores(query, filters or StoreFilters())

    with storage_errors(db, "listing stores with user ratings"):
        rows = query.order_by(*_ordering(STORE_SORT_COLUMNS, sort_by, order)).all()

    return [
        StoreRatingSummary(
            store=store,
            average=round_average(average),
            count=int(count or 0),
            user_rating=rating,
        )
        for store, average, count, rating in rows
    ]


def dashboard_counts(db: Session) -> DashboardCounts:
    """Totals shown on the admin dashboard."""
    with storage_errors(db, "counting dashboard totals"):
        return DashboardCounts(
            total_users=db.query(func.count(User.id)).scalar() or 0,
            total_stores=db.query(func.count(Store.id)).scalar() or 0,
            total_ratings=db.query(func.count(Rating.id)).scalar() or 0,
        )
