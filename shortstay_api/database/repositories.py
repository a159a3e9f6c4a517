"""
Repository functions for users, listings, rental requests and recommendations.

Every function takes the Store explicitly and runs in its own session scope.
Reads return plain dicts in the API's JSON shape; writes return the new id.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shortstay_api.core.exceptions import ConflictError
from shortstay_api.database.models import (
    LISTING_ACTIVE,
    REQUEST_ACTIVE,
    Listing,
    Recommendation,
    RentalRequest,
    User,
    utcnow,
)
from shortstay_api.database.store import Store
from shortstay_api.shortstay_logging import get_logger

logger = get_logger(__name__)

LISTINGS_LIMIT = 50
REQUESTS_LIMIT = 100
RECOMMENDATIONS_LIMIT = 100


# -----------------------------------------------------------------------------
# Users
# -----------------------------------------------------------------------------


def ensure_user(session: Session, user_id: str, *, created_at: Any = None) -> User:
    """
    Insert-if-absent: return the user row, creating a bare one when missing.

    created_at is only written on insert. Raises IntegrityError at flush
    when another transaction inserted the same id first.
    """
    user = session.get(User, user_id)
    if user is None:
        user = User(id=user_id, created_at=created_at)
        session.add(user)
        session.flush()
    return user


def bootstrap_user(
    store: Store,
    user_id: str,
    *,
    email: str | None,
    name: str | None,
    avatar_url: str | None,
) -> dict[str, Any]:
    """
    Create the caller's user row on first call, then refresh identity fields.

    Insert-only: createdAt. Always overwritten: email, name, avatarUrl, updatedAt.
    Never touched: hostStats (owned by the reputation aggregator).
    """
    try:
        return _bootstrap_user_once(store, user_id, email, name, avatar_url)
    except IntegrityError:
        # another request inserted the row between our read and flush
        logger.info("user_bootstrap_retry", user_id=user_id)
        return _bootstrap_user_once(store, user_id, email, name, avatar_url)


def _bootstrap_user_once(
    store: Store,
    user_id: str,
    email: str | None,
    name: str | None,
    avatar_url: str | None,
) -> dict[str, Any]:
    with store.session_scope() as session:
        now = utcnow()
        user = ensure_user(session, user_id, created_at=now)
        user.email = email
        user.name = name
        user.avatar_url = avatar_url
        user.updated_at = now
        session.flush()
        profile = user.to_profile_dict()
    logger.debug("user_bootstrapped", user_id=user_id)
    return profile


def get_host(store: Store, host_id: str) -> dict[str, Any] | None:
    """Public host profile, or None when the host has no user row yet."""
    with store.session_scope() as session:
        user = session.get(User, host_id)
        return user.to_host_dict() if user else None


# -----------------------------------------------------------------------------
# Listings
# -----------------------------------------------------------------------------


def create_listing(
    store: Store,
    owner_id: str,
    *,
    title: str,
    area: str,
    price_per_night: int,
    description: str,
    availability_text: str | None = None,
    images: list[dict[str, str]] | None = None,
) -> str:
    """Insert an ACTIVE listing owned by owner_id. Returns the new id."""
    now = utcnow()
    with store.session_scope() as session:
        listing = Listing(
            owner_id=owner_id,
            title=title,
            area=area,
            price_per_night=price_per_night,
            description=description,
            availability_text=availability_text,
            status=LISTING_ACTIVE,
            images=images or [],
            created_at=now,
            updated_at=now,
        )
        session.add(listing)
        session.flush()
        listing_id = listing.id
    logger.info("listing_created", listing_id=listing_id, owner_id=owner_id, area=area)
    return listing_id


def list_listings(
    store: Store,
    *,
    area: str | None = None,
    status: str | None = None,
    price_max: float | None = None,
    limit: int = LISTINGS_LIMIT,
) -> list[dict[str, Any]]:
    """Listings newest first. status defaults to ACTIVE; price_max is inclusive."""
    with store.session_scope() as session:
        q = session.query(Listing).filter(Listing.status == (status or LISTING_ACTIVE))
        if area:
            q = q.filter(Listing.area == area)
        if price_max is not None:
            q = q.filter(Listing.price_per_night <= price_max)
        rows = q.order_by(Listing.created_at.desc()).limit(limit).all()
        return [r.to_dict() for r in rows]


def get_listing(store: Store, listing_id: str) -> dict[str, Any] | None:
    with store.session_scope() as session:
        row = session.get(Listing, listing_id)
        return row.to_dict() if row else None


# -----------------------------------------------------------------------------
# Rental requests
# -----------------------------------------------------------------------------


def create_rental_request(
    store: Store,
    author_id: str,
    *,
    area: str,
    text: str,
    date_from: Any = None,
    date_to: Any = None,
    budget_max: int | None = None,
) -> str:
    """Insert an ACTIVE rental request. Returns the new id."""
    now = utcnow()
    with store.session_scope() as session:
        req = RentalRequest(
            author_id=author_id,
            area=area,
            date_from=date_from,
            date_to=date_to,
            budget_max=budget_max,
            text=text,
            status=REQUEST_ACTIVE,
            created_at=now,
            updated_at=now,
        )
        session.add(req)
        session.flush()
        request_id = req.id
    logger.info("rental_request_created", request_id=request_id, author_id=author_id, area=area)
    return request_id


def list_active_requests(
    store: Store,
    *,
    area: str | None = None,
    limit: int = REQUESTS_LIMIT,
) -> list[dict[str, Any]]:
    with store.session_scope() as session:
        q = session.query(RentalRequest).filter(RentalRequest.status == REQUEST_ACTIVE)
        if area:
            q = q.filter(RentalRequest.area == area)
        rows = q.order_by(RentalRequest.created_at.desc()).limit(limit).all()
        return [r.to_dict() for r in rows]


def list_requests_by_author(
    store: Store,
    author_id: str,
    *,
    limit: int = REQUESTS_LIMIT,
) -> list[dict[str, Any]]:
    """All of one author's requests, any status. Items omit authorId."""
    with store.session_scope() as session:
        rows = (
            session.query(RentalRequest)
            .filter(RentalRequest.author_id == author_id)
            .order_by(RentalRequest.created_at.desc())
            .limit(limit)
            .all()
        )
        return [r.to_dict(include_author=False) for r in rows]


# -----------------------------------------------------------------------------
# Recommendations
# -----------------------------------------------------------------------------


def list_host_recommendations(
    store: Store,
    host_id: str,
    *,
    limit: int = RECOMMENDATIONS_LIMIT,
) -> list[dict[str, Any]]:
    """Visible (non-hidden) recommendations for a host, newest first."""
    with store.session_scope() as session:
        rows = (
            session.query(Recommendation)
            .filter(Recommendation.host_id == host_id, Recommendation.hidden.is_(False))
            .order_by(Recommendation.created_at.desc())
            .limit(limit)
            .all()
        )
        return [r.to_dict() for r in rows]


def insert_recommendation(
    store: Store,
    host_id: str,
    author_id: str,
    *,
    ratings: dict[str, int],
    text: str | None = None,
) -> str:
    """
    Insert a visible recommendation. Returns the new id.

    Raises:
        ConflictError: author already recommended this host (unique constraint).
    """
    try:
        with store.session_scope() as session:
            rec = Recommendation(
                host_id=host_id,
                author_id=author_id,
                rating_overall=ratings["overall"],
                rating_trust=ratings["trust"],
                rating_accuracy=ratings["accuracy"],
                rating_experience=ratings["experience"],
                text=text,
                hidden=False,
                created_at=utcnow(),
            )
            session.add(rec)
            session.flush()
            rec_id = rec.id
    except IntegrityError as e:
        logger.info("recommendation_duplicate", host_id=host_id, author_id=author_id)
        raise ConflictError("Already recommended this host") from e
    logger.info("recommendation_created", recommendation_id=rec_id, host_id=host_id, author_id=author_id)
    return rec_id
