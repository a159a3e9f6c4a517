"""
SQLAlchemy ORM models for persisted entities.

users, listings, rental_requests, recommendations. Entities reference each
other by value (user ids are identity-provider subject ids); no foreign keys
are declared. to_dict() methods return the camelCase JSON shape of the API.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

LISTING_ACTIVE = "ACTIVE"
LISTING_INACTIVE = "INACTIVE"
REQUEST_ACTIVE = "ACTIVE"
REQUEST_CLOSED = "CLOSED"

ID_HEX_LEN = 32


def new_id() -> str:
    """Generated resource id: 32 lowercase hex chars (UUID4)."""
    return uuid.uuid4().hex


def is_valid_id(value: str) -> bool:
    """True if value is a well-formed generated id."""
    if not value or len(value) != ID_HEX_LEN:
        return False
    try:
        uuid.UUID(hex=value)
    except ValueError:
        return False
    return value == value.lower()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def zero_host_stats() -> dict[str, Any]:
    return {"hostScore": 0, "avgRating": 0, "recsCount": 0}


class User(Base):
    """
    Marketplace user keyed by identity-provider subject id.

    Host stats are embedded as columns; they count as absent until the
    reputation aggregator has written host_stats_updated_at.
    """

    __tablename__ = "users"

    id = Column(String(128), primary_key=True)
    email = Column(String(320), nullable=True)
    name = Column(String(256), nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    host_score = Column(Float, nullable=True)
    avg_rating = Column(Float, nullable=True)
    recs_count = Column(Integer, nullable=True)
    host_stats_updated_at = Column(DateTime(timezone=True), nullable=True)

    def host_stats(self) -> dict[str, Any] | None:
        if self.host_stats_updated_at is None:
            return None
        return {
            "hostScore": self.host_score or 0,
            "avgRating": self.avg_rating or 0,
            "recsCount": self.recs_count or 0,
            "updatedAt": as_utc(self.host_stats_updated_at),
        }

    def to_profile_dict(self) -> dict[str, Any]:
        """Own profile, as returned by /me."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "avatarUrl": self.avatar_url,
            "hostStats": self.host_stats() or zero_host_stats(),
            "createdAt": as_utc(self.created_at),
        }

    def to_host_dict(self) -> dict[str, Any]:
        """Public host profile (no email)."""
        return {
            "id": self.id,
            "name": self.name,
            "avatarUrl": self.avatar_url,
            "createdAt": as_utc(self.created_at),
            "hostStats": self.host_stats() or zero_host_stats(),
        }


class Listing(Base):
    __tablename__ = "listings"

    id = Column(String(ID_HEX_LEN), primary_key=True, default=new_id)
    owner_id = Column(String(128), nullable=False, index=True)
    title = Column(String(80), nullable=False)
    area = Column(String(80), nullable=False, index=True)
    price_per_night = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    availability_text = Column(String(500), nullable=True)
    status = Column(String(16), nullable=False, default=LISTING_ACTIVE)
    images = Column(JSON, nullable=False, default=list)  # [{"storagePath": "..."}]
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_listings_status_created", "status", "created_at"),)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "title": self.title,
            "area": self.area,
            "pricePerNight": self.price_per_night,
            "description": self.description,
            "availabilityText": self.availability_text,
            "status": self.status,
            "images": list(self.images or []),
            "createdAt": as_utc(self.created_at),
            "updatedAt": as_utc(self.updated_at),
        }


class RentalRequest(Base):
    __tablename__ = "rental_requests"

    id = Column(String(ID_HEX_LEN), primary_key=True, default=new_id)
    author_id = Column(String(128), nullable=False, index=True)
    area = Column(String(80), nullable=False, index=True)
    date_from = Column(DateTime(timezone=True), nullable=True)
    date_to = Column(DateTime(timezone=True), nullable=True)
    budget_max = Column(Integer, nullable=True)
    text = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default=REQUEST_ACTIVE)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_rental_requests_status_created", "status", "created_at"),)

    def to_dict(self, *, include_author: bool = True) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id}
        if include_author:
            out["authorId"] = self.author_id
        out.update(
            {
                "area": self.area,
                "dateFrom": as_utc(self.date_from),
                "dateTo": as_utc(self.date_to),
                "budgetMax": self.budget_max,
                "text": self.text,
                "status": self.status,
                "createdAt": as_utc(self.created_at),
                "updatedAt": as_utc(self.updated_at),
            }
        )
        return out


class Recommendation(Base):
    """
    One user's rating of another as host. At most one per (host_id, author_id),
    enforced by uq_recommendations_host_author.
    """

    __tablename__ = "recommendations"

    id = Column(String(ID_HEX_LEN), primary_key=True, default=new_id)
    host_id = Column(String(128), nullable=False)
    author_id = Column(String(128), nullable=False)
    rating_overall = Column(Integer, nullable=False)
    rating_trust = Column(Integer, nullable=False)
    rating_accuracy = Column(Integer, nullable=False)
    rating_experience = Column(Integer, nullable=False)
    text = Column(String(500), nullable=True)
    hidden = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("host_id", "author_id", name="uq_recommendations_host_author"),
        Index("idx_recommendations_host_visible", "host_id", "hidden", "created_at"),
    )

    @property
    def ratings(self) -> dict[str, int]:
        return {
            "overall": self.rating_overall,
            "trust": self.rating_trust,
            "accuracy": self.rating_accuracy,
            "experience": self.rating_experience,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "hostId": self.host_id,
            "authorId": self.author_id,
            "ratings": self.ratings,
            "text": self.text,
            "createdAt": as_utc(self.created_at),
        }
