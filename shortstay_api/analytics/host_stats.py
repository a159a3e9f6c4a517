"""
Host stats: reputation summary from visible recommendations.

avgRating is the plain mean of overall ratings. hostScore adds a small boost
per recommendation (0.03 each, capped at 20 recommendations = +0.60) and is
clamped to 0-5. Recomputed synchronously on every recommendation write.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.exc import IntegrityError

from shortstay_api.core.exceptions import ValidationError
from shortstay_api.database.models import Recommendation, utcnow
from shortstay_api.database.repositories import ensure_user
from shortstay_api.database.store import Store
from shortstay_api.shortstay_logging import get_logger

logger = get_logger(__name__)

BOOST_PER_REC = 0.03
BOOST_REC_CAP = 20
SCORE_MIN = 0.0
SCORE_MAX = 5.0


@dataclass(frozen=True)
class HostStats:
    """Aggregate reputation of one host."""

    host_score: float
    avg_rating: float
    recs_count: int

    def to_dict(self) -> dict[str, float | int]:
        return {
            "hostScore": self.host_score,
            "avgRating": self.avg_rating,
            "recsCount": self.recs_count,
        }


def compute_host_stats(overall_ratings: Iterable[int | None]) -> HostStats:
    """Pure reduction over overall ratings; a missing rating counts as 0."""
    ratings = [r or 0 for r in overall_ratings]
    recs_count = len(ratings)
    avg_rating = sum(ratings) / recs_count if recs_count else 0.0
    boost = min(recs_count, BOOST_REC_CAP) * BOOST_PER_REC
    host_score = max(SCORE_MIN, min(SCORE_MAX, avg_rating + boost))
    return HostStats(host_score=host_score, avg_rating=avg_rating, recs_count=recs_count)


def recompute_host_stats(store: Store, host_id: str) -> HostStats:
    """
    Recompute and persist a host's stats from non-hidden recommendations.

    Reads and writes in one transaction: the host's user row is created bare
    when missing, then hostStats.* and updatedAt are set. When a concurrent
    request inserts that row first, the recompute is retried once. Store errors
    propagate and leave the previously stored stats unchanged.
    """
    if not host_id:
        raise ValidationError("hostId must be non-empty")

    try:
        stats = _recompute_once(store, host_id)
    except IntegrityError:
        logger.info("host_stats_retry", host_id=host_id)
        stats = _recompute_once(store, host_id)

    logger.info(
        "host_stats_recomputed",
        host_id=host_id,
        host_score=round(stats.host_score, 4),
        avg_rating=round(stats.avg_rating, 4),
        recs_count=stats.recs_count,
    )
    return stats


def _recompute_once(store: Store, host_id: str) -> HostStats:
    with store.session_scope() as session:
        rows = (
            session.query(Recommendation.rating_overall)
            .filter(Recommendation.host_id == host_id, Recommendation.hidden.is_(False))
            .all()
        )
        stats = compute_host_stats(r[0] for r in rows)

        now = utcnow()
        user = ensure_user(session, host_id)
        user.host_score = stats.host_score
        user.avg_rating = stats.avg_rating
        user.recs_count = stats.recs_count
        user.host_stats_updated_at = now
        user.updated_at = now
    return stats
