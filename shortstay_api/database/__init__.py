"""
Database layer: users, listings, rental requests and recommendations.

SQLAlchemy models, the injectable Store, and repository functions used by the API.
"""

from shortstay_api.database.models import (
    Base,
    Listing,
    Recommendation,
    RentalRequest,
    User,
)
from shortstay_api.database.store import Store

__all__ = [
    "Base",
    "Listing",
    "Recommendation",
    "RentalRequest",
    "Store",
    "User",
]
