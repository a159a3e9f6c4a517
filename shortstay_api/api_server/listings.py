"""
FastAPI router: GET /listings, GET /listings/{id}, POST /listings.

Listing reads are public; creation requires a verified caller, who becomes
the owner. New listings are ACTIVE.
"""

from __future__ import annotations

import math
from typing import Any

from fastapi import APIRouter, Depends, Query

from shortstay_api.api_server.dependencies import get_store, require_auth
from shortstay_api.api_server.schemas import CreateListingRequest
from shortstay_api.auth.identity import AuthedUser
from shortstay_api.core.exceptions import NotFoundError, ValidationError
from shortstay_api.database import repositories
from shortstay_api.database.models import is_valid_id
from shortstay_api.database.store import Store

router = APIRouter(tags=["listings"])


def _parse_price_max(raw: str | None) -> float | None:
    """priceMax filter; anything that is not a finite number is ignored."""
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


@router.get("/listings")
def list_listings(
    area: str | None = None,
    status: str | None = None,
    price_max: str | None = Query(None, alias="priceMax"),
    store: Store = Depends(get_store),
) -> dict[str, Any]:
    """Newest first, max 50. status defaults to ACTIVE."""
    items = repositories.list_listings(
        store,
        area=(area or "").strip() or None,
        status=(status or "").upper() or None,
        price_max=_parse_price_max(price_max),
    )
    return {"items": items}


@router.get("/listings/{listing_id}")
def get_listing(listing_id: str, store: Store = Depends(get_store)) -> dict[str, Any]:
    if not is_valid_id(listing_id):
        raise ValidationError("Invalid id")
    item = repositories.get_listing(store, listing_id)
    if item is None:
        raise NotFoundError("Not found")
    return {"item": item}


@router.post("/listings", status_code=201)
def create_listing(
    body: CreateListingRequest,
    user: AuthedUser = Depends(require_auth),
    store: Store = Depends(get_store),
) -> dict[str, str]:
    listing_id = repositories.create_listing(
        store,
        user.uid,
        title=body.title,
        area=body.area,
        price_per_night=body.price_per_night,
        description=body.description,
        availability_text=body.availability_text,
        images=[img.model_dump(by_alias=True) for img in body.images or []],
    )
    return {"id": listing_id}
