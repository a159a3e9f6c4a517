"""
FastAPI router: GET /requests, GET /requests/mine, POST /requests.

Rental requests are what guests are looking for. The public list shows ACTIVE
requests only; "mine" shows all of the caller's requests.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from shortstay_api.api_server.dependencies import get_store, require_auth
from shortstay_api.api_server.schemas import CreateRentalRequest
from shortstay_api.auth.identity import AuthedUser
from shortstay_api.database import repositories
from shortstay_api.database.store import Store

router = APIRouter(tags=["requests"])


@router.get("/requests")
def list_requests(area: str | None = None, store: Store = Depends(get_store)) -> dict[str, Any]:
    items = repositories.list_active_requests(store, area=(area or "").strip() or None)
    return {"items": items}


@router.get("/requests/mine")
def list_my_requests(
    user: AuthedUser = Depends(require_auth),
    store: Store = Depends(get_store),
) -> dict[str, Any]:
    return {"items": repositories.list_requests_by_author(store, user.uid)}


@router.post("/requests", status_code=201)
def create_request(
    body: CreateRentalRequest,
    user: AuthedUser = Depends(require_auth),
    store: Store = Depends(get_store),
) -> dict[str, str]:
    request_id = repositories.create_rental_request(
        store,
        user.uid,
        area=body.area,
        text=body.text,
        date_from=body.date_from,
        date_to=body.date_to,
        budget_max=body.budget_max,
    )
    return {"id": request_id}
