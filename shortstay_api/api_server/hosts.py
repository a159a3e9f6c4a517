"""
FastAPI router: host profiles and recommendations.

GET  /hosts/{hostId}                  public profile + hostStats (never 404)
GET  /hosts/{hostId}/recommendations  visible recommendations, newest first
POST /hosts/{hostId}/recommendations  recommend a host, then recompute stats

Recommendation creation blocks on the stats recomputation and returns the
fresh stats. One recommendation per (host, author); self-recommendation is
rejected.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from shortstay_api.analytics.host_stats import recompute_host_stats
from shortstay_api.api_server.dependencies import get_store, require_auth
from shortstay_api.api_server.schemas import CreateRecommendationRequest
from shortstay_api.auth.identity import AuthedUser
from shortstay_api.core.exceptions import ValidationError
from shortstay_api.database import repositories
from shortstay_api.database.models import zero_host_stats
from shortstay_api.database.store import Store
from shortstay_api.shortstay_logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/hosts", tags=["hosts"])


@router.get("/{host_id}")
def get_host(host_id: str, store: Store = Depends(get_store)) -> dict[str, Any]:
    host = repositories.get_host(store, host_id)
    if host is None:
        # host with no user record yet
        host = {"id": host_id, "name": None, "avatarUrl": None, "hostStats": zero_host_stats()}
    return {"host": host}


@router.get("/{host_id}/recommendations")
def list_recommendations(host_id: str, store: Store = Depends(get_store)) -> dict[str, Any]:
    return {"items": repositories.list_host_recommendations(store, host_id)}


@router.post("/{host_id}/recommendations", status_code=201)
def create_recommendation(
    host_id: str,
    body: CreateRecommendationRequest,
    user: AuthedUser = Depends(require_auth),
    store: Store = Depends(get_store),
) -> dict[str, Any]:
    if host_id == user.uid:
        logger.info("recommendation_self_rejected", host_id=host_id)
        raise ValidationError("Cannot recommend yourself")

    rec_id = repositories.insert_recommendation(
        store,
        host_id,
        user.uid,
        ratings=body.ratings.model_dump(),
        text=body.text,
    )
    stats = recompute_host_stats(store, host_id)
    return {"id": rec_id, "hostStats": stats.to_dict()}
