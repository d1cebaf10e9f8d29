"""Recommendations router – "people you may know" over HTTP.

GET /recommendations
    Ranked recommendations for the authenticated requester.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from ..config import RecommendationConfig, get_recommendation_config
from ..lib.recommendations import RecommendationError, recommend
from ..lib.store import ProfileStore
from ..models import ScoredCandidate
from ..security import RequesterUid, verify_api_key_structured

router = APIRouter(
    tags=["recommendations"],
    dependencies=[Depends(verify_api_key_structured)],
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "Unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "NotFound": status.HTTP_404_NOT_FOUND,
    "RateLimited": status.HTTP_429_TOO_MANY_REQUESTS,
    "Internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class RecommendationsResponse(BaseModel):
    """Ranked recommendations, best first."""

    recommendations: list[ScoredCandidate]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error(kind: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=ERROR_STATUS[kind],
        detail={"kind": kind, "message": message},
    )


def _check_rate_limit(request: Request, requester_uid: str) -> None:
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is not None and not limiter.hit(requester_uid):
        logger.warning("Rate limit exceeded for user %s", requester_uid)
        raise _error("RateLimited", "Too many requests, try again later")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/recommendations", response_model=RecommendationsResponse)
async def get_recommendations(
    request: Request,
    requester_uid: RequesterUid,
    config: Annotated[RecommendationConfig, Depends(get_recommendation_config)],
) -> RecommendationsResponse:
    """Return up to ``result_size`` people the requester may know.

    Errors carry ``{"kind", "message"}`` details; partial lists are never
    returned.
    """
    _check_rate_limit(request, requester_uid)

    store = ProfileStore(
        request.app.state.es,
        users_index=config.users_index,
        follows_index=config.follows_index,
        max_batch_size=config.limits.max_batch_size,
        page_size=config.limits.following_page_size,
    )
    rng = getattr(request.app.state, "rng", None)

    try:
        results = await recommend(store, requester_uid, config=config, rng=rng)
    except RecommendationError as exc:
        raise _error(exc.kind, exc.message) from exc
    except Exception as exc:
        logger.exception("Error generating recommendations for %s", requester_uid)
        raise _error("Internal", "Failed to generate recommendations") from exc

    return RecommendationsResponse(recommendations=results)
