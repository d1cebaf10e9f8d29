import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str


@router.get("/health", response_model=HealthResponse, status_code=200)
async def healthcheck():
    return {"status": "ok"}


@router.get("/health/ready", response_model=HealthResponse, status_code=200)
async def readiness(request: Request):
    """Report whether the profile store is reachable."""
    es = getattr(request.app.state, "es", None)
    try:
        reachable = es is not None and await es.ping()
    except Exception:
        logger.exception("Elasticsearch ping failed")
        reachable = False
    if not reachable:
        raise HTTPException(status_code=503, detail="Profile store unavailable")
    return {"status": "ready"}
