from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from .config import get_recommendation_config
from .lib.elasticsearch import create_es_client
from .lib.ratelimit import TTLRateLimiter
from .routers import health, recommendations
from .security import verify_api_key


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_recommendation_config()
    app.state.es = create_es_client()
    if config.rate_limit > 0:
        app.state.rate_limiter = TTLRateLimiter(
            max_hits=config.rate_limit,
            window_seconds=config.rate_limit_window_seconds,
        )
    yield
    await app.state.es.close()


app = FastAPI(
    title="People You May Know API",
    description="An API server for handling people-you-may-know recommendation requests",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(recommendations.router)


@app.get("/", dependencies=[Depends(verify_api_key)])
async def root():
    return {"message": "People You May Know API"}
