"""
Viral Eats MY — FastAPI application entry point.
Lifespan: create DB tables → verify connectivity → build the restaurant cache.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from viraleats import __version__
from viraleats.config import settings
from viraleats.database import check_db_connectivity, engine
from viraleats.models import Base
from viraleats.routers import cron, health, hours, restaurants, reviews, trending
from viraleats.services.restaurant_cache import RestaurantCache
from viraleats.services.stores import SqlCacheStore

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_restaurant_cache() -> RestaurantCache:
    return RestaurantCache(
        SqlCacheStore(),
        memory_ttl_seconds=settings.memory_cache_ttl_seconds,
        persisted_ttl_seconds=settings.persisted_cache_ttl_seconds,
        maxsize=settings.memory_cache_max_entries,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.
    1. Create all tables (idempotent — IF NOT EXISTS).
    2. Verify DB connectivity.
    3. Build the process-wide restaurant cache.
    """
    logger.info("Starting Viral Eats API (env=%s)", settings.app_env)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified.")

    if await check_db_connectivity():
        logger.info("Database connectivity verified.")
    else:
        logger.error("Database connectivity check FAILED at startup.")

    app.state.restaurant_cache = build_restaurant_cache()

    yield

    logger.info("Shutting down Viral Eats API.")
    await engine.dispose()


app = FastAPI(
    title="Viral Eats MY",
    description="Viral restaurant discovery for Malaysia — map feed, trending ranks, halal filtering.",
    version=__version__,
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(restaurants.router)
app.include_router(trending.router)
app.include_router(reviews.router)
app.include_router(hours.router)
app.include_router(cron.router)


# ── Exception handlers ───────────────────────────────────────────────────────
# Every error leaves as {"error": "..."}, matching the success envelope.


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Bad query parameters are a 400, not FastAPI's default 422."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
        message = f"Invalid {field}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a machine-readable error for any unhandled exception."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
