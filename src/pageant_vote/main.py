# src/pageant_vote/main.py
"""Main entry point for the Pageant Vote application."""

from __future__ import annotations

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response

from pageant_vote.api.v1 import (
    admin_router,
    auth_router,
    candidates_router,
    results_router,
    voting_router,
)
from pageant_vote.core.settings import settings
from pageant_vote.db.session import create_tables
from pageant_vote.services.cache import ResultsCache
from pageant_vote.services.rate_limit import RateLimiter

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Pageant Vote API",
    description="One vote per device per category, with live results",
    version=settings.app_version,
)

# Process-scoped state; both are rebuilt (and therefore cleared) on restart.
app.state.rate_limiter = RateLimiter()
app.state.results_cache = ResultsCache()

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(voting_router, prefix="/api/v1")
app.include_router(results_router, prefix="/api/v1")
app.include_router(candidates_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.middleware("http")
async def issue_device_cookie(request: Request, call_next) -> Response:
    """Give first-time browsers a long-lived device cookie when cookies identify devices."""
    if settings.device_id_source != "cookie":
        return await call_next(request)

    issued: str | None = None
    if not request.cookies.get(settings.device_cookie_name):
        issued = str(uuid.uuid4())
        request.state.device_id = issued

    response = await call_next(request)
    if issued is not None:
        response.set_cookie(
            settings.device_cookie_name,
            issued,
            max_age=settings.device_cookie_max_age,
            path="/",
            httponly=True,
            secure=settings.device_cookie_secure,
            samesite="lax",
        )
    return response


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Hide storage failures behind a generic error; the transaction is already rolled back."""
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "An error occurred while processing your vote"},
    )


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Pageant Vote API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("pageant_vote.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
