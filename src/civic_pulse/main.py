# src/civic_pulse/main.py
"""Main entry point for the Civic Pulse application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from civic_pulse.api.v1 import (
    moderation_router,
    notifications_router,
    office_votes_router,
    votes_router,
)
from civic_pulse.core.logging_config import configure_logging
from civic_pulse.core.settings import settings
from civic_pulse.services.errors import EngagementError

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Civic Pulse API",
    description="Citizen engagement with public offices: votes, moderation and notifications",
    version=settings.app_version,
)

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
app.include_router(votes_router, prefix="/api/v1")
app.include_router(office_votes_router, prefix="/api/v1")
app.include_router(moderation_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")


@app.exception_handler(EngagementError)
async def engagement_error_handler(request: Request, exc: EngagementError) -> JSONResponse:
    """Translate service errors into JSON responses."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    logger.info("%s %s starting", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("civic_pulse.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
