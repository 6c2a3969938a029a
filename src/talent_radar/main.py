"""Main entry point for the Talent Radar application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from talent_radar import __version__
from talent_radar.api.v1 import (
    comments_router,
    discussions_router,
    notifications_router,
    players_router,
    polls_router,
    ratings_router,
)
from talent_radar.core.exception_handlers import register_exception_handlers
from talent_radar.core.logging import configure_logging
from talent_radar.core.settings import settings
from talent_radar.services.poll_expiry import PollExpiryWorker

configure_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Community discussions, polls and ratings for football players",
    version=__version__,
)

register_exception_handlers(app)

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
app.include_router(players_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(discussions_router, prefix="/api/v1")
app.include_router(polls_router, prefix="/api/v1")
app.include_router(ratings_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.poll_expiry_enabled:
        worker = PollExpiryWorker()
        await worker.start()
        app.state.poll_expiry_worker = worker
    else:
        logger.info("Poll expiry worker disabled")
        app.state.poll_expiry_worker = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: PollExpiryWorker | None = getattr(app.state, "poll_expiry_worker", None)
    if worker:
        await worker.stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": __version__,
        "description": "Community discussions, polls and ratings for football players",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("talent_radar.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
