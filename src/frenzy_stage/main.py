# src/frenzy_stage/main.py
"""Main entry point for the Frenzy application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from frenzy_stage.api.v1 import chat_router, inventory_router, system_router
from frenzy_stage.core.settings import settings
from frenzy_stage.db.session import create_tables
from frenzy_stage.services.connection import get_chat_hub
from frenzy_stage.services.rate_limit import RateLimitSweeper

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Frenzy API",
    description="Realtime chat and fishing game backend",
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
app.include_router(chat_router, prefix="/api/v1")
app.include_router(inventory_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
    sweeper = RateLimitSweeper(get_chat_hub().limiter)
    await sweeper.start()
    app.state.rate_limit_sweeper = sweeper
    logger.info("Chat server ready for connections")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    sweeper: RateLimitSweeper | None = getattr(app.state, "rate_limit_sweeper", None)
    if sweeper:
        await sweeper.stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Frenzy API",
        "version": settings.app_version,
        "description": "Realtime chat and fishing game backend",
        "websocket": "/api/v1/chat/ws",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("frenzy_stage.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
