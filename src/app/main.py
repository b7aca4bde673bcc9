"""
Admission Service API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging
- Database connection
- Candidate directory client
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.api import api_router
from app.core.config import settings
from app.core.database import async_session_maker, close_db, init_db
from app.core.directory import close_directory_client, init_directory_client
from app.core.logging_config import configure_logging

configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown of the database and the directory client.
    """
    # Startup
    logger.info(f"Starting Admission Service API in {settings.python_env} mode...")

    # Initialize Database
    try:
        await init_db()
        logger.info("[OK] Database connected")
    except Exception as e:
        logger.error(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    # Directory sync is best-effort; a missing URL only disables it
    await init_directory_client()
    if settings.directory_service_url:
        logger.info(f"[OK] Directory service at {settings.directory_service_url}")
    else:
        logger.warning("Directory service URL not set - matricule sync disabled")

    yield  # Application runs here

    # Shutdown
    logger.info("Shutting down Admission Service API...")

    await close_directory_client()
    await close_db()
    logger.info("[OK] Cleanup complete")


app = FastAPI(
    title="Admission Service API",
    description="School admission applications, review statuses and matricule assignment",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to the Admission Service API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint: verifies the database answers."""
    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return {"status": "not ready"}
