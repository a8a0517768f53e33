"""
Placement Portal API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Database engine and session factory (stored on app.state)
- Redis connection for rate limiting
- Object storage for student documents
- Background reconciler scheduler
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from placement_portal.api import api_router
from placement_portal.core.config import settings, validate_settings
from placement_portal.core.database import close_db, create_engine, create_session_factory, init_db
from placement_portal.core.redis import close_redis, init_redis
from placement_portal.core.scheduler import clear_registry, start_scheduler, stop_scheduler
from placement_portal.core.storage import init_file_store
from placement_portal.modules.lifecycle.jobs import register_lifecycle_jobs

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Configuration checks
    - Database connection (fatal if unreachable)
    - Redis connection (optional, rate limiting falls back to memory)
    - Background job scheduler
    """
    # Startup
    print(f"Starting Placement Portal API in {settings.python_env} mode...")

    validate_settings(settings)

    # Initialize Database
    engine = create_engine(settings)
    try:
        await init_db(engine, create_tables=settings.is_development)
        print("[OK] Database connected")
    except Exception as e:
        print(f"[FAIL] Database connection failed: {e}")
        await close_db(engine)
        raise

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # Initialize Redis
    try:
        await init_redis()
        print("[OK] Redis connected")
    except Exception as e:
        print(f"[FAIL] Redis connection failed, rate limits use process memory: {e}")

    # Document storage (optional)
    if init_file_store() is not None:
        print("[OK] Document storage configured")
    else:
        print("[SKIP] Document storage not configured, uploads disabled")

    # Initialize Background Job Scheduler
    try:
        # Register jobs before starting the scheduler
        register_lifecycle_jobs(app.state.session_factory)

        await start_scheduler()
        print("[OK] Background scheduler started")
    except Exception as e:
        print(f"[FAIL] Background scheduler failed to start: {e}")
        if settings.is_production:
            raise

    yield  # Application runs here

    # Shutdown
    print("Shutting down Placement Portal API...")

    # Stop the scheduler first (no new ticks, running sweep finishes)
    await stop_scheduler()
    clear_registry()
    print("[OK] Background scheduler stopped")

    await close_redis()
    await close_db(engine)
    print("[OK] Cleanup complete")


app = FastAPI(
    title="Placement Portal API",
    description="Placement drives, student applications and lifecycle jobs",
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
        "message": "Welcome to the Placement Portal API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check(request: Request):
    """Readiness check endpoint. Verifies the database answers."""
    try:
        async with request.app.state.session_factory() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable"},
        )
    return {"status": "ready"}
