"""TruckEst API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TruckEstError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized lazily; startup seeding is skipped when there is none

Design Decisions:
    - Lifespan over @app.on_event: cleaner shutdown of the DB pool and
      the registry client
    - /uploads mounted with check_dir=False: the directory is created on first upload
    - Upload size gate is an HTTP middleware (api/upload_limits.py)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from truckest.api.deps import close_vehicle_registry
from truckest.api.error_handlers import register_error_handlers
from truckest.api.routes import (
    auth, estimates, export, health, jobs, truck_data, uploads, vehicles,
)
from truckest.api.upload_limits import limit_upload_size
from truckest.config import get_settings
from truckest.infrastructure.database import close_db, get_db_manager
from truckest.infrastructure.observability import setup_logging
from truckest.services.reference_data import seed_reference_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = get_db_manager()
    if manager is not None and settings.seed_reference_data:
        try:
            async with manager.session() as db:
                await seed_reference_data(db)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Reference data seeding skipped: {e}")
    logger.info("TruckEst API started")
    yield
    await close_vehicle_registry()
    await close_db()
    logger.info("TruckEst API shutting down")


app = FastAPI(
    title="TruckEst API", version="1.0.0", lifespan=lifespan,
)

# Oversized uploads are refused before the multipart body is parsed.
# Added first so CORS wraps its 413 responses.
app.middleware("http")(limit_upload_size)

# CORS origins come from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes, registered explicitly
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(truck_data.router)
app.include_router(vehicles.router)
app.include_router(jobs.router)
app.include_router(uploads.router)
app.include_router(estimates.router)
app.include_router(export.router)

register_error_handlers(app)

# Uploaded photos, mounted after the API routes so /api/* takes precedence
app.mount(
    "/uploads",
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)
