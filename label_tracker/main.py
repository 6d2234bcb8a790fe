"""
Label Tracker API

Tracks production orders registered from SIRINE, the rim labels they
decompose into, and the inspection progress of those labels.

Main application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from label_tracker import __version__
from label_tracker.api import (
    routes_auth,
    routes_health,
    routes_labels,
    routes_orders,
    routes_specifications,
    routes_users,
    routes_workstations,
)
from label_tracker.api.errors import register_error_handlers
from label_tracker.core import database
from label_tracker.core.config import get_settings
from label_tracker.core.database import Base, close_db, get_db_context, init_db
from label_tracker.core.logging import get_logger, setup_logging
from label_tracker.core.middleware import RequestLoggingMiddleware

# Import all models so they're registered with Base
from label_tracker.models import Label, ProductionOrder, User, UserApiKey, Workstation  # noqa: F401
from label_tracker.services.bootstrap import seed_initial_data

settings = get_settings()

setup_logging(settings.log_level, settings.log_format)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup: database engine, table creation, first-start seed.
    Shutdown: dispose of the engine.
    """
    await init_db()

    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified")

    if settings.seed_initial_data:
        async with get_db_context() as db:
            await seed_initial_data(db)

    logger.info(
        "Label Tracker API starting",
        host=settings.api_host,
        port=settings.api_port,
        database=settings.database_url.split("@")[-1],  # hide credentials
        sirine_api_url=settings.sirine_api_url,
        cors_origins=settings.cors_origins,
        environment=settings.environment,
    )

    yield

    logger.info("Label Tracker API shutting down")
    await close_db()


app = FastAPI(
    title="Label Tracker API",
    description="""
    ## Label Production Tracking

    - **Specifications**: read-through lookups against SIRINE (regular / MMEA)
    - **Production orders**: registration, rim/label decomposition, status progression
    - **Labels**: start and finish inspections, next label to process, progress
    - **Administration**: users, workstations, password resets

    Authenticate with `POST /api/auth/login` and send the returned token in the
    `X-API-Key` header.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time", "X-Request-ID"],
)

app.add_middleware(RequestLoggingMiddleware)

register_error_handlers(app)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled errors."""
    logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred. Please try again later.",
            "request_id": getattr(request.state, "request_id", "unknown"),
        }
    )


app.include_router(
    routes_health.router,
    prefix="/healthz",
    tags=["Health Check"]
)

app.include_router(
    routes_auth.router,
    prefix="/api/auth",
    tags=["Authentication"]
)

app.include_router(
    routes_specifications.router,
    prefix="/api/specifications",
    tags=["Specifications"]
)

app.include_router(
    routes_orders.router,
    prefix="/api/orders",
    tags=["Production Orders"]
)

app.include_router(
    routes_labels.router,
    prefix="/api/labels",
    tags=["Labels"]
)

app.include_router(
    routes_users.router,
    prefix="/api/admin",
    tags=["Admin: Users"]
)

app.include_router(
    routes_workstations.router,
    prefix="/api/admin/workstations",
    tags=["Admin: Workstations"]
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with basic API information."""
    return {
        "message": "Label Tracker API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "health": "/healthz"
    }


def run() -> None:
    """Console entry point (``label-tracker``)."""
    uvicorn.run(
        "label_tracker.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run()
