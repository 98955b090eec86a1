"""
FastAPI application entry point for the Contact Book backend.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contactbook.api import api_router, health
from contactbook.core.config import settings
from contactbook.core.database import SessionLocal, create_db_and_tables, engine
from contactbook.core.errors import register_exception_handlers
from contactbook.core.logging_config import CORRELATION_HEADER, CorrelationIdMiddleware, setup_structured_logging
from contactbook.core.observability import setup_metrics
from contactbook.core.rate_limiting import setup_rate_limiting
from contactbook.core.security import SecurityHeadersMiddleware, setup_security_logging
from contactbook.services.seed import seed_demo_contacts

# Configure structured logging
setup_structured_logging(log_level=settings.log_level)
setup_security_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    create_db_and_tables()

    if settings.seed_demo_data:
        with SessionLocal() as db:
            seed_demo_contacts(db)

    logger.info(
        "Application startup complete",
        extra={"database": engine.url.get_backend_name(), "port": settings.port},
    )

    yield

    engine.dispose()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Contact book with search, notes and per-user preferences",
    version=health.SERVICE_VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Add security headers middleware
app.add_middleware(SecurityHeadersMiddleware)

# Add correlation ID middleware for request tracking
app.add_middleware(CorrelationIdMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", CORRELATION_HEADER],
    expose_headers=[CORRELATION_HEADER],
    max_age=600,
)

setup_rate_limiting(app)
setup_metrics(app)

# Mount API routers
app.include_router(health.router)  # Health checks first
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root() -> dict[str, str]:
    """
    Root endpoint with API information.
    """
    return {
        "message": f"{settings.app_name}",
        "version": health.SERVICE_VERSION,
        "docs": "/docs",
        "health": "/health",
        "ready": "/ready",
        "metrics": "/metrics",
        "api": "/api",
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run("contactbook.main:app", host="0.0.0.0", port=settings.port, log_config=None)
