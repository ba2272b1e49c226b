"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from verity import __version__
from verity.api.error_handlers import register_error_handlers
from verity.api.routes import auth, verification
from verity.config import get_settings
from verity.core.logging import setup_logging
from verity.database import create_tables, init_db
from verity.telemetry import TelemetryManager

# Get settings
settings = get_settings()

# Configure logging
setup_logging(settings)
logger = logging.getLogger(__name__)

# Initialize telemetry
telemetry_manager = TelemetryManager(settings)
telemetry_manager.setup()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Verity application")

    init_db(settings)
    # Production schemas are managed by Alembic
    if settings.environment != "production":
        create_tables()
    logger.info("Database initialized")

    yield

    telemetry_manager.shutdown()
    logger.info("Shutting down Verity application")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Session-authenticated account verification service",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Session-Token"],
)

# Instrument FastAPI with OpenTelemetry
if settings.otel_enabled:
    FastAPIInstrumentor.instrument_app(app)
    logger.info("FastAPI instrumented with OpenTelemetry")

register_error_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(verification.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Verity API", "version": __version__}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "verity.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )
