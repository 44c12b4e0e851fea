"""
FastAPI application for the feedback form digitizer.

Provides endpoints for:
- Uploading a photographed feedback form for extraction
- Listing all captured feedback records
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from . import __version__
from .config import get_settings
from .models import HealthResponse, RootResponse
from .routers import feedback, upload
from .services.container import ServiceContainer, build_services
from .services.exceptions import ServiceUnavailable

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CORS_ORIGINS = [
    "http://localhost:3000",  # React production (Docker)
    "http://127.0.0.1:3000",
    "http://localhost:5173",  # Vite development server
    "http://127.0.0.1:5173",
]


def create_app(
    services: ServiceContainer | None = None,
    initialize_store: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        services: Pre-built service container. When None, the container is
            built from environment settings at startup.
        initialize_store: Create the feedback collection at startup.

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        logger.info("Starting Feedback Form Digitizer...")
        container = services
        if container is None:
            try:
                settings = get_settings()
            except ValidationError as e:
                logger.error("Configuration is missing or invalid: %s", e)
                raise
            container = build_services(settings)
        app.state.services = container

        if initialize_store:
            try:
                container.document_store.ensure_collection()
            except ServiceUnavailable as e:
                # Listing retries the initialization and reports 503 meanwhile
                logger.warning("Document store not reachable at startup: %s", e.details or e)
        logger.info("Services initialized successfully")
        yield
        logger.info("Shutting down Feedback Form Digitizer...")

    app = FastAPI(
        title="Feedback Form Digitizer API",
        description="Digitizes photographed feedback forms using a vision model",
        version=__version__,
        lifespan=lifespan,
    )

    # Configure CORS for the frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Health Endpoints
    # =========================================================================

    @app.get("/", response_model=RootResponse)
    async def root() -> RootResponse:
        """Root endpoint - service banner."""
        return RootResponse(message="Feedback Form OCR Backend Server is running")

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    # =========================================================================
    # Include Routers
    # =========================================================================

    app.include_router(upload.router)
    app.include_router(feedback.router)

    return app


app = create_app()
