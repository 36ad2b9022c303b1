"""
FastAPI application for the Haven Homes valuation service.

Production deployment configuration via environment variables.
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.valuation import __version__
from utils.config import Config
from utils.logging_setup import configure_logging
from web.valuation_routes import router as valuation_router

logger = logging.getLogger(__name__)

# =============================================================================
# Environment Configuration
# =============================================================================

IS_PRODUCTION = os.getenv("PRODUCTION", "").lower() == "true"

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    # Development fallback only
    ALLOWED_ORIGINS = ["http://localhost:3000", "http://localhost:8000", "http://127.0.0.1:8000"]


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()
    configure_logging(config.log_level)

    app = FastAPI(
        title="Haven Homes Valuation API",
        description="Instant property valuations, saved history and price alerts",
        version=__version__,
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=config.debug and not IS_PRODUCTION,
    )

    # Health endpoints are registered before middleware and routers.
    @app.get("/health", include_in_schema=False)
    def health():
        """Liveness probe. No dependencies, no IO."""
        return {"status": "healthy"}

    @app.get("/api/health")
    async def api_health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "environment": "production" if IS_PRODUCTION else "development",
            "currency": config.currency,
        }

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST", "DELETE"],
            allow_headers=["*"],
        )

    app.include_router(valuation_router)

    logger.info("Valuation API ready (data dir %s)", config.data_dir)
    return app


# Create app instance for uvicorn
app = create_app()
