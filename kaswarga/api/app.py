"""FastAPI application for the treasury dashboard."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kaswarga.api.dashboard import router as dashboard_router
from kaswarga.api.sheets import router as sheets_router
from kaswarga.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to configure the app with (default: get_settings())

    Returns:
        FastAPI app with CORS, health check and dashboard routers
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Residential-community treasury dashboard backed by Google Sheets",
        version=settings.api_version,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(sheets_router)
    app.include_router(dashboard_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint for monitoring."""
        logger.info("Health check endpoint hit")
        return {
            "message": "Server is running okay!",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": "healthy",
        }

    return app


app = create_app()

__all__ = ["app", "create_app"]
