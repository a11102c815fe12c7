"""Main FastAPI application for the weather forecast widget."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import os

import uvicorn
import traceback
from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from meteo_widget.api.endpoints import router as weather_router, widget_router
from meteo_widget.config import HOST, PORT, DEBUG
from meteo_widget.logging_config import configure_logging
from meteo_widget.weather.sessions import ViewRegistry

logger = logging.getLogger(__name__)

STATIC_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")


def create_app(views: Optional[ViewRegistry] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        views: Registry of per-session forecast views (creates default in the lifespan if None)

    Returns:
        Configured FastAPI application instance
    """
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Own the per-session forecast views for the lifetime of the application."""
        registry = views or ViewRegistry()
        app.state.views = registry
        try:
            logger.info("Starting Open-Meteo Weather Widget")
            yield
        except Exception as e:
            logger.error(f"Startup error: {e}")
            logger.error(traceback.format_exc())
            raise
        finally:
            logger.info("Shutting down Open-Meteo Weather Widget")
            await registry.aclose()

    app = FastAPI(
        title="Open-Meteo Weather Widget",
        description="Multi-day weather forecast widget for a city using Open-Meteo and API Ninjas geocoding",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.include_router(weather_router)
    app.include_router(widget_router)

    app.mount("/static", StaticFiles(directory=STATIC_PATH), name="static")

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint serving the widget page."""
        return FileResponse(os.path.join(STATIC_PATH, "index.html"))

    @app.get("/api", tags=["root"])
    async def api_info() -> dict:
        """API information endpoint.

        Returns:
            Basic service information
        """
        return {
            "message": "Open-Meteo Weather Widget",
            "docs": "/docs",
            "redoc": "/redoc",
            "weather": "/weather",
            "widget": "/widget/grid",
            "health": "/weather/health"
        }

    return app


def main() -> None:
    """Main entry point for the application."""
    configure_logging()
    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        "meteo_widget.main:create_app",
        factory=True,
        host=HOST,
        port=PORT,
        reload=DEBUG,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
