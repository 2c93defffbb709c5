"""FastAPI application exposing the Citizen Alerts core."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from citizen_alerts.config import get_settings
from citizen_alerts.context import AppContext, build_context
from citizen_alerts.routers import (
    alerts_router,
    chat_router,
    health_router,
    location_router,
    reports_router,
)
from citizen_alerts.tasks.scheduler import setup_scheduler, shutdown_scheduler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


def create_app(
    context: AppContext | None = None,
    enable_scheduler: bool = True,
) -> FastAPI:
    """
    Build the application.

    Args:
        context: Pre-built services (tests inject one with a fake backend);
            built from settings at startup when omitted
        enable_scheduler: Run the periodic alert refresh
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management."""
        logger.info("Starting Citizen Alerts core...")
        if getattr(app.state, "context", None) is None:
            app.state.context = build_context(settings)

        scheduler = setup_scheduler(app.state.context) if enable_scheduler else None

        yield

        shutdown_scheduler(scheduler)
        logger.info("Citizen Alerts core shut down")

    app = FastAPI(
        title="Citizen Alerts API",
        description="Community incident alerts: ingestion, queries, reports and chat",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.context = context

    # Rate limiter
    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unhandled exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    app.include_router(health_router)
    app.include_router(alerts_router, prefix=settings.api_v1_prefix)
    app.include_router(reports_router, prefix=settings.api_v1_prefix)
    app.include_router(location_router, prefix=settings.api_v1_prefix)
    app.include_router(chat_router, prefix=settings.api_v1_prefix)

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Citizen Alerts API",
            "version": "0.1.0",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "citizen_alerts.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
