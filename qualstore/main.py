"""Qualstore API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map QualStoreError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Every app instance owns its own ProjectRegistry (app.state.registry) and
      the Settings it was built with (app.state.settings)

Design Decisions:
    - create_app() factory: the registry exists before the first request even when
      the lifespan is not run (ASGI test transports skip it)
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from qualstore.api.error_handlers import register_error_handlers
from qualstore.api.routes import analytics, coding, export, health, projects
from qualstore.config import Settings, get_settings
from qualstore.infrastructure.observability import setup_logging
from qualstore.services.project_registry import ProjectRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    logger.info("Qualstore API started")
    yield
    logger.info(
        "Qualstore API shutting down, discarding %d project(s)",
        len(app.state.registry),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = ProjectRegistry(
        saturation_window=settings.saturation_window,
        saturation_threshold=settings.saturation_threshold,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes: explicit registration
    app.include_router(health.router)
    app.include_router(projects.router)
    app.include_router(coding.router)
    app.include_router(analytics.router)
    app.include_router(export.router)

    register_error_handlers(app)
    return app


app = create_app()
