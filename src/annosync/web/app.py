"""FastAPI application serving the annotation frontend and store."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from annosync import __version__
from annosync.application.sync import AnnotationSyncEngine, IdentityLocks
from annosync.core.domain.events import EventBus
from annosync.core.ports.config_provider import AppConfig
from annosync.core.ports.issue_tracker import IssueTrackerError, IssueTrackerPort
from annosync.web.routes import annotations as annotation_routes
from annosync.web.routes import frontend

logger = logging.getLogger("WebApp")


def create_app(
    config: AppConfig,
    tracker: IssueTrackerPort,
    event_bus: Optional[EventBus] = None,
) -> FastAPI:
    """Build the web application.

    One sync engine is created per workflow. The engines share a single
    lock table so that concurrent writes of the same annotation id are
    serialized inside this process.

    Args:
        config: Loaded application configuration.
        tracker: Issue tracker the annotations are stored in.
        event_bus: Optional bus receiving the engines' domain events.

    Returns:
        Configured FastAPI application.
    """

    app = FastAPI(title="annosync", version=__version__)

    bus = event_bus or EventBus()
    locks = IdentityLocks()

    # Keep shared objects on the app state so routes can reach them.
    app.state.config = config
    app.state.event_bus = bus
    app.state.engines = {
        name: AnnotationSyncEngine(
            tracker,
            workflow,
            event_bus=bus,
            locks=locks,
            per_page=config.tracker.per_page,
        )
        for name, workflow in config.workflows.items()
    }

    @app.exception_handler(IssueTrackerError)
    async def tracker_error_handler(
        request: Request, exc: IssueTrackerError
    ) -> JSONResponse:
        """Report tracker failures on read paths as a bad gateway."""

        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    app.include_router(annotation_routes.router)
    app.include_router(frontend.router)

    mode = "read-only" if config.read_only else "read-write"
    logger.info(f"Serving {config.repository} in {mode} mode")
    return app
