"""
cereal.box - FastAPI Application

Greets visitors and keeps a single visitor counter in a relational database
when DATABASE_URL is set. Database trouble only degrades response fields:
every route answers 200.

Run with:
    python -m cereal_box
    uvicorn cereal_box.main:app --host 0.0.0.0 --port 3000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from cereal_box import __version__
from cereal_box.api import router
from cereal_box.api.routes import build_degraded
from cereal_box.config import get_settings
from cereal_box.context import AppContext, LifecycleState

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Build the application around an explicit context."""
    if context is None:
        context = AppContext.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Connect the database before serving, close it on shutdown."""
        context.state = LifecycleState.STARTING
        logger.info("Starting cereal.box...")

        # Outcome does not gate serving unless fail-open is disabled
        await context.gateway.connect(fail_open=context.settings.fail_open)

        context.state = LifecycleState.LISTENING
        logger.info(f"Server running on port {context.settings.port}")

        yield

        # uvicorn has already stopped accepting connections and drained requests here
        context.state = LifecycleState.DRAINING
        logger.info("Shutting down...")
        await context.gateway.close()
        logger.info("Database connection closed")
        context.state = LifecycleState.STOPPED
        logger.info("Shutdown complete")

    app = FastAPI(
        title="cereal.box",
        description="Greeting service with a persistent visitor counter",
        version=__version__,
        lifespan=lifespan,
        # Every path belongs to the greeting route
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.context = context

    @app.exception_handler(Exception)
    async def fail_open_handler(request: Request, exc: Exception):
        """Answer unexpected errors with the route's degraded body instead of a 500."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        body = build_degraded(request.app.state.context, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=body.model_dump(mode="json", by_alias=True),
        )

    app.include_router(router)
    return app


app = create_app()
