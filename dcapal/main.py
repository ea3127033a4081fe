"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dcapal import __version__
from dcapal.api.routes import api_router
from dcapal.config import AppSettings, get_settings
from dcapal.context import AppContext, build_context
from dcapal.core.logging import setup_logging
from dcapal.core.metrics import imported_portfolios_total
from dcapal.core.telemetry import setup_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI, ctx: AppContext):
    logger.info("DCA Pal configuration", extra={"settings": ctx.settings.dict_for_logging()})
    await ctx.startup()
    try:
        yield
    finally:
        await ctx.shutdown()
        telemetry = getattr(app.state, "telemetry", None)
        if telemetry is not None:
            telemetry.shutdown()


def create_app(settings: AppSettings | None = None, context: AppContext | None = None) -> FastAPI:
    """Build the API around ``context``, or around one wired from ``settings``."""

    settings = settings or (context.settings if context is not None else get_settings())
    ctx = context or build_context(settings)

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lambda app: _lifespan(app, ctx),
    )
    app.state.context = ctx

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["cache-control", "traceparent", "tracestate", "x-request-id"],
    )

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, object]:
        """Return service readiness metadata."""

        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "imported_portfolios": imported_portfolios_total.value,
        }

    app.include_router(api_router)
    app.state.telemetry = setup_telemetry(
        app, settings, engine=ctx.database.engine if ctx.database is not None else None
    )
    return app


def run() -> FastAPI:
    """Application factory for ``uvicorn --factory dcapal.main:run``."""

    setup_logging()
    return create_app()


__all__ = ["create_app", "run"]
