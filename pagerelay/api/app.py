"""FastAPI application factory.

Start-up
--------
:func:`create_app` resolves the settings and configures logging (unless
settings are given), verifies that the configured HTML parser is available,
and builds the single
:class:`~pagerelay.relay.RelayHandler` shared by all requests via
``request.app.state.handler``.  The handler holds configuration only; every
request opens and closes its own HTTP connections.

Routers
-------
    /api/extract  extract a page and forward it to the webhook
    /health       liveness probe
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pagerelay.api.routers import extract as extract_router
from pagerelay.config import Settings, load_settings
from pagerelay.logging_setup import configure_logging
from pagerelay.relay import RelayHandler
from pagerelay.scraper import require_html_parser

logger = logging.getLogger(__name__)


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Malformed request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Request body must be valid JSON"})


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error in %s", request.url.path)
    message = str(exc) or "An unexpected server error occurred."
    return JSONResponse(status_code=500, content={"error": message})


def create_app(
    settings: Optional[Settings] = None,
    handler: Optional[RelayHandler] = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    When *settings* is omitted (the ``uvicorn --factory`` launch path) they
    are loaded from the environment and root logging is configured from
    ``settings.log_level``.  Callers passing their own settings own logging.

    Raises:
        ConfigurationError: If the environment holds an unusable value.
        DependencyUnavailableError: If the configured HTML parser is missing.
    """
    if settings is None:
        settings = load_settings()
        configure_logging(settings.log_level)
    require_html_parser(settings.html_parser)

    app = FastAPI(
        title="PageRelay API",
        description=(
            "Extracts the title and main text of a web page and forwards "
            "them to a configured webhook."
        ),
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.handler = handler or RelayHandler(settings)

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.add_exception_handler(Exception, _unhandled)

    app.include_router(extract_router.router, prefix="/api", tags=["extract"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
