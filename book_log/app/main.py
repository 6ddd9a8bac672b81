"""
Main entrypoint for the Book Log web application.

``create_app`` builds the FastAPI application: it configures logging,
mounts static files, includes the HTML routes and installs a lifespan
that owns the long-lived resources.  On startup the lifespan opens the
SQLite ``BookStore`` (applying migrations) and an ``httpx.AsyncClient``
for the catalog, wires them into a ``ReviewService`` stored on
``app.state``, and releases both on shutdown.  Run it with::

    uvicorn book_log.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.router import router
from .core.config import Settings, settings as default_settings
from .core.db import BookStore
from .core.logging_config import setup_logging
from .services.catalog_service import USER_AGENT, IdentifierResolver
from .services.review_service import ReviewService

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app_settings: Settings = app.state.settings
    if not app_settings.admin_password:
        logger.warning("ADMIN_PASSWORD is not set; anyone can add, edit or delete books")

    with BookStore(app_settings.database_url) as store:
        async with httpx.AsyncClient(headers={"User-Agent": USER_AGENT}) as client:
            resolver = IdentifierResolver(client, app_settings.catalog_search_url)
            app.state.review_service = ReviewService(
                store,
                resolver,
                cover_url_template=app_settings.cover_url_template,
                require_isbn=app_settings.require_isbn,
            )
            logger.info("%s %s started", app_settings.project_name, app_settings.app_version)
            yield


async def plain_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> PlainTextResponse:
    """Render HTTP errors (404, 403, ...) as plain text."""
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def plain_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> PlainTextResponse:
    """Render request validation errors as plain text.

    A path id that is not an integer cannot name a book, so it is
    answered like any other unknown id.
    """
    if any(tuple(error.get("loc", ()))[:1] == ("path",) for error in exc.errors()):
        return PlainTextResponse("Book not found", status_code=404)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return PlainTextResponse("Invalid request", status_code=422)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the ones read from the environment.
        Tests pass their own to point at a temporary database.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or default_settings
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.app_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.add_exception_handler(StarletteHTTPException, plain_http_exception_handler)
    app.add_exception_handler(RequestValidationError, plain_validation_exception_handler)
    app.include_router(router)

    return app


# Create the application instance at import time so that uvicorn can
# load ``book_log.app.main:app`` directly.
app = create_app()
