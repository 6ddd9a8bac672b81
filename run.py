"""Entry point for the Book Log web application.

Starts the FastAPI app under uvicorn.  Host and port come from the
``HOST`` and ``PORT`` environment variables (or a ``.env`` file next to
this script), defaulting to ``0.0.0.0`` and ``3000``.  The SQLite
database path and the admin secret are configured the same way; see
``book_log/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from book_log.app.core.config import settings
from book_log.app.main import app


async def main() -> None:
    """Serve the application until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Server is running on port %s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
