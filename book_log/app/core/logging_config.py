"""
Logging configuration for the book log.

Everything goes to the root logger: to the console always, and to
``LOG_FILE`` when one is configured.  Chatty client libraries are held
at WARNING unless the app itself runs at DEBUG, so a catalog lookup
shows up once (from ``catalog_service``) rather than as a raw request
line per call.
"""

import logging
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every outbound request at INFO.
QUIET_LOGGERS = ("httpx", "httpcore")


def _handlers(logfile: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(logfile, encoding="utf-8"))
    return handlers


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger once.

    ``level`` is a level name, case insensitive; unknown names mean
    ``INFO``.  If the root logger already has handlers (a second
    ``create_app`` call, or a test runner capturing logs) nothing is
    changed.
    """
    if logging.getLogger().handlers:
        return
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=_handlers(logfile),
    )
    if numeric_level > logging.DEBUG:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
