"""
Application package initializer.

The web application is split into ``core`` (settings, logging,
errors, the SQLite store and the admin guard), ``schemas``,
``services`` (the reading-log logic and ISBN lookup) and ``api`` (the
HTML routes).  ``main`` assembles them into a FastAPI app.
"""

from .main import app  # noqa: F401
