"""
Top-level router.

Aggregates the endpoint modules.  The reading log serves its pages
from the site root, so no prefix is applied.
"""

from fastapi import APIRouter

from .endpoints import books

router = APIRouter()

router.include_router(books.router, tags=["books"])
