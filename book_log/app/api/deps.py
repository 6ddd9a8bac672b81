"""
Shared dependencies for the HTML routes.
"""

from pathlib import Path
from typing import Optional

from fastapi import Form, Request
from fastapi.templating import Jinja2Templates

from book_log.app.schemas.book import BookForm
from book_log.app.services.review_service import ReviewService

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_review_service(request: Request) -> ReviewService:
    """Return the service created by the application lifespan."""
    return request.app.state.review_service


def book_form(
    title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    date_read: Optional[str] = Form(None),
) -> BookForm:
    """Collect the add/edit form fields into a ``BookForm``."""
    return BookForm(
        title=title,
        author=author,
        rating=rating,
        notes=notes,
        date_read=date_read,
    )
