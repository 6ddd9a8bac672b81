"""
HTML routes for the reading log.

The index lists every book; the add and edit pages share one form
template.  Every POST route requires the admin secret.  Errors are
returned as short plain-text bodies: validation and ISBN lookup
failures as 400, unknown ids as 404 and database failures as 500 with
a generic message (details go to the log only).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from book_log.app.api.deps import book_form, get_review_service, templates
from book_log.app.core.errors import (
    NotFoundError,
    ResolutionError,
    StoreError,
    ValidationError,
)
from book_log.app.core.security import require_admin
from book_log.app.schemas.book import BookForm, BookRead
from book_log.app.services.review_service import DEFAULT_SORT, SORT_KEYS, ReviewService

logger = logging.getLogger(__name__)

router = APIRouter()


def _render_form(
    request: Request,
    heading: str,
    action: str,
    submit_text: str,
    book: Optional[BookRead] = None,
    delete_action: Optional[str] = None,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "book_form.html",
        {
            "heading": heading,
            "action": action,
            "submit_text": submit_text,
            "book": book,
            "delete_action": delete_action,
            "admin_required": bool(request.app.state.settings.admin_password),
        },
    )


def _back_to_index() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)


@router.get("/", response_class=HTMLResponse, summary="List books")
async def list_books(
    request: Request,
    sort: str = Query(DEFAULT_SORT, description="Sort by 'rating', 'title' or 'date'"),
    service: ReviewService = Depends(get_review_service),
):
    """Render all books, most recently read first unless ``sort`` says otherwise."""
    current_sort = sort if sort in SORT_KEYS else DEFAULT_SORT
    try:
        books = await service.list_books(current_sort)
    except StoreError:
        return PlainTextResponse("Error loading books", status_code=500)
    return templates.TemplateResponse(
        request,
        "index.html",
        {"books": books, "current_sort": current_sort, "sort_keys": SORT_KEYS},
    )


@router.get("/add", response_class=HTMLResponse, summary="New book form")
async def new_book_form(request: Request):
    return _render_form(request, "Add New book", "/add", "Create")


@router.post("/add", dependencies=[Depends(require_admin)], summary="Create a book")
async def create_book(
    form: BookForm = Depends(book_form),
    service: ReviewService = Depends(get_review_service),
):
    """Record a new book and go back to the index."""
    try:
        await service.create_book(form)
    except (ValidationError, ResolutionError) as e:
        return PlainTextResponse(str(e), status_code=400)
    except StoreError:
        return PlainTextResponse("Error adding book", status_code=500)
    return _back_to_index()


@router.get("/book/{book_id}", response_class=HTMLResponse, summary="Edit book form")
async def edit_book_form(
    request: Request,
    book_id: int,
    service: ReviewService = Depends(get_review_service),
):
    """Render the form pre-filled with an existing book."""
    try:
        book = await service.get_book(book_id)
    except StoreError:
        return PlainTextResponse("Error loading book", status_code=500)
    if book is None:
        return PlainTextResponse("Book not found", status_code=404)
    return _render_form(
        request,
        "Edit book",
        f"/book/{book_id}",
        "Edit",
        book=book,
        delete_action=f"/book/{book_id}/delete",
    )


@router.post("/book/{book_id}", dependencies=[Depends(require_admin)], summary="Update a book")
async def update_book(
    book_id: int,
    form: BookForm = Depends(book_form),
    service: ReviewService = Depends(get_review_service),
):
    try:
        await service.update_book(book_id, form)
    except NotFoundError:
        return PlainTextResponse("Book not found", status_code=404)
    except StoreError:
        return PlainTextResponse("Error updating book", status_code=500)
    return _back_to_index()


@router.post(
    "/book/{book_id}/delete",
    dependencies=[Depends(require_admin)],
    summary="Delete a book",
)
async def delete_book(
    book_id: int,
    service: ReviewService = Depends(get_review_service),
):
    """Delete a book.  Unknown ids redirect like a successful delete."""
    try:
        await service.delete_book(book_id)
    except StoreError:
        return PlainTextResponse("Error deleting book", status_code=500)
    return _back_to_index()
