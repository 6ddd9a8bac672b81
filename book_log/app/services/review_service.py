"""
Business logic for the reading log.

``ReviewService`` is the only place with branching logic: it checks
new books for missing fields, resolves their ISBN through the catalog,
sorts the list for the index page and turns rows into ``BookRead``
objects with a cover URL.  Persistence is delegated to ``BookStore``
and the catalog lookup to ``IdentifierResolver``; both are injected so
the application lifespan controls when they are opened and closed.

Error kinds from ``core.errors`` are raised for the routes to map onto
HTTP statuses.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import Any, Dict, List, Optional

from book_log.app.core.db import BookStore
from book_log.app.core.errors import NotFoundError, ResolutionError, ValidationError
from book_log.app.schemas.book import BookForm, BookRead
from book_log.app.services.catalog_service import IdentifierResolver

logger = logging.getLogger(__name__)

SORT_KEYS = ("rating", "title", "date")
DEFAULT_SORT = "date"

DEFAULT_COVER_URL_TEMPLATE = "https://covers.openlibrary.org/b/isbn/{isbn}-M.jpg"


def title_collation_key(title: str) -> tuple[str, str]:
    """Sort key approximating a locale-aware, case-insensitive comparison.

    Accents are stripped and case folded so ``"alpha"`` sorts before
    ``"Beta"`` and ``"Éclair"`` next to ``"eclair"``; the raw title
    breaks ties.
    """
    decomposed = unicodedata.normalize("NFKD", title)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), title


def sort_books(books: List[BookRead], sort: str = DEFAULT_SORT) -> List[BookRead]:
    """Return ``books`` ordered for display.

    ``rating`` is highest first, ``title`` ascending, and ``date`` (the
    default, also used for unknown keys) most recently read first.
    Ties keep their stored order.
    """
    if sort == "rating":
        return sorted(books, key=lambda book: book.rating, reverse=True)
    if sort == "title":
        return sorted(books, key=lambda book: title_collation_key(book.title))
    return sorted(books, key=lambda book: book.date_read, reverse=True)


class ReviewService:
    """Service for recording, listing and editing books read."""

    def __init__(
        self,
        store: BookStore,
        resolver: IdentifierResolver,
        cover_url_template: str = DEFAULT_COVER_URL_TEMPLATE,
        require_isbn: bool = True,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.cover_url_template = cover_url_template
        self.require_isbn = require_isbn

    def _to_read(self, row: Dict[str, Any]) -> BookRead:
        isbn = row.get("isbn")
        cover_url = self.cover_url_template.format(isbn=isbn) if isbn else None
        return BookRead(**row, cover_url=cover_url)

    async def list_books(self, sort: str = DEFAULT_SORT) -> List[BookRead]:
        """Return every book, sorted by ``rating``, ``title`` or ``date``."""
        books = [self._to_read(row) for row in self.store.select_all()]
        return sort_books(books, sort)

    async def get_book(self, book_id: int) -> Optional[BookRead]:
        """Return a single book, or ``None`` if no book has ``book_id``."""
        row = self.store.select_by_id(book_id)
        if row is None:
            return None
        return self._to_read(row)

    async def create_book(self, form: BookForm) -> BookRead:
        """Record a new book.

        All five fields must be present and non-empty.  The ISBN is
        looked up from the title before anything is written; when none
        is found the book is rejected with ``ResolutionError`` unless
        the service was configured with ``require_isbn=False``, in
        which case it is stored without one.  Rating range and date
        format are left to the store.
        """
        missing = form.missing_fields()
        if missing:
            raise ValidationError("All fields are required (missing: %s)" % ", ".join(missing))

        isbn = await self.resolver.resolve(form.title)
        if isbn is None:
            logger.warning(
                "No ISBN found for book: %s. Make sure the title of the book is written correctly",
                form.title,
            )
            if self.require_isbn:
                raise ResolutionError(
                    "Could not fetch ISBN for the provided book title. "
                    "Please make sure the title is correct."
                )

        fields = form.to_fields()
        fields["isbn"] = isbn
        book_id = self.store.insert(fields)
        logger.info("Added book %s (%r, isbn=%s)", book_id, form.title, isbn)
        row = self.store.select_by_id(book_id)
        return self._to_read(row)

    async def update_book(self, book_id: int, form: BookForm) -> BookRead:
        """Overwrite a book's title, author, rating, notes and date.

        Fields are not re-checked for presence and the ISBN is kept as
        it was.  Raises ``NotFoundError`` when no book has ``book_id``.
        """
        if not self.store.update_by_id(book_id, form.to_fields()):
            raise NotFoundError(f"Book {book_id} not found")
        logger.info("Updated book %s", book_id)
        return self._to_read(self.store.select_by_id(book_id))

    async def delete_book(self, book_id: int) -> bool:
        """Delete a book.

        Deleting an id that does not exist is a no-op; the return value
        tells whether a row was removed.
        """
        deleted = self.store.delete_by_id(book_id)
        if deleted:
            logger.info("Deleted book %s", book_id)
        else:
            logger.info("Delete of book %s ignored: no such book", book_id)
        return deleted
