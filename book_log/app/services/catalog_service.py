"""
ISBN lookup against the Open Library search API.

Given the title a reader typed, :class:`IdentifierResolver` searches
Open Library and derives a single ISBN from the first hit:

1. a 13-character entry of the ``isbn`` list if there is one,
   otherwise the first entry;
2. failing that, the ISBN embedded in ``lending_identifier_s``
   (``"isbn_9781234567897_..."``);
3. otherwise nothing.

A lookup that fails (network error, error status, unexpected body) is
logged and reported as ``None``.  A missing ISBN only costs the book
its cover, so callers decide what to do with ``None`` and never need
to handle exceptions from here.  There are no retries and no caching.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

OPEN_LIBRARY_SEARCH_URL = "https://openlibrary.org/search.json"
USER_AGENT = "book-log/1.0 (personal reading log)"

ISBN13_LENGTH = 13
LENDING_ISBN_MARKER = "isbn_"


def pick_isbn(doc: Any) -> Optional[str]:
    """Choose the ISBN for one search result, or ``None``."""
    if not isinstance(doc, dict):
        return None

    isbns = doc.get("isbn")
    if isinstance(isbns, list) and isbns:
        for number in isbns:
            if isinstance(number, str) and len(number) == ISBN13_LENGTH:
                return number
        first = isbns[0]
        return first if isinstance(first, str) and first else None

    lending = doc.get("lending_identifier_s")
    if isinstance(lending, str) and LENDING_ISBN_MARKER in lending:
        segment = lending.split("_")[1]
        return segment or None

    return None


class IdentifierResolver:
    """Resolve book titles to ISBNs through a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        search_url: str = OPEN_LIBRARY_SEARCH_URL,
    ) -> None:
        self.client = client
        self.search_url = search_url

    async def resolve(self, title: str) -> Optional[str]:
        """Return the best-guess ISBN for ``title``, or ``None``."""
        try:
            response = await self.client.get(self.search_url, params={"title": title})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            logger.warning("Catalog lookup for %r failed: %s", title, exc)
            return None
        except ValueError as exc:
            logger.warning("Catalog returned a malformed response for %r: %s", title, exc)
            return None

        docs = payload.get("docs") if isinstance(payload, dict) else None
        if not isinstance(docs, list) or not docs:
            logger.info("Catalog has no results for %r", title)
            return None

        isbn = pick_isbn(docs[0])
        if isbn is None:
            logger.info("First catalog result for %r carries no ISBN", title)
        return isbn
