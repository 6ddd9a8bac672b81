"""Shared fixtures: a temporary book store, a stub ISBN resolver and an HTTP client."""

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from book_log.app.core.config import Settings
from book_log.app.core.db import BookStore
from book_log.app.main import create_app
from book_log.app.services.review_service import ReviewService

ADMIN_PASSWORD = "open-sesame"
DEFAULT_ISBN = "9780441013593"


class StubResolver:
    """Stands in for ``IdentifierResolver`` and records the titles it was asked for."""

    def __init__(self, isbn: Optional[str] = DEFAULT_ISBN) -> None:
        self.isbn = isbn
        self.calls: List[str] = []

    async def resolve(self, title: str) -> Optional[str]:
        self.calls.append(title)
        return self.isbn


@pytest.fixture
def store(tmp_path):
    with BookStore(str(tmp_path / "books.db")) as book_store:
        yield book_store


@pytest.fixture
def resolver():
    return StubResolver()


@pytest.fixture
def service(store, resolver):
    return ReviewService(store, resolver)


@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        database_url=str(tmp_path / "app.db"),
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def client(app_settings, resolver):
    app = create_app(app_settings)
    with TestClient(app) as test_client:
        app.state.review_service.resolver = resolver
        yield test_client


def make_row(**overrides):
    """Column values for inserting a book straight into the store."""
    row = {
        "title": "Dune",
        "author": "Frank Herbert",
        "rating": 9,
        "notes": "Spice must flow.",
        "date_read": "2023-05-05",
        "isbn": DEFAULT_ISBN,
    }
    row.update(overrides)
    return row
