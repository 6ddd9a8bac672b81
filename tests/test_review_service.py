"""
Tests for ReviewService: creation rules, sorting, updates and deletes.
"""

from datetime import date

import pytest

from book_log.app.core.errors import NotFoundError, ResolutionError, StoreError, ValidationError
from book_log.app.schemas.book import BookForm
from book_log.app.services.review_service import ReviewService, title_collation_key

from .conftest import DEFAULT_ISBN, StubResolver, make_row


def dune_form(**overrides):
    values = {
        "title": "Dune",
        "author": "Frank Herbert",
        "rating": "9",
        "notes": "Spice must flow.",
        "date_read": "2023-05-05",
    }
    values.update(overrides)
    return BookForm(**values)


@pytest.mark.asyncio
async def test_create_persists_input_and_resolved_isbn(service, store, resolver):
    book = await service.create_book(dune_form())

    assert book.id > 0
    assert book.title == "Dune"
    assert book.author == "Frank Herbert"
    assert book.rating == 9
    assert book.notes == "Spice must flow."
    assert book.date_read == date(2023, 5, 5)
    assert book.isbn == DEFAULT_ISBN
    assert book.cover_url == f"https://covers.openlibrary.org/b/isbn/{DEFAULT_ISBN}-M.jpg"
    assert resolver.calls == ["Dune"]
    assert store.count() == 1


@pytest.mark.asyncio
async def test_create_assigns_fresh_ids(service):
    first = await service.create_book(dune_form())
    await service.delete_book(first.id)
    second = await service.create_book(dune_form(title="Emma"))

    assert second.id > first.id


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "author", "rating", "notes", "date_read"])
@pytest.mark.parametrize("blank", [None, ""])
async def test_create_requires_every_field(service, store, resolver, field, blank):
    with pytest.raises(ValidationError) as excinfo:
        await service.create_book(dune_form(**{field: blank}))

    assert field in str(excinfo.value)
    assert store.count() == 0
    assert resolver.calls == []


@pytest.mark.asyncio
async def test_create_rejects_unresolved_title(store):
    service = ReviewService(store, StubResolver(isbn=None))

    with pytest.raises(ResolutionError):
        await service.create_book(dune_form(title="Dnue"))

    assert store.count() == 0


@pytest.mark.asyncio
async def test_create_without_isbn_when_not_required(store):
    service = ReviewService(store, StubResolver(isbn=None), require_isbn=False)

    book = await service.create_book(dune_form())

    assert book.isbn is None
    assert book.cover_url is None
    assert store.count() == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("rating", ["0", "11", "seven", "7.5"])
async def test_create_rating_outside_range_is_a_store_error(service, store, rating):
    with pytest.raises(StoreError):
        await service.create_book(dune_form(rating=rating))

    assert store.count() == 0


@pytest.mark.asyncio
async def test_create_malformed_date_is_a_store_error(service, store):
    with pytest.raises(StoreError):
        await service.create_book(dune_form(date_read="last tuesday"))

    assert store.count() == 0


@pytest.mark.asyncio
async def test_list_by_rating_highest_first(service, store):
    for rating in (3, 7, 1):
        store.insert(make_row(title=f"Book {rating}", rating=rating))

    books = await service.list_books("rating")

    assert [book.rating for book in books] == [7, 3, 1]


@pytest.mark.asyncio
async def test_list_by_title_ignores_case(service, store):
    for title in ("Beta", "alpha", "Gamma"):
        store.insert(make_row(title=title))

    books = await service.list_books("title")

    assert [book.title for book in books] == ["alpha", "Beta", "Gamma"]


@pytest.mark.asyncio
async def test_list_by_date_is_default_and_newest_first(service, store):
    for day in ("2020-01-01", "2023-05-05", "2021-06-06"):
        store.insert(make_row(date_read=day))

    expected = [date(2023, 5, 5), date(2021, 6, 6), date(2020, 1, 1)]
    assert [book.date_read for book in await service.list_books()] == expected
    assert [book.date_read for book in await service.list_books("date")] == expected
    assert [book.date_read for book in await service.list_books("bogus")] == expected


@pytest.mark.asyncio
async def test_list_rating_ties_keep_stored_order(service, store):
    for title in ("First", "Second", "Third"):
        store.insert(make_row(title=title, rating=8))

    books = await service.list_books("rating")

    assert [book.title for book in books] == ["First", "Second", "Third"]


def test_title_collation_key_folds_accents():
    titles = ["Zorro", "Éclair", "eclair", "apple"]
    assert sorted(titles, key=title_collation_key) == ["apple", "eclair", "Éclair", "Zorro"]


@pytest.mark.asyncio
async def test_get_missing_book_returns_none(service):
    assert await service.get_book(404) is None


@pytest.mark.asyncio
async def test_update_overwrites_fields_and_keeps_isbn(service, resolver):
    book = await service.create_book(dune_form())

    updated = await service.update_book(
        book.id,
        dune_form(title="Dune Messiah", rating="7", notes="Darker.", date_read="2024-01-02"),
    )

    assert updated.id == book.id
    assert updated.title == "Dune Messiah"
    assert updated.rating == 7
    assert updated.notes == "Darker."
    assert updated.date_read == date(2024, 1, 2)
    assert updated.isbn == DEFAULT_ISBN
    assert resolver.calls == ["Dune"]


@pytest.mark.asyncio
async def test_update_allows_empty_text(service):
    book = await service.create_book(dune_form())

    updated = await service.update_book(book.id, dune_form(notes=""))

    assert updated.notes == ""


@pytest.mark.asyncio
async def test_update_missing_book_raises_not_found(service):
    with pytest.raises(NotFoundError):
        await service.update_book(404, dune_form())


@pytest.mark.asyncio
async def test_update_rejected_by_store(service):
    book = await service.create_book(dune_form())

    with pytest.raises(StoreError):
        await service.update_book(book.id, dune_form(rating="42"))

    unchanged = await service.get_book(book.id)
    assert unchanged.rating == 9


@pytest.mark.asyncio
async def test_delete_twice_is_a_no_op_the_second_time(service, store):
    book = await service.create_book(dune_form())

    assert await service.delete_book(book.id) is True
    assert await service.delete_book(book.id) is False
    assert await service.get_book(book.id) is None
    assert store.count() == 0


@pytest.mark.asyncio
async def test_create_impossible_date_stores_nothing(service, store):
    with pytest.raises(StoreError):
        await service.create_book(dune_form(date_read="2021-02-29"))

    assert store.count() == 0
    assert await service.list_books() == []
