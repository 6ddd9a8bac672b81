"""
Error kinds raised by the service layer.

Routes translate them into HTTP responses: validation and resolution
failures become ``400``, a missing record ``404`` and a store failure a
generic ``500``.
"""


class BookLogError(Exception):
    """Base class for all book log errors."""


class ValidationError(BookLogError):
    """A required field was missing from a new book."""


class ResolutionError(BookLogError):
    """No ISBN could be found for the given title."""


class NotFoundError(BookLogError):
    """No book exists with the requested id."""


class StoreError(BookLogError):
    """The database rejected or failed an operation."""
