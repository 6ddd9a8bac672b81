"""
Pydantic schemas for book records.

``BookForm`` carries the raw values posted by the add and edit forms.
Every field is optional because presence is checked by the service
layer, which reports all missing fields in one error.  ``BookRead`` is
what the templates render: a stored record plus its cover image URL.
"""

from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class BookForm(BaseModel):
    """Values submitted when creating or editing a book."""

    title: Optional[str] = Field(None, description="Title as typed by the reader")
    author: Optional[str] = Field(None, description="Author name")
    rating: Optional[str] = Field(None, description="Rating from 1 to 10")
    notes: Optional[str] = Field(None, description="Free-text notes")
    date_read: Optional[str] = Field(None, description="Date finished, YYYY-MM-DD")

    def missing_fields(self) -> list[str]:
        """Names of fields that are absent or empty."""
        return [name for name, value in self.model_dump().items() if not value]

    def to_fields(self) -> Dict[str, Any]:
        """Column values for the store, with a numeric rating where possible."""
        fields = self.model_dump()
        rating = fields["rating"]
        if rating is not None:
            try:
                fields["rating"] = int(rating)
            except ValueError:
                # Left as text; the store's CHECK constraint rejects it.
                pass
        return fields


class BookRead(BaseModel):
    """A stored book as shown on the index and edit pages."""

    id: int
    title: str
    author: str
    rating: int
    notes: str
    date_read: date
    isbn: Optional[str] = None
    cover_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
