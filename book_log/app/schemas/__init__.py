"""
Pydantic schema definitions for form payloads and rendered records.

Schemas are kept apart from the SQLite rows in ``core.db`` so the
templates never depend on the storage layout.
"""
