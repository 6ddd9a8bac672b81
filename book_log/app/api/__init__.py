"""
HTTP layer.

``router`` aggregates the endpoint modules under ``endpoints``;
``deps`` holds the dependencies they share (service lookup, form
parsing, templates).
"""
