"""
Service layer.

``review_service`` holds the reading-log logic and ``catalog_service``
the ISBN lookup it depends on.  Routes only talk to ``ReviewService``.
"""
