"""
Endpoint modules.  Each defines an ``APIRouter`` included by
``api/router.py``.
"""
