"""
Shared-secret guard for the routes that change data.

The book log has a single owner, so there are no user accounts.
Instead every POST route depends on :func:`require_admin`, which
compares the secret sent with the request against
``settings.admin_password``.  Browsers send it as the
``admin_password`` field of the add/edit/delete forms; scripts may use
the ``X-Admin-Password`` header instead.

The check happens on the server.  A password prompt rendered into the
page alone would not protect anything, since any direct POST skips it.
"""

import hmac
import logging
from typing import Optional

from fastapi import Form, Header, HTTPException, Request, status

logger = logging.getLogger(__name__)


def check_admin_password(expected: str, supplied: Optional[str]) -> bool:
    """Return ``True`` if ``supplied`` matches the configured secret.

    An empty ``expected`` value means the guard is disabled.  The
    comparison is constant-time.
    """
    if not expected:
        return True
    if supplied is None:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


async def require_admin(
    request: Request,
    admin_password: Optional[str] = Form(None),
    x_admin_password: Optional[str] = Header(None),
) -> None:
    """Dependency rejecting requests without the admin secret with 403."""
    expected = request.app.state.settings.admin_password
    supplied = x_admin_password if x_admin_password is not None else admin_password
    if not check_admin_password(expected, supplied):
        logger.warning("Rejected %s %s: invalid admin password", request.method, request.url.path)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin password",
        )
