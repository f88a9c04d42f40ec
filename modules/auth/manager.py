import logging
from typing import Optional

from fastapi import Header, Request

from modules.shared.errors import AuthorizationError
from .utils import secret_matches

logger = logging.getLogger("auth.gate")

ADMIN_SECRET_HEADER = "X-Admin-Secret"


async def require_admin(
    request: Request,
    x_admin_secret: Optional[str] = Header(None, alias=ADMIN_SECRET_HEADER),
) -> None:
    """Let the request through only when the admin header equals the configured secret"""
    expected = request.app.state.settings.admin_secret
    if not secret_matches(x_admin_secret, expected):
        logger.warning(
            "Rejected %s %s: %s",
            request.method,
            request.url.path,
            "missing admin secret" if x_admin_secret is None else "admin secret mismatch",
        )
        raise AuthorizationError("Forbidden: invalid or missing admin secret.")
