"""FastAPI dependencies for caller identification and admin authentication."""

import hmac
import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from hookforge.application.api.v1.errors import error_body
from hookforge.config import Config

logger = logging.getLogger(__name__)

# auto_error=False: a missing header gets the same 403 as a wrong token
security = HTTPBearer(auto_error=False)


def get_client_ip(request: Request) -> str:
    """Best-effort client address, honouring reverse proxy headers.

    Checks the first X-Forwarded-For entry, then X-Real-IP, then the peer
    address of the connection.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client is not None:
        return request.client.host
    return ""


def get_config(request: Request) -> Config:
    return request.app.state.config


async def require_admin(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> None:
    """Reject the request unless it carries the configured admin bearer token.

    An unset admin token disables the admin API entirely.
    """
    admin_token = get_config(request).server.admin_token

    if (
        credentials is None
        or not admin_token
        or not hmac.compare_digest(credentials.credentials.encode(), admin_token.encode())
    ):
        logger.warning(
            "Admin authentication failed for %s from %s",
            request.url.path,
            get_client_ip(request),
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_body("admin_auth_required", "Admin authentication required"),
        )


AdminAuth = Depends(require_admin)
ClientIP = Annotated[str, Depends(get_client_ip)]
