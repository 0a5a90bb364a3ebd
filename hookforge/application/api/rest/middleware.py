"""Request logging middleware."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hookforge.application.api.v1.deps import get_client_ip

logger = logging.getLogger("hookforge.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request with client IP, status and duration.

    Completion is logged at ERROR for 5xx, WARNING for 4xx, INFO otherwise.
    Query strings are not logged since webhook tokens travel there.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        client_ip = get_client_ip(request)
        method, path = request.method, request.url.path

        logger.info("Request started: %s %s ip=%s", method, path, client_ip)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start) * 1000
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        logger.log(
            level,
            "Request completed: %s %s ip=%s status=%d size=%s duration_ms=%.1f",
            method,
            path,
            client_ip,
            response.status_code,
            response.headers.get("content-length", "-"),
            duration_ms,
        )
        return response
