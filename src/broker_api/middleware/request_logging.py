"""Access logging middleware.

Logs method, path, status and duration for every request. Request bodies are
never logged since verification requests carry signatures.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from broker.utils.logging import get_logger

logger = get_logger("broker_api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs one line per request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response
