"""Request logging middleware."""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("kitchencogs.api")

# Probed every few seconds by the host; logged at DEBUG only
QUIET_PATHS = {"/health", "/health/ready"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with a short request ID and its duration.

    The ID is echoed in `X-Request-ID` and in error envelopes so a
    support message can be matched to a log line.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request.state.request_id = request_id

        path = request.url.path
        quiet = path in QUIET_PATHS
        client = request.client.host if request.client else "-"

        start_time = time.perf_counter()
        logger.log(
            logging.DEBUG if quiet else logging.INFO,
            f"[{request_id}] {request.method} {path} from {client} - Started"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"[{request_id}] {request.method} {path} - "
                f"Error after {duration:.2f}ms: {str(e)}"
            )
            raise

        duration = (time.perf_counter() - start_time) * 1000

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = f"{duration:.2f}"

        if response.status_code >= 400:
            log_level = logging.WARNING
        elif quiet:
            log_level = logging.DEBUG
        else:
            log_level = logging.INFO
        logger.log(
            log_level,
            f"[{request_id}] {request.method} {path} - "
            f"{response.status_code} in {duration:.2f}ms"
        )

        return response


def get_request_id(request: Request) -> str:
    """Get the request ID from the current request."""
    return getattr(request.state, "request_id", "unknown")
