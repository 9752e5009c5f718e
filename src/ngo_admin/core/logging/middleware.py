"""Request logging middleware.

Logs every HTTP request with structlog and tags it with a request ID
that is echoed back in the ``X-Request-ID`` response header.
"""

import time
import uuid
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from ngo_admin.core.constants import USER_ID_HEADER


logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs HTTP requests and their outcome.

    Logs include the method, path, status code, duration, request ID and,
    when the upstream gateway supplied one, the caller's user ID.
    """

    def __init__(self, app: Any, exclude_paths: list[str] | None = None) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application
            exclude_paths: Path prefixes that are not logged (e.g. health checks)
        """
        super().__init__(app)
        self.exclude_paths = exclude_paths or [
            "/health/live",
            "/health/ready",
            "/docs",
            "/redoc",
            "/openapi.json",
        ]

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        start_time = time.perf_counter()
        log_data: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "request_id": request_id,
        }
        user_id = request.headers.get(USER_ID_HEADER)
        if user_id:
            log_data["user_id"] = user_id

        logger.info("request_started", **log_data)

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception(
                "request_failed",
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                error=str(exc),
                **log_data,
            )
            raise

        log_data["status_code"] = response.status_code
        log_data["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)

        if response.status_code >= 500:
            logger.error("request_completed", **log_data)
        elif response.status_code >= 400:
            logger.warning("request_completed", **log_data)
        else:
            logger.info("request_completed", **log_data)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
