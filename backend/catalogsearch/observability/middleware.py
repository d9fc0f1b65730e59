"""Request correlation and HTTP metrics middleware"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import get_logger
from .metrics import http_request_duration_seconds, http_requests_total
from .request_id import generate_request_id, set_request_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _route_label(request: Request) -> str:
    # Template path keeps label cardinality bounded; unmatched paths share one label
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Adopts or generates a request id, logs and measures each request.

    The id from an incoming X-Request-ID header is reused so that log lines
    can be joined with the caller's. Streaming chat responses are measured up
    to the point the headers go out, not until the stream ends.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{request.method} {request.url.path} failed: {e}",
                extra={"method": request.method, "path": request.url.path, "error_type": type(e).__name__},
                exc_info=True,
            )
            http_requests_total.labels(method=request.method, route=_route_label(request), status_code="500").inc()
            raise

        elapsed = time.perf_counter() - started
        route = _route_label(request)
        http_requests_total.labels(method=request.method, route=route, status_code=str(response.status_code)).inc()
        http_request_duration_seconds.labels(method=request.method, route=route).observe(elapsed)
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(elapsed * 1000, 2),
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
