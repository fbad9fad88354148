"""
API Scaffold — Request Logging Middleware
==========================================

What:  Logs each request on arrival and its response on completion.
Why:   Method, path, status and duration for every call, correlated by
       request ID.
How:   Explicit before/after hooks around the downstream call; the response
       object is never patched.

Log levels by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

What we log vs what we DON'T log:
    ✅ method, path, status, duration, client IP, request ID
    ❌ request bodies, Authorization headers
"""

import logging
import time
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from apiscaffold.middleware.request_id import request_id_var

logger = logging.getLogger("apiscaffold.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Args:
        quiet_paths: paths logged at DEBUG only (e.g. health probes that
                     run every few seconds)
    """

    def __init__(self, app: ASGIApp, quiet_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths or ())

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        self.before(request)
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000
        self.after(request, response, duration_ms)
        return response

    def before(self, request: Request) -> None:
        logger.debug("→ %s %s [%s]", request.method, request.url.path, request_id_var.get(""))

    def after(self, request: Request, response: Response, duration_ms: float) -> None:
        status = response.status_code
        path = request.url.path
        if path in self.quiet_paths:
            log_level = logging.DEBUG
        elif status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
