"""
API Scaffold — Error Translation
=================================

What:  Turns exceptions into the standard JSON error body.
Why:   One error format for every endpoint, without try/except in handlers.
How:   error_response() builds the body for any exception. main.py registers
       it as the FastAPI handler for ScaffoldError; ErrorHandlingMiddleware
       applies it to everything else that escapes the app.

Status mapping:
    ScaffoldError subclasses   → their status_code (400, 404, 422, ...)
    other exceptions           → their `status_code`/`status` attribute when
                                 it is an HTTP error code, else 500

Stack traces are included in the body outside production for 5xx
responses and for every exception that is not a ScaffoldError, whatever
status it declares; the full trace is always logged server-side.
"""

import logging
import traceback
from typing import Any, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from apiscaffold.exceptions import ScaffoldError, SchemaValidationError
from apiscaffold.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Internal Server Error"


def declared_status(exc: Exception) -> int:
    """HTTP status an exception asks for; 500 when it declares none."""
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and 400 <= value <= 599:
            return value
    return 500


def error_response(request: Request, exc: Exception, include_stack: bool) -> JSONResponse:
    """Build the JSON error response for `exc`."""
    rid = getattr(request.state, "request_id", "") or request_id_var.get("")
    status = declared_status(exc)

    body: Dict[str, Any]
    if isinstance(exc, ScaffoldError):
        body = {"error": exc.error_code, "message": exc.message}
        if isinstance(exc, SchemaValidationError):
            body["details"] = exc.violations
    else:
        message = str(exc) or GENERIC_MESSAGE
        if status >= 500 and not include_stack:
            # Production: internal exception text stays in the logs
            message = GENERIC_MESSAGE
        body = {"error": "internal_server_error" if status >= 500 else "error", "message": message}

    body["request_id"] = rid
    if include_stack and (status >= 500 or not isinstance(exc, ScaffoldError)):
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    _log(request, exc, status, rid)
    return JSONResponse(status_code=status, content=body)


def _log(request: Request, exc: Exception, status: int, rid: str) -> None:
    where = f"{request.method} {request.url.path}"
    if isinstance(exc, SchemaValidationError) and status < 500:
        if status == 422:
            # Already logged with route details by the dispatcher
            logger.debug("[%s] Response contract violation on %s", rid, where)
        else:
            logger.warning("[%s] Validation error on %s: %d violation(s)", rid, where, len(exc.violations))
    elif isinstance(exc, ScaffoldError) and status < 500:
        logger.info("[%s] %s on %s: %s", rid, exc.error_code, where, exc.message)
    else:
        logger.error(
            "[%s] %s %d - %s",
            rid,
            where,
            status,
            str(exc),
            exc_info=(type(exc), exc, exc.__traceback__),
        )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Process-wide error stage for exceptions no handler translated.

    Args:
        include_stack: put the stack trace in the body of 5xx responses and
                       of any exception no handler translated (non-production)
    """

    def __init__(self, app: ASGIApp, include_stack: bool = False):
        super().__init__(app)
        self.include_stack = include_stack

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return error_response(request, exc, self.include_stack)
