"""
API Scaffold — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the validation pipeline, handlers
       and module loading.
Why:   Each exception carries its HTTP status and a machine-readable error
       code, so one global handler can translate all of them consistently.
How:   Every class stores a message and an optional context dict.
       ScaffoldError subclasses are translated by the handler registered in
       main.py; any other exception falls through to ErrorHandlingMiddleware.

Exception Hierarchy:
    ScaffoldError (base)                 → 500
    ├── SchemaValidationError            (raised by Schema.validate, not HTTP)
    │   ├── RequestValidationError       → 400 Bad Request (caller's input)
    │   └── ResponseValidationError      → 422 (handler broke its own contract)
    ├── NotFoundError                    → 404 Not Found
    └── DiscoveryError                   (module skipped during discovery)
"""

from typing import Any, Dict, List, Optional


class ScaffoldError(Exception):
    """
    Base exception for all scaffold errors.

    Attributes:
        message:      Client-facing description
        context:      Extra debug info (logged, returned as `details` only
                      by the validation errors)
        status_code:  HTTP status used when this reaches the error handler
        error_code:   Machine-readable `error` field of the response body
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class SchemaValidationError(ScaffoldError):
    """
    A value did not satisfy a Schema.

    `violations` is a list of {"field", "message", "type"} dicts, one per
    failing field; "field" is a dotted path using wire (alias) names.
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        violations: List[Dict[str, Any]],
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.violations = violations


class RequestValidationError(SchemaValidationError):
    """
    Caller-supplied params, query or body failed its schema.

    HTTP: 400 Bad Request. Each violation also names its `location`
    (params, query or body). Not a system fault; logged at WARNING.
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        violations: List[Dict[str, Any]],
        message: str = "Request validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(violations=violations, message=message, context=context)


class ResponseValidationError(SchemaValidationError):
    """
    A handler returned data that violates its declared response schema.

    HTTP: 422. This is an implementation bug rather than a caller mistake,
    so it is logged at ERROR with the route that produced it.
    """

    status_code = 422
    error_code = "response_validation_error"

    def __init__(
        self,
        violations: List[Dict[str, Any]],
        message: str = "Response failed schema validation",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(violations=violations, message=message, context=context)


class NotFoundError(ScaffoldError):
    """
    Raised by handlers when a looked-up resource does not exist.

    HTTP: 404 Not Found. The dispatcher never infers this on its own.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        message: str = "Resource not found",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DiscoveryError(ScaffoldError):
    """
    A route module could not be loaded or does not export a valid
    `routes` sequence. Discovery logs it and moves on to the next module.
    """

    def __init__(
        self,
        module: str,
        message: str = "Route module could not be loaded",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["module"] = module
        super().__init__(message=message, context=ctx)
        self.module = module
