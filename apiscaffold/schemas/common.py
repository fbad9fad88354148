"""
API Scaffold — Shared Response Schemas
=======================================

What:  Models shared by every module: the error envelope and its violation
       entries.
Why:   Clients need one error structure to parse programmatically, and the
       documentation generator references it from every operation's 400/404.

Example error body:
    {
        "error": "validation_error",
        "message": "Request validation failed",
        "details": [
            {"location": "body", "field": "email", "message": "Field required", "type": "missing"}
        ],
        "request_id": "a1b2c3d4"
    }
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class Violation(BaseModel):
    """One field-level validation failure."""

    location: Optional[str] = Field(default=None, description="params, query or body")
    field: str = Field(description="Dotted path of the failing field ('' for the whole value)")
    message: str = Field(description="Human-readable reason")
    type: str = Field(description="Machine-readable error type, e.g. 'missing'")


class ErrorResponse(BaseModel):
    """Standardized error response format for all API errors."""

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Union[List[Violation], Dict[str, Any]]] = Field(
        default=None, description="Field-level violations or additional context"
    )
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
    stack: Optional[str] = Field(default=None, description="Stack trace (non-production only)")
