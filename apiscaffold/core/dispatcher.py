"""
API Scaffold — Dispatcher / Router Builder
===========================================

What:  Turns a RouteRegistry into a FastAPI APIRouter whose endpoints enforce
       each route's schemas.
Why:   Handlers only deal with validated input and plain return values;
       validation, serialization and error translation happen once, here.
How:   Every Route gets an adapter endpoint registered at
       {prefix}/{version}/{module}{path}.

Adapter flow (per request):
    ┌──────────┐   ┌───────────────────┐   ┌─────────┐   ┌────────────────┐
    │ Request  │──▶│ validate params,  │──▶│ handler │──▶│ validate return│──▶ 200
    └──────────┘   │ query, body       │   └─────────┘   │ + serialize    │
                   └─────────┬─────────┘        │        └───────┬────────┘
                             ▼                  ▼                ▼
                       400 (caller)      Response returned   422 (handler
                                         as-is (204, 404…)    broke contract)

    Exceptions other than validation errors propagate to the process-wide
    error handling registered by main.py.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi import APIRouter
from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from apiscaffold.core.discovery import RouteRegistry
from apiscaffold.core.routes import RequestContext, Route
from apiscaffold.core.schema import Schema
from apiscaffold.exceptions import (
    RequestValidationError,
    ResponseValidationError,
    SchemaValidationError,
)

logger = logging.getLogger(__name__)

# The single supported API version segment
API_VERSION = "v1"

# Returned by _read_json when the body is not JSON at all
_INVALID_JSON = object()


def versioned_path(module: str, path: str, version: str = API_VERSION) -> str:
    """
    Public path of a route below the API prefix.

    versioned_path("todos", "/")     → "/v1/todos"
    versioned_path("todos", "/{id}") → "/v1/todos/{id}"
    """
    suffix = path.rstrip("/")
    return f"/{version}/{module}{suffix}"


def build_api_router(registry: RouteRegistry, prefix: str = "") -> APIRouter:
    """
    Mount every registered route under `prefix` + versioned module path.

    Routes are excluded from FastAPI's own OpenAPI schema; documentation
    comes from the documentation generator instead.
    """
    router = APIRouter(prefix=prefix)
    for module in registry:
        for route in module.routes:
            full_path = versioned_path(module.name, route.path)
            router.add_api_route(
                full_path,
                build_endpoint(route, module.name),
                methods=[route.method],
                name=f"{module.name}.{route.handler.__name__}",
                include_in_schema=False,
            )
            logger.debug("Registered %s %s%s", route.method, prefix, full_path)
        logger.info("Mounted %s module at %s%s", module.name, prefix, versioned_path(module.name, "/"))

    logger.info("API router initialized with version %s", API_VERSION)
    return router


def build_endpoint(route: Route, module: str) -> Callable[[Request], Awaitable[Response]]:
    """Wrap `route.handler` in the validate → call → validate adapter."""
    schema = route.schema

    async def endpoint(request: Request) -> Response:
        ctx = RequestContext(request=request, module=module)
        violations: List[Dict[str, Any]] = []

        ctx.params = _validate_input(
            schema.params if schema else None, dict(request.path_params), "params", violations
        )
        ctx.query = _validate_input(
            schema.query if schema else None, dict(request.query_params), "query", violations
        )
        body_schema = schema.body if schema else None
        if body_schema is not None:
            raw_body = await _read_json(request, violations)
            if raw_body is not _INVALID_JSON:
                ctx.body = _validate_input(body_schema, raw_body, "body", violations)
        else:
            ctx.body = await _read_json_lenient(request)

        if violations:
            raise RequestValidationError(
                violations,
                context={"route": f"{route.method} {route.path}", "module": module},
            )

        result = await route.handler(ctx)

        # The handler already built its own response (204, 404, ...)
        if isinstance(result, Response):
            return result

        response_schema = schema.response if schema else None
        if response_schema is None:
            return JSONResponse(jsonable_encoder(result))

        try:
            validated = response_schema.validate(result)
        except SchemaValidationError as e:
            logger.error(
                "Response contract violated by %s %s (%s module): %s",
                route.method,
                route.path,
                module,
                e.violations,
            )
            raise ResponseValidationError(
                e.violations,
                context={"route": f"{route.method} {route.path}", "module": module},
            ) from e
        return JSONResponse(response_schema.dump(validated))

    endpoint.__name__ = route.handler.__name__
    endpoint.__doc__ = route.handler.__doc__
    return endpoint


def _validate_input(
    schema: Optional[Schema],
    raw: Any,
    location: str,
    violations: List[Dict[str, Any]],
) -> Any:
    if schema is None:
        return raw
    try:
        # Clients address fields by their wire name only
        return schema.validate(raw, by_name=False)
    except SchemaValidationError as e:
        violations.extend({"location": location, **v} for v in e.violations)
        return raw


async def _read_json(request: Request, violations: List[Dict[str, Any]]) -> Any:
    """Parsed JSON body; empty is None, malformed JSON is a violation + _INVALID_JSON."""
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        violations.append(
            {"location": "body", "field": "", "message": f"Invalid JSON: {e}", "type": "json_invalid"}
        )
        return _INVALID_JSON


async def _read_json_lenient(request: Request) -> Any:
    """Raw body for routes without a body schema; undecodable bodies are None."""
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
