"""
API Scaffold — Route Descriptors
=================================

What:  The declarative record a module exports for each HTTP operation,
       and the context object its handler receives.
Why:   Modules describe endpoints as data; the dispatcher and the
       documentation generator interpret that data independently.

Example (a module's routes.py):

    async def get_todo(ctx: RequestContext):
        todo = await ctx.store().get(ctx.params.id)
        if todo is None:
            raise NotFoundError("Todo not found")
        return todo

    routes = [
        Route(
            method="GET",
            path="/{id}",
            handler=get_todo,
            schema=RouteSchema(params=TodoParams, response=Todo),
            summary="Get todo",
        ),
    ]
"""

import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from starlette.requests import Request

from apiscaffold.core.schema import Schema, as_schema
from apiscaffold.storage.base import Store

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"})

# `{id}` and `{path:path}` style template parameters
PATH_PARAM_PATTERN = re.compile(r"\{(\w+)(?::\w+)?\}")


@dataclass(frozen=True)
class RouteSchema:
    """
    Optional schemas of one route.

    Each slot accepts a Schema or anything `as_schema` understands
    (a pydantic model class, List[Model], ...).
    """

    body: Optional[Schema] = None
    query: Optional[Schema] = None
    params: Optional[Schema] = None
    response: Optional[Schema] = None

    def __post_init__(self):
        for slot in ("body", "query", "params", "response"):
            object.__setattr__(self, slot, as_schema(getattr(self, slot)))


@dataclass(frozen=True)
class Route:
    """
    One HTTP operation: method, path template, handler, schemas, doc metadata.

    `path` is relative to the module mount point; "/" is the module root.
    """

    method: str
    path: str
    handler: Callable[["RequestContext"], Awaitable[Any]]
    schema: Optional[RouteSchema] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: Tuple[str, ...] = ()

    def __post_init__(self):
        method = self.method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method '{self.method}'")
        if not self.path.startswith("/"):
            raise ValueError(f"Route path must start with '/': {self.path!r}")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def path_params(self) -> List[str]:
        return PATH_PARAM_PATTERN.findall(self.path)


@dataclass
class RequestContext:
    """
    What a handler sees for one request.

    params/query/body hold validated values when the route declares the
    matching schema, the raw values otherwise (dict, dict, parsed JSON).
    """

    request: Request
    module: str
    params: Any = None
    query: Any = None
    body: Any = None

    def store(self, name: Optional[str] = None) -> Store:
        """The store injected for `name`, defaulting to this route's module."""
        stores = self.request.app.state.stores
        return stores[name or self.module]
