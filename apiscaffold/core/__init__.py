# Core package init
"""
API Scaffold — Core
====================

What:  The route-registration, validation and documentation pipeline.

    schema.py      Schema: one declaration → validate() + describe()
    routes.py      Route / RouteSchema descriptors, RequestContext
    discovery.py   registration list → RouteRegistry
    dispatcher.py  RouteRegistry → FastAPI APIRouter with validation adapters
    openapi.py     RouteRegistry → OpenAPI document
"""

from apiscaffold.core.routes import RequestContext, Route, RouteSchema
from apiscaffold.core.schema import ApiModel, Schema

__all__ = ["ApiModel", "RequestContext", "Route", "RouteSchema", "Schema"]
