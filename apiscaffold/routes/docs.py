"""
API Scaffold — Documentation Routes
====================================

What:  Serves the generated API document and three viewers for it.
Why:   Different readers prefer different renderings; all three fetch the
       same JSON document.
When:  Mounted only when DOCS_ENABLED is true.

Routes (below API_PREFIX):
    GET /docs/api.json   the OpenAPI document (?refresh=true regenerates it
                         with hot reload, development only)
    GET /docs/swagger    Swagger UI
    GET /docs/redoc      ReDoc
    GET /docs/scalar     Scalar API reference
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.openapi.docs import get_redoc_html, get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse

from apiscaffold.core.discovery import discover_routes

logger = logging.getLogger(__name__)

SCALAR_HTML = """<!DOCTYPE html>
<html>
  <head>
    <title>{title}</title>
    <meta charset="utf-8"/>
    <meta name="viewport" content="width=device-width, initial-scale=1">
  </head>
  <body>
    <script id="api-reference" data-url="{spec_url}" data-configuration='{configuration}'></script>
    <script src="https://cdn.jsdelivr.net/npm/@scalar/api-reference"></script>
  </body>
</html>
"""

SCALAR_CONFIGURATION = {
    "layout": "modern",
    "defaultOpenAllTags": False,
    "hideDownloadButton": False,
    "theme": "default",
}


def refresh_documentation(app: FastAPI, reload: bool = False) -> Dict[str, Any]:
    """
    Regenerate the cached API document.

    With reload=True the route modules are rediscovered (and re-imported)
    first, so edits on disk show up in the document. The live router keeps
    the routes it was built with.
    """
    registry = app.state.registry
    if reload:
        registry = discover_routes(app.state.route_modules, reload=True)
    document = app.state.docs_generator.generate(registry)
    app.state.openapi_document = document
    return document


def build_docs_router(prefix: str, title: str, allow_refresh: bool = False) -> APIRouter:
    router = APIRouter(prefix=f"{prefix}/docs", include_in_schema=False)
    spec_url = f"{prefix}/docs/api.json"

    @router.get("/api.json")
    async def openapi_document(
        request: Request,
        refresh: bool = Query(default=False),
    ) -> JSONResponse:
        if refresh and allow_refresh:
            logger.info("Regenerating API documentation on request")
            return JSONResponse(refresh_documentation(request.app, reload=True))
        return JSONResponse(request.app.state.openapi_document)

    @router.get("/swagger")
    async def swagger_ui() -> HTMLResponse:
        return get_swagger_ui_html(
            openapi_url=spec_url,
            title=f"{title} - Swagger UI",
            swagger_ui_parameters={"persistAuthorization": True},
        )

    @router.get("/redoc")
    async def redoc() -> HTMLResponse:
        return get_redoc_html(openapi_url=spec_url, title=f"{title} - ReDoc")

    @router.get("/scalar")
    async def scalar() -> HTMLResponse:
        return HTMLResponse(
            SCALAR_HTML.format(
                title=title,
                spec_url=spec_url,
                configuration=json.dumps(SCALAR_CONFIGURATION),
            )
        )

    return router
