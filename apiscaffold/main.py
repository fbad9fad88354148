"""
API Scaffold — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route discovery, dispatcher
       mounting and documentation generation in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn apiscaffold.main:app), the CLI and tests.
When:  Once at server startup; the returned app handles all requests.

Startup sequence (inside create_app):
    1. Discover route modules from settings.route_modules
    2. Create one store per discovered module
    3. Register middleware and exception handlers
    4. Mount the dispatcher under {API_PREFIX}/v1
    5. Generate the API document and mount the viewers (DOCS_ENABLED)

    Discovery and documentation both read the same RouteRegistry; neither
    calls the other. A documentation failure disables the docs routes but
    leaves the API running.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from apiscaffold import __version__
from apiscaffold.config import Settings, settings
from apiscaffold.core.discovery import RouteRegistry, discover_routes
from apiscaffold.core.dispatcher import API_VERSION, build_api_router, versioned_path
from apiscaffold.core.openapi import DocumentationGenerator
from apiscaffold.exceptions import ScaffoldError
from apiscaffold.middleware.errors import ErrorHandlingMiddleware, error_response
from apiscaffold.middleware.logging import RequestLoggingMiddleware
from apiscaffold.middleware.request_id import RequestIDMiddleware, request_id_var
from apiscaffold.middleware.security import SecurityHeadersMiddleware
from apiscaffold.routes.docs import build_docs_router, refresh_documentation
from apiscaffold.storage import MemoryStore, Store

logger = logging.getLogger(__name__)

PRETTY_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
COMPACT_FORMAT = "time=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(config: Settings) -> None:
    """
    Configure logging for the entire application.

    What:    Root logger level from LOG_LEVEL; a readable format when
             PRETTY_LOGGING is on, a single-line key=value format otherwise.
    When:    Once, before the application is created.
    """
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format=PRETTY_FORMAT if config.pretty_logging else COMPACT_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log where the API and its documentation can be reached."""
    config: Settings = app.state.settings
    base = f"http://localhost:{config.port}{config.api_prefix}"

    logger.info("=" * 60)
    logger.info("API Scaffold %s starting (%s)", __version__, config.environment)
    for name in app.state.registry.names:
        logger.info("  - %s%s", base, versioned_path(name, "/"))
    if app.state.docs_mounted:
        logger.info("API Documentation:")
        logger.info("  - Swagger UI:   %s/docs/swagger", base)
        logger.info("  - ReDoc:        %s/docs/redoc", base)
        logger.info("  - Scalar:       %s/docs/scalar", base)
        logger.info("  - OpenAPI JSON: %s/docs/api.json", base)
    logger.info("=" * 60)

    yield

    logger.info("API Scaffold shutting down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI, include_stack: bool) -> None:
    """
    Map exceptions to the standard error body.

    Handler hierarchy:
        ScaffoldError          → its status_code (400, 404, 422, 500)
        HTTPException          → its status (unknown route, wrong method)
        anything else          → ErrorHandlingMiddleware (500 or declared)
    """

    @app.exception_handler(ScaffoldError)
    async def handle_scaffold_error(request: Request, exc: ScaffoldError):
        return error_response(request, exc, include_stack)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "not_found" if exc.status_code == 404 else "http_error",
                "message": str(exc.detail),
                "request_id": rid,
            },
            headers=getattr(exc, "headers", None),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_stores(registry: RouteRegistry) -> Dict[str, Store]:
    """One in-memory store per module; handlers reach theirs via ctx.store()."""
    return {module.name: MemoryStore(module.name) for module in registry}


def create_app(
    config: Optional[Settings] = None,
    registry: Optional[RouteRegistry] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to build from; defaults to the process settings.
                Tests pass their own to get an isolated app and stores.
        registry: Prebuilt RouteRegistry to serve instead of discovering
                  config.route_modules.
    """
    config = config or settings

    # FastAPI's own docs are disabled: the document comes from the
    # DocumentationGenerator and is served by the docs router.
    app = FastAPI(
        title=config.docs_title,
        description=config.docs_description,
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = config

    # ── Route Discovery ───────────────────────────────────────────────────
    if registry is None:
        registry = discover_routes(config.route_modules, reload=config.is_development)
    app.state.registry = registry
    app.state.route_modules = list(config.route_modules)
    app.state.stores = create_stores(registry)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = outermost. Error handling is innermost so translated
    # errors still pass CORS, security headers and access logging.
    include_stack = not config.is_production
    app.add_middleware(ErrorHandlingMiddleware, include_stack=include_stack)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RequestLoggingMiddleware,
        quiet_paths={f"{config.api_prefix}{versioned_path('health', '/')}"},
    )
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app, include_stack)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(build_api_router(registry, prefix=config.api_prefix))

    # ── Documentation ─────────────────────────────────────────────────────
    app.state.docs_mounted = False
    app.state.openapi_document = None
    if config.docs_enabled:
        app.state.docs_generator = DocumentationGenerator(
            title=config.docs_title,
            description=config.docs_description,
            version=API_VERSION,
            server_url=config.api_prefix or "/",
        )
        try:
            refresh_documentation(app)
        except Exception:
            logger.error("API documentation disabled: generation failed", exc_info=True)
        else:
            app.include_router(
                build_docs_router(
                    config.api_prefix,
                    title=config.docs_title,
                    allow_refresh=config.is_development,
                )
            )
            app.state.docs_mounted = True

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `apiscaffold.main:app` to be importable
setup_logging(settings)
app = create_app()
