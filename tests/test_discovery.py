"""
API Scaffold — Route Discovery Tests
=====================================

What:  Tests for route descriptors, RouteRegistry and discover_routes().
Why:   One broken module must never take the other modules down with it.
How:   Route modules are written into tmp_path by the write_module fixture
       and discovered by their import path.

Test Strategy:
    ✅ Default registration list loads health, todos, users in order
    ✅ Import errors, missing `routes`, malformed `routes` are skipped
    ✅ Duplicate module names: first wins, second is skipped
    ✅ Hot reload picks up edits on disk
"""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from apiscaffold.config import DEFAULT_ROUTE_MODULES
from apiscaffold.core.discovery import (
    RouteRegistry,
    discover_routes,
    load_routes,
    module_name_for,
)
from apiscaffold.core.routes import Route, RouteSchema
from apiscaffold.exceptions import DiscoveryError
from apiscaffold.main import create_app

GOOD_MODULE = """
from apiscaffold.core.routes import Route

async def ping(ctx):
    return {"pong": True}

routes = [Route(method="GET", path="/", handler=ping)]
"""

TWO_ROUTE_MODULE = """
from apiscaffold.core.routes import Route

async def ping(ctx):
    return {"pong": True}

async def echo(ctx):
    return ctx.body

routes = [
    Route(method="GET", path="/", handler=ping),
    Route(method="POST", path="/echo", handler=echo),
]
"""


async def _noop(ctx):
    return None


class TestRouteDescriptor:
    """Tests for Route and RouteSchema construction."""

    def test_method_is_uppercased(self):
        assert Route(method="get", path="/", handler=_noop).method == "GET"

    def test_unknown_method_rejected(self):
        with pytest.raises(ValueError, match="Unsupported HTTP method"):
            Route(method="FETCH", path="/", handler=_noop)

    def test_relative_path_rejected(self):
        with pytest.raises(ValueError, match="must start with '/'"):
            Route(method="GET", path="items", handler=_noop)

    def test_path_params(self):
        route = Route(method="GET", path="/{org}/members/{id}", handler=_noop)
        assert route.path_params == ["org", "id"]

    def test_tags_become_tuple(self):
        route = Route(method="GET", path="/", handler=_noop, tags=["A", "B"])
        assert route.tags == ("A", "B")

    def test_route_schema_wraps_models(self):
        from apiscaffold.core.schema import Schema
        from apiscaffold.modules.todos.schemas import Todo

        schema = RouteSchema(response=Todo)
        assert isinstance(schema.response, Schema)
        assert schema.body is None


class TestModuleNaming:
    @pytest.mark.parametrize(
        "import_path, expected",
        [
            ("apiscaffold.modules.todos.routes", "todos"),
            ("myapp.billing", "billing"),
            ("billing", "billing"),
            ("routes", "routes"),
        ],
    )
    def test_module_name_for(self, import_path, expected):
        assert module_name_for(import_path) == expected


class TestRouteRegistry:
    def test_register_and_lookup(self):
        registry = RouteRegistry()
        registry.register("ping", [Route(method="GET", path="/", handler=_noop)])
        assert "ping" in registry
        assert len(registry) == 1
        assert registry.get("ping").title == "Ping"
        assert registry.get("missing") is None

    def test_duplicate_name_rejected(self):
        registry = RouteRegistry()
        registry.register("ping", [], source="first")
        with pytest.raises(DiscoveryError, match="already registered"):
            registry.register("ping", [], source="second")
        assert registry.get("ping").source == "first"

    def test_routes_must_be_sequence_of_route(self):
        registry = RouteRegistry()
        with pytest.raises(DiscoveryError, match="not Route descriptors"):
            registry.register("bad", [{"method": "GET"}])
        with pytest.raises(DiscoveryError, match="must be a list or tuple"):
            registry.register("bad", "GET /")
        assert len(registry) == 0

    def test_iteration_keeps_registration_order(self):
        registry = RouteRegistry()
        for name in ("users", "health", "todos"):
            registry.register(name, [])
        assert registry.names == ["users", "health", "todos"]
        assert [m.name for m in registry] == ["users", "health", "todos"]


class TestDiscoverRoutes:
    def test_default_modules(self):
        registry = discover_routes(DEFAULT_ROUTE_MODULES)
        assert registry.names == ["health", "todos", "users"]
        assert registry.skipped == []
        assert len(registry.get("todos").routes) == 5

    @pytest.mark.asyncio
    async def test_malformed_module_is_skipped(self, write_module, make_settings, caplog):
        """One malformed module among N good ones: N load and serve, one skip is logged."""
        good_a = write_module("disc_good_a", GOOD_MODULE)
        good_b = write_module("disc_good_b", GOOD_MODULE)
        syntax = write_module("disc_syntax", "routes = [\n")
        missing = write_module("disc_missing", "handlers = []\n")
        wrong = write_module("disc_wrong", "routes = ['GET /']\n")

        with caplog.at_level(logging.WARNING, logger="apiscaffold.core.discovery"):
            registry = discover_routes([good_a, syntax, missing, wrong, good_b])

        assert registry.names == ["disc_good_a", "disc_good_b"]
        assert sorted(e.module for e in registry.skipped) == sorted([syntax, missing, wrong])
        skip_logs = [r for r in caplog.records if "Skipping route module" in r.getMessage()]
        assert len(skip_logs) == 3

        app = create_app(make_settings(docs_enabled=False), registry=registry)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
            for name in registry.names:
                response = await ac.get(f"/api/v1/{name}")
                assert response.status_code == 200
                assert response.json() == {"pong": True}

    def test_unimportable_path_is_skipped(self):
        registry = discover_routes(["apiscaffold.modules.health.routes", "no_such_module_here"])
        assert registry.names == ["health"]
        assert registry.skipped[0].context["error_type"] == "ModuleNotFoundError"

    def test_duplicate_module_name_first_wins(self, write_module):
        # Both paths resolve to "health": the package module loads, the other is skipped
        second = write_module("health", TWO_ROUTE_MODULE)
        registry = discover_routes(["apiscaffold.modules.health.routes", second])
        assert registry.get("health").source == "apiscaffold.modules.health.routes"
        assert [e.module for e in registry.skipped] == ["health"]

    def test_missing_routes_attribute(self, write_module):
        name = write_module("disc_no_routes", "x = 1\n")
        with pytest.raises(DiscoveryError, match="does not export"):
            load_routes(name)


class TestHotReload:
    def test_reload_picks_up_edits(self, write_module):
        name = write_module("disc_reloadable", GOOD_MODULE)
        assert len(discover_routes([name]).get(name).routes) == 1

        write_module(name, TWO_ROUTE_MODULE)

        # Without reload the cached module is reused
        assert len(discover_routes([name]).get(name).routes) == 1
        # With reload the file is executed again
        assert len(discover_routes([name], reload=True).get(name).routes) == 2

    def test_reload_of_broken_edit_is_skipped(self, write_module):
        name = write_module("disc_breaks", GOOD_MODULE)
        discover_routes([name])

        write_module(name, "raise RuntimeError('half-saved file')\n")
        registry = discover_routes([name], reload=True)
        assert len(registry) == 0
        assert "half-saved file" in registry.skipped[0].message
