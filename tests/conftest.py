"""
API Scaffold — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every API test gets its own application instance, so the in-memory
       stores never leak records from one test into the next.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.
When:  Fixtures are created per-test.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── make_settings: Settings factory with test defaults
    ├── app:           Application built from the default route modules
    ├── client:        HTTPX AsyncClient bound to `app`
    └── write_module:  Writes importable route modules into tmp_path
"""

import importlib
import os
import sys
import textwrap
from typing import AsyncGenerator

# Override settings for testing BEFORE any app imports
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["DOCS_ENABLED"] = "true"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from apiscaffold.config import Settings
from apiscaffold.main import create_app

BASE_URL = "http://testserver"


@pytest.fixture
def make_settings():
    """
    Build Settings without reading a .env file.

    Usage:
        def test_prod(make_settings):
            config = make_settings(environment="production")
    """

    def factory(**overrides) -> Settings:
        values = {"environment": "test", "log_level": "WARNING"}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return factory


@pytest.fixture
def app(make_settings):
    """A fresh application (and fresh stores) per test."""
    return create_app(make_settings())


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an async HTTP client for API endpoint testing.

    Uses ASGITransport, so no real server is started.
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as ac:
        yield ac


@pytest.fixture
def write_module(tmp_path, monkeypatch):
    """
    Write a top-level Python module into tmp_path and make it importable.

    Returns the module name. Modules are dropped from sys.modules at
    teardown so each test imports its own version.
    """
    monkeypatch.syspath_prepend(str(tmp_path))
    # Rewrites within one second must not be served from a stale .pyc
    monkeypatch.setattr(sys, "dont_write_bytecode", True)
    written = []

    def write(name: str, source: str) -> str:
        (tmp_path / f"{name}.py").write_text(textwrap.dedent(source), encoding="utf-8")
        written.append(name)
        importlib.invalidate_caches()
        return name

    yield write

    for name in written:
        sys.modules.pop(name, None)
