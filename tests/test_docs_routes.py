"""
API Scaffold — Documentation Routes Tests
==========================================

What:  Tests for /api/docs/* and how documentation failures are contained.
Why:   A broken document must disable the viewers, never the API.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from apiscaffold.core.openapi import DocumentationGenerator
from apiscaffold.main import create_app

DOCS = "/api/docs"


def _client(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


class TestDocumentRoute:
    @pytest.mark.asyncio
    async def test_api_json(self, app, client):
        response = await client.get(f"{DOCS}/api.json")
        assert response.status_code == 200
        document = response.json()
        assert document["openapi"] == "3.1.0"
        assert document == app.state.openapi_document
        assert "/v1/todos" in document["paths"]

    @pytest.mark.asyncio
    async def test_refresh_ignored_outside_development(self, app, client, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "apiscaffold.routes.docs.refresh_documentation",
            lambda *args, **kwargs: calls.append(args),
        )
        response = await client.get(f"{DOCS}/api.json", params={"refresh": "true"})
        assert response.status_code == 200
        assert calls == []

    @pytest.mark.asyncio
    async def test_refresh_in_development(self, make_settings):
        app = create_app(make_settings(environment="development"))
        before = app.state.openapi_document
        async with _client(app) as client:
            response = await client.get(f"{DOCS}/api.json", params={"refresh": "true"})
        assert response.status_code == 200
        assert response.json() == before
        assert app.state.openapi_document is not before


class TestViewers:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("viewer", ["swagger", "redoc", "scalar"])
    async def test_viewer_points_at_document(self, client, viewer):
        response = await client.get(f"{DOCS}/{viewer}")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert f"{DOCS}/api.json" in response.text


class TestDocsDisabled:
    @pytest.mark.asyncio
    async def test_docs_disabled(self, make_settings):
        app = create_app(make_settings(docs_enabled=False))
        async with _client(app) as client:
            assert (await client.get(f"{DOCS}/api.json")).status_code == 404
            assert (await client.get("/api/v1/health")).status_code == 200
        assert app.state.docs_mounted is False

    @pytest.mark.asyncio
    async def test_generation_failure_keeps_api_running(self, make_settings, monkeypatch, caplog):
        def fail(self, registry):
            raise RuntimeError("document exploded")

        monkeypatch.setattr(DocumentationGenerator, "generate", fail)
        app = create_app(make_settings())

        assert app.state.docs_mounted is False
        assert "API documentation disabled" in caplog.text
        async with _client(app) as client:
            assert (await client.get(f"{DOCS}/swagger")).status_code == 404
            assert (await client.get("/api/v1/health")).status_code == 200
