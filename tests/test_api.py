"""Tests for the definitions HTTP service (bundled definitions)."""

import pytest
from fastapi.testclient import TestClient

from uicp.api.main import app
from uicp.api.routes import meta
from uicp.blocks.extractor import format_block


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["service"] == "UICP API"


def test_health(client):
    body = client.get("/v1/meta/health").json()
    assert body["status"] == "healthy"
    assert body["components"] == 2


class TestComponentRoutes:
    def test_list_components(self, client):
        body = client.get("/v1/components").json()
        assert body["success"] is True
        assert [c["uid"] for c in body["components"]] == ["SimpleCard", "DataTable"]
        assert "componentPath" not in body["components"][0]

    def test_filter_by_type(self, client):
        body = client.get("/v1/components", params={"component_type": "table"}).json()
        assert [c["uid"] for c in body["components"]] == ["DataTable"]

    def test_unknown_type(self, client):
        body = client.get("/v1/components", params={"component_type": "chart"}).json()
        assert body["success"] is False
        assert body["available_types"] == ["card", "table"]

    def test_get_component(self, client):
        body = client.get("/v1/components/SimpleCard").json()
        assert body["inputs"]["variant"]["enum"][0] == "default"

    def test_get_unknown_component(self, client):
        response = client.get("/v1/components/Chart")
        assert response.status_code == 404

    def test_tools(self, client):
        names = [tool["name"] for tool in client.get("/v1/components/tools").json()]
        assert names == ["get_ui_components", "create_ui_component"]

    def test_create_component(self, client):
        response = client.post(
            "/v1/components/create",
            json={"uid": "SimpleCard", "data": {"title": "T", "content": "C"}},
        )
        body = response.json()
        assert body["success"] is True
        assert body["uicp_block"].startswith("```uicp\n")

    def test_create_missing_fields(self, client):
        body = client.post(
            "/v1/components/create", json={"uid": "SimpleCard", "data": {"title": "T"}}
        ).json()
        assert body["success"] is False
        assert body["missing_fields"] == ["content"]


class TestBlockRoutes:
    def test_extract(self, client):
        content = "Look:\n" + format_block("SimpleCard", {"title": "T"}) + "\n```uicp\n{"
        body = client.post("/v1/blocks/extract", json={"content": content}).json()
        assert body["has_blocks"] is True
        assert body["blocks"] == [{"uid": "SimpleCard", "data": {"title": "T"}}]
        assert body["text"] == "Look:\n__UICP_BLOCK_0__"

    def test_validate(self, client):
        body = client.post(
            "/v1/blocks/validate",
            json={"uid": "SimpleCard", "data": {"title": "T", "variant": "loud"}},
        ).json()
        assert body["valid"] is False
        assert body["errors"] == [
            "Missing required field: content",
            "Invalid value for variant: must be one of default, info, success, warning, error",
        ]


class TestMetaRoutes:
    def test_cache_stats_and_clear(self, client):
        client.get("/v1/components")
        stats = client.get("/v1/meta/cache").json()
        assert stats["entries"] == [meta.get_definitions_source()]

        assert client.delete("/v1/meta/cache").json() == {"cleared": "all"}
        assert client.get("/v1/meta/cache").json()["size"] == 0

    def test_unavailable_definitions(self, client, monkeypatch, tmp_path):
        monkeypatch.setattr(meta, "DEFINITIONS_SOURCE", str(tmp_path / "gone.json"))
        response = client.get("/v1/components/SimpleCard")
        assert response.status_code == 502

    def test_undecodable_definitions(self, client, monkeypatch, tmp_path):
        path = tmp_path / "defs.json"
        path.write_bytes(b"\xff\xfe{}")
        monkeypatch.setattr(meta, "DEFINITIONS_SOURCE", str(path))
        response = client.get("/v1/meta/health")
        assert response.status_code == 502
