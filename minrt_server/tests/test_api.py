"""Tests for FastAPI endpoints (no LLM calls)."""

import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from conftest import BASE_SLD
from minrt_server.main import app
from minrt_server.services import llm_service

client = TestClient(app)


class TestHealthEndpoint:
    def test_health(self, fake_tools):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["renderer"] is True
        assert data["converter"] is True
        assert "claude" in data["providers"]


class TestValidateEndpoint:
    def test_valid_scene(self, scene_data):
        resp = client.post("/api/validate", json={"scene_json": json.dumps(scene_data)})
        assert resp.status_code == 200
        data = resp.json()
        assert data["valid"] is True
        assert data["object_count"] == 2

    def test_invalid_scene(self, scene_data):
        scene_data["lights"] = []
        resp = client.post("/api/validate", json={"scene_json": json.dumps(scene_data)})
        assert resp.status_code == 200
        data = resp.json()
        assert data["valid"] is False
        assert "lights" in data["error"]


class TestCompileEndpoint:
    def test_compile(self, scene_data):
        resp = client.post("/api/compile", json=scene_data)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == BASE_SLD

    def test_schema_violation(self, scene_data):
        scene_data["objects"][0]["shape"] = "Torus"
        resp = client.post("/api/compile", json=scene_data)
        assert resp.status_code == 422
        data = resp.json()
        assert data["error"] == "SchemaViolation"
        assert "objects.0.shape" in data["detail"]

    def test_unresolved_reference(self, scene_data):
        scene_data["and_nets"] = [["floor"], ["ghost"]]
        resp = client.post("/api/compile", json=scene_data)
        assert resp.status_code == 422
        data = resp.json()
        assert data["error"] == "UnresolvedReferenceError"
        assert "AND-net 1" in data["detail"]


class TestRenderEndpoints:
    def test_render_and_fetch(self, fake_tools, scene_data):
        resp = client.post("/api/render", json={"name": "ball", "content": scene_data})
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert resp.content.startswith(b"PNG:")

        assert client.get("/api/scenes").json() == ["ball"]

        source = client.get("/api/scenes/ball")
        assert source.status_code == 200
        assert source.json()["objects"][0]["name"] == "floor"

        image = client.get("/api/images/ball")
        assert image.status_code == 200
        assert image.content == resp.content

    def test_render_failure(self, failing_renderer, scene_data):
        resp = client.post("/api/render", json={"name": "ball", "content": scene_data})
        assert resp.status_code == 502
        assert resp.json()["error"] == "RenderError"

    def test_render_invalid_content(self, fake_tools, scene_data):
        del scene_data["camera_angle"]
        resp = client.post("/api/render", json={"name": "ball", "content": scene_data})
        assert resp.status_code == 422
        assert "content.camera_angle" in resp.json()["detail"]

    def test_missing_image(self, fake_tools):
        resp = client.get("/api/images/nothing")
        assert resp.status_code == 404
        assert resp.json()["error"] == "ArtifactNotFoundError"

    def test_render_unwritable_name(self, fake_tools, scene_data):
        resp = client.post("/api/render", json={"name": "a" * 300, "content": scene_data})
        assert resp.status_code == 502
        assert resp.json()["error"] == "RenderError"


class TestOpenApi:
    def test_error_body_documented(self):
        schema = client.get("/openapi.json").json()
        assert "ErrorResponse" in schema["components"]["schemas"]
        responses = schema["paths"]["/api/render"]["post"]["responses"]
        assert responses["502"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/ErrorResponse"
        }


class TestExamplesEndpoint:
    def test_examples(self):
        resp = client.get("/api/examples")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) >= 3
        assert "ball" in [ex["name"] for ex in data]
        for ex in data:
            assert "prompt" in ex
            assert "scene" in ex


class TestAgentEndpoint:
    def test_agent(self, monkeypatch):
        async def create(**kwargs):
            return SimpleNamespace(
                content=[SimpleNamespace(type="text", text="Nothing to render.")],
                stop_reason="end_turn",
            )

        fake = SimpleNamespace(messages=SimpleNamespace(create=create))
        monkeypatch.setattr(llm_service, "_claude_client", fake)

        resp = client.post("/api/agent", json={"prompt": "New Year scenery"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["text"] == "Nothing to render."
        assert data["turns"] == 1
        assert data["rendered"] == []

    def test_agent_rejects_bad_turns(self):
        resp = client.post("/api/agent", json={"prompt": "x", "max_turns": 0})
        assert resp.status_code == 422

    def test_agent_requires_prompt_or_theme(self):
        resp = client.post("/api/agent", json={})
        assert resp.status_code == 422
        assert resp.json()["error"] == "SchemaViolation"
