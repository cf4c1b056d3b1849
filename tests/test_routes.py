"""HTTP surface of the backend: ``/api/ai``, root and health."""

from __future__ import annotations

import pytest

from classroom_backend.domain.exceptions import EmptyCompletionError


class TestAiEndpoint:
    def test_returns_completion_as_data(self, client, fake_completion):
        resp = client.post("/api/ai", json={"prompt": "Describe a debounce hook"})

        assert resp.status_code == 200
        assert resp.json() == {"data": "hello"}
        assert fake_completion.prompts == ["Describe a debounce hook"]

    @pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": None}])
    def test_missing_prompt_is_bad_request(self, client, fake_completion, body):
        resp = client.post("/api/ai", json=body)

        assert resp.status_code == 400
        assert resp.json() == {"status": "error", "message": "prompt is required"}
        assert fake_completion.prompts == []

    @pytest.mark.parametrize("prompt", [42, ["hi"], {"text": "hi"}, True])
    def test_non_string_prompt_is_bad_request(self, client, fake_completion, prompt):
        resp = client.post("/api/ai", json={"prompt": prompt})

        assert resp.status_code == 400
        assert resp.json() == {"status": "error", "message": "prompt is required"}
        assert fake_completion.prompts == []

    def test_non_object_body_is_unprocessable(self, client, fake_completion):
        resp = client.post("/api/ai", json=["hi"])

        assert resp.status_code == 422
        assert resp.json()["status"] == "error"
        assert fake_completion.prompts == []

    def test_provider_failure_is_generic_500(self, client, fake_completion, caplog):
        fake_completion.error = EmptyCompletionError("DeepSeek returned empty response")

        resp = client.post("/api/ai", json={"prompt": "hi"})

        assert resp.status_code == 500
        assert resp.json() == {"status": "error", "message": "AI generation failed"}
        assert "DeepSeek returned empty response" in caplog.text


class TestMisc:
    def test_root(self, client):
        assert client.get("/").json() == {"message": "La Bottega UI - API"}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_shutdown_closes_completion_client(self, services, fake_completion):
        from fastapi.testclient import TestClient

        from classroom_backend.interface.app import create_app

        with TestClient(create_app(services)):
            assert fake_completion.closed is False

        assert fake_completion.closed is True
