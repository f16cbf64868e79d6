"""Tests for health check endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from contoso_cafe.core.runtime import build_runtime
from contoso_cafe.core.state import MemoryStorage
from contoso_cafe.main import create_app
from contoso_cafe.services.recognizer.keyword import KeywordRecognizer


class FailingStorage(MemoryStorage):
    async def read(self, keys):
        raise OSError("disk gone")


class TestHealthEndpoints:
    """Tests for /health and /health/detailed endpoints."""

    def test_health_basic(self, test_client) -> None:
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_health_detailed(self, test_client) -> None:
        response = test_client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["checks"] == {
            "bot": "cafe",
            "storage": "ok",
            "recognizer": "keyword",
            "qna": "disabled",
        }

    def test_health_detailed_llm_without_key(self, settings_factory, storage) -> None:
        """The groq check appears only for the LLM recognizer."""
        settings = settings_factory(recognizer="llm", groq_api_key=None)
        runtime = build_runtime(settings, storage=storage, recognizer=KeywordRecognizer())

        with TestClient(create_app(settings, runtime)) as client:
            checks = client.get("/health/detailed").json()["checks"]

        assert checks["recognizer"] == "llm"
        assert checks["groq"] == "missing"


class TestHealthDegraded:
    def test_storage_failure_degrades(self, settings) -> None:
        runtime = build_runtime(settings, storage=FailingStorage())

        with TestClient(create_app(settings, runtime)) as client:
            basic = client.get("/health")
            detailed = client.get("/health/detailed").json()

        assert basic.json()["status"] == "healthy"
        assert detailed["status"] == "degraded"
        assert detailed["checks"]["storage"] == "error: OSError"
