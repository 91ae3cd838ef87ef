"""Smoke tests for API routes."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from grammar_scorer.api.routes import get_analyzer, get_pipeline, get_submission_book, router
from grammar_scorer.assessment.scorer import ScoringPipeline
from grammar_scorer.config import get_settings
from grammar_scorer.storage.submissions import SubmissionBook
from grammar_scorer.transcription.client import SampleTranscriber, TranscriptionError


@pytest.fixture
def pipeline():
    return ScoringPipeline(transcriber=SampleTranscriber(), max_upload_bytes=1024 * 1024)


@pytest.fixture
def client(pipeline):
    app = FastAPI()
    app.include_router(router)
    book = SubmissionBook()
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_submission_book] = lambda: book
    with TestClient(app) as c:
        yield c


class TestHealthCheck:
    def test_health_returns_ok(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAnalyze:
    def test_analyze_transcript(self, client):
        response = client.post("/api/analyze", json={"transcript": "I have went to the store"})
        assert response.status_code == 200
        data = response.json()
        result = data["result"]
        assert len(result["metrics"]) == 5
        assert result["issues"][0]["text"] == "have went"
        assert 1.0 <= result["score"] <= 5.0
        assert data["rubric"]["label"] == result["rubric"]

    def test_analyze_empty_transcript(self, client):
        response = client.post("/api/analyze", json={"transcript": ""})
        assert response.status_code == 200
        assert response.json()["result"]["score"] == 2.5

    def test_analyze_missing_body(self, client):
        response = client.post("/api/analyze", json={})
        assert response.status_code == 422

    def test_rubric(self, client):
        response = client.get("/api/rubric")
        assert response.status_code == 200
        assert len(response.json()) == 5


class TestProcess:
    def test_process_sample_upload(self, client):
        response = client.post(
            "/api/process",
            files={"file": ("sample3.wav", b"RIFF-not-really", "audio/wav")},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["filename"] == "sample3.wav"
        assert set(data["stages"].values()) == {"completed"}
        assert data["transcript"].startswith("She don't like pizza")
        assert data["result"]["issues"] == []

    def test_process_rejects_non_audio(self, client):
        response = client.post(
            "/api/process",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )
        assert response.status_code == 400

    def test_process_transcription_failure(self, client, pipeline):
        pipeline.transcriber = AsyncMock()
        pipeline.transcriber.transcribe.side_effect = TranscriptionError("service down")
        response = client.post(
            "/api/process",
            files={"file": ("sample1.wav", b"RIFF", "audio/wav")},
        )
        assert response.status_code == 502
        assert response.json()["detail"] == "service down"


class TestSubmissions:
    def test_empty_list(self, client):
        response = client.get("/api/submissions")
        assert response.status_code == 200
        assert response.json() == []

    def test_add_and_export(self, client):
        response = client.post("/api/submissions", json={"filename": "sample1.wav", "score": 3.1})
        assert response.status_code == 201

        response = client.get("/api/submissions/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "predictions.csv" in response.headers["content-disposition"]
        assert response.text == "filename,score\nsample1.wav,3.10\n"

    def test_add_rejects_out_of_range(self, client):
        response = client.post("/api/submissions", json={"filename": "a.wav", "score": 0.5})
        assert response.status_code == 422

    def test_export_empty(self, client):
        response = client.get("/api/submissions/export")
        assert response.status_code == 400

    def test_delete(self, client):
        entry = client.post("/api/submissions", json={"filename": "a.wav", "score": 2.0}).json()
        response = client.delete(f"/api/submissions/{entry['id']}")
        assert response.status_code == 204
        assert client.get("/api/submissions").json() == []

    def test_delete_unknown(self, client):
        response = client.delete("/api/submissions/missing")
        assert response.status_code == 404


class TestMissingTranscriptionKey:
    @pytest.fixture
    def unconfigured_client(self, monkeypatch):
        monkeypatch.setenv("TRANSCRIPTION_BACKEND", "openai")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        get_settings.cache_clear()
        get_pipeline.cache_clear()
        get_analyzer.cache_clear()
        app = FastAPI()
        app.include_router(router)
        with TestClient(app) as c:
            yield c
        get_settings.cache_clear()
        get_pipeline.cache_clear()
        get_analyzer.cache_clear()

    def test_analyze_still_scores(self, unconfigured_client):
        response = unconfigured_client.post(
            "/api/analyze", json={"transcript": "I have went to the store"}
        )
        assert response.status_code == 200
        assert response.json()["result"]["score"] == pytest.approx(3.1)

    def test_process_unavailable(self, unconfigured_client):
        response = unconfigured_client.post(
            "/api/process",
            files={"file": ("sample1.wav", b"RIFF", "audio/wav")},
        )
        assert response.status_code == 503
        assert "OPENAI_API_KEY" in response.json()["detail"]
