"""Tests for the FastAPI caption API.

WHY: Validates that all API endpoints behave correctly: happy paths,
error cases, and edge cases, using FastAPI TestClient for synchronous
in-process testing.

HOW: Each test exercises one endpoint behavior with the conftest payloads
and checks status codes, bodies, and headers.

RULES:
- All tests use the FastAPI TestClient (synchronous)
- Each test is independent; the app holds no state between requests
- Tests cover: happy paths, 404 unknown format, 422 invalid input
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from caption_orchestrator import __version__
from caption_orchestrator.server.app import app


@pytest.fixture
def client():
    return TestClient(app)


# ---------------------------------------------------------------------------
# POST /captions
# ---------------------------------------------------------------------------


class TestCreateCaptions:
    def test_verbose_transcription(self, client, verbose_payload):
        resp = client.post("/captions", json={"transcription": verbose_payload})

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["total_chunks"] == len(data["captions"])
        assert data["total_duration"] == 1.6
        assert "error" not in data

    def test_chunk_shape(self, client, analysis_payload):
        resp = client.post("/captions", json={"transcription": analysis_payload})
        chunk = resp.json()["captions"][0]

        assert chunk["id"] == "caption-0"
        assert chunk["text"] == "Welcome back everyone."
        assert chunk["lines"] == ["Welcome back everyone."]
        assert len(chunk["word_boundaries"]) == 3
        assert set(resp.json()["quality_metrics"]) == {
            "avg_confidence", "timing_precision", "readability_score",
        }

    def test_word_list_with_options(self, client, word_list_payload):
        resp = client.post("/captions", json={
            "transcription": word_list_payload,
            "options": {"max_words_per_chunk": 1},
        })

        assert resp.status_code == 200
        assert resp.json()["total_chunks"] == 4

    def test_invalid_transcription(self, client):
        resp = client.post("/captions", json={
            "transcription": [{"word": "hi", "start": 0.5, "end": 0.2}],
        })

        assert resp.status_code == 422
        assert "ends before it starts" in resp.json()["detail"]

    def test_unknown_shape(self, client):
        resp = client.post("/captions", json={"transcription": {"foo": 1}})

        assert resp.status_code == 422
        assert "Unrecognized" in resp.json()["detail"]

    def test_missing_transcription(self, client):
        resp = client.post("/captions", json={"options": {}})
        assert resp.status_code == 422

    def test_option_out_of_range(self, client, verbose_payload):
        resp = client.post("/captions", json={
            "transcription": verbose_payload,
            "options": {"max_words_per_chunk": 0},
        })
        assert resp.status_code == 422

    def test_inconsistent_options(self, client, verbose_payload):
        resp = client.post("/captions", json={
            "transcription": verbose_payload,
            "options": {"min_chunk_duration": 2.0, "max_chunk_duration": 1.0},
        })

        assert resp.status_code == 422
        assert "Invalid options" in resp.json()["detail"]

    def test_no_words(self, client):
        resp = client.post("/captions", json={"transcription": []})

        assert resp.status_code == 422
        assert "No word timings available" in resp.json()["detail"]

    def test_duration_mismatch(self, client, analysis_payload):
        resp = client.post("/captions", json={
            "transcription": analysis_payload,
            "options": {"audio_duration": 30.0},
        })

        assert resp.status_code == 422
        assert "Duration mismatch" in resp.json()["detail"]

    def test_failed_analysis(self, client):
        resp = client.post("/captions", json={
            "transcription": {"success": False, "error": "boom", "segment_timings": []},
        })

        assert resp.status_code == 422
        assert resp.json()["detail"] == "Transcription analysis failed: boom"


# ---------------------------------------------------------------------------
# POST /captions/export/{format_key}
# ---------------------------------------------------------------------------


class TestExportCaptions:
    def test_srt_download(self, client, analysis_payload):
        resp = client.post("/captions/export/srt_captions", json={"transcription": analysis_payload})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/x-subrip")
        assert 'filename="captions-captions.srt"' in resp.headers["content-disposition"]
        assert resp.text.startswith("1\n00:00:00,000 --> 00:00:01,200\n")

    def test_track_items_use_request_frame_rate(self, client, analysis_payload):
        resp = client.post("/captions/export/track_items", json={
            "transcription": analysis_payload,
            "options": {"frame_rate": 25},
        })

        assert resp.status_code == 200
        items = resp.json()
        assert items[0]["start"] == 0
        assert items[0]["duration"] == 30

    def test_unknown_format(self, client, analysis_payload):
        resp = client.post("/captions/export/vtt", json={"transcription": analysis_payload})

        assert resp.status_code == 404
        assert "Unknown format" in resp.json()["detail"]

    def test_invalid_input(self, client):
        resp = client.post("/captions/export/caption_json", json={"transcription": []})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# GET /formats, GET /health
# ---------------------------------------------------------------------------


class TestFormats:
    def test_lists_all_formatters(self, client):
        resp = client.get("/formats")

        assert resp.status_code == 200
        formats = {f["key"]: f for f in resp.json()}
        assert set(formats) == {"caption_json", "srt_captions", "track_items"}
        assert formats["srt_captions"]["suffix"] == "-captions.srt"
        assert formats["track_items"]["name"] == "Timeline Track Items"


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": __version__}


class TestOpenAPI:
    def test_avg_confidence_described_per_word(self, client):
        schemas = client.get("/openapi.json").json()["components"]["schemas"]
        field = schemas["QualityMetricsModel"]["properties"]["avg_confidence"]

        assert field["description"] == "Mean word confidence."
