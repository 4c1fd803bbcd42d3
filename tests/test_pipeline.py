"""Tests for the caption generation pipeline (caption_orchestrator.core.pipeline).

WHY: generate_captions() is what the API and the CLI call. It must turn
every expected failure into a failure response, reject a reused
transcription that no longer matches the audio, and resolve the audio
duration in the documented order.

HOW: TranscriptionAnalysis objects built from the conftest payloads via
the adapter, or directly for the failure cases.

RULES:
- generate_captions() never raises for expected failures
- A failure response has no captions, zero totals and zero metrics
"""

import logging
from dataclasses import replace

import pytest

from caption_chunker import DEFAULT_OPTIONS, QualityMetrics
from caption_orchestrator.adapters import parse_transcription
from caption_orchestrator.core.ir import SegmentTiming, TranscriptionAnalysis
from caption_orchestrator.core.pipeline import (
    TranscriptionMismatchError,
    check_compatibility,
    generate_captions,
    resolve_audio_duration,
)
from conftest import make_words


def _analysis(words, total_duration=None):
    segment = SegmentTiming(
        segment_id="segment-0",
        text=" ".join(w.word for w in words),
        start_time=words[0].start if words else 0.0,
        end_time=words[-1].end if words else 0.0,
        word_timings=words,
    )
    return TranscriptionAnalysis(segments=[segment], total_duration=total_duration)


class TestSuccess:
    def test_generates_captions(self, analysis_payload):
        response = generate_captions(parse_transcription(analysis_payload))

        assert response.success is True
        assert response.error is None
        assert response.total_chunks == len(response.captions) == 2
        assert [c.text for c in response.captions] == ["Welcome back everyone.", "Let's begin."]
        assert response.total_duration == 3.0
        assert response.avg_words_per_chunk == pytest.approx(2.5)

    def test_metrics_filled(self, analysis_payload):
        response = generate_captions(parse_transcription(analysis_payload))

        assert response.quality_metrics.avg_confidence == pytest.approx(0.97)
        assert response.quality_metrics.timing_precision == 100.0

    def test_uses_explicit_options(self, analysis_payload):
        options = replace(DEFAULT_OPTIONS, max_words_per_chunk=1)
        response = generate_captions(parse_transcription(analysis_payload), options)

        assert response.total_chunks == 5
        assert response.avg_words_per_chunk == 1.0

    def test_env_defaults_used_without_options(self, analysis_payload, monkeypatch):
        monkeypatch.setenv("CAPTION_MAX_WORDS_PER_CHUNK", "1")
        response = generate_captions(parse_transcription(analysis_payload))

        assert response.total_chunks == 5

    def test_within_tolerance_is_reused(self, analysis_payload):
        options = replace(DEFAULT_OPTIONS, audio_duration=4.5)
        response = generate_captions(parse_transcription(analysis_payload), options)

        assert response.success is True
        assert response.total_duration == 4.5

    def test_logs_chunk_count(self, analysis_payload, caplog):
        with caplog.at_level(logging.INFO, logger="caption_orchestrator.core.pipeline"):
            generate_captions(parse_transcription(analysis_payload))

        assert "Generated 2 caption chunks" in caplog.text

    def test_to_dict_omits_error_on_success(self, analysis_payload):
        data = generate_captions(parse_transcription(analysis_payload)).to_dict()

        assert "error" not in data
        assert data["total_chunks"] == 2
        assert data["quality_metrics"]["timing_precision"] == 100.0


class TestFailures:
    def _assert_failure(self, response):
        assert response.success is False
        assert response.captions == []
        assert response.total_chunks == 0
        assert response.total_duration == 0.0
        assert response.avg_words_per_chunk == 0.0
        assert response.quality_metrics == QualityMetrics.empty()
        assert response.error

    def test_failed_analysis(self):
        analysis = TranscriptionAnalysis(segments=[], success=False, error="service timeout")
        response = generate_captions(analysis)

        self._assert_failure(response)
        assert response.error == "Transcription analysis failed: service timeout"

    def test_no_words(self):
        response = generate_captions(TranscriptionAnalysis(segments=[]))

        self._assert_failure(response)
        assert "No word timings available" in response.error

    def test_duration_mismatch(self, analysis_payload):
        options = replace(DEFAULT_OPTIONS, audio_duration=10.0)
        response = generate_captions(parse_transcription(analysis_payload), options)

        self._assert_failure(response)
        assert "Duration mismatch" in response.error

    def test_custom_tolerance(self, analysis_payload):
        options = replace(DEFAULT_OPTIONS, audio_duration=4.5)
        response = generate_captions(
            parse_transcription(analysis_payload), options, tolerance_s=1.0
        )

        self._assert_failure(response)

    def test_invalid_env_defaults(self, analysis_payload, monkeypatch):
        monkeypatch.setenv("CAPTION_FRAME_RATE", "fast")
        response = generate_captions(parse_transcription(analysis_payload))

        self._assert_failure(response)
        assert "CAPTION_FRAME_RATE" in response.error

    def test_failure_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="caption_orchestrator.core.pipeline"):
            generate_captions(TranscriptionAnalysis(segments=[]))

        assert "Caption generation failed" in caplog.text

    def test_failure_to_dict_has_error(self):
        data = generate_captions(TranscriptionAnalysis(segments=[])).to_dict()

        assert data["success"] is False
        assert data["captions"] == []
        assert "error" in data


class TestDurationResolution:
    def test_options_win(self):
        words = make_words([("a", 0.0, 1.0)])
        options = replace(DEFAULT_OPTIONS, audio_duration=2.0)

        assert resolve_audio_duration(options, _analysis(words, 3.0), words) == 2.0

    def test_analysis_duration_next(self):
        words = make_words([("a", 0.0, 1.0)])

        assert resolve_audio_duration(DEFAULT_OPTIONS, _analysis(words, 3.0), words) == 3.0

    def test_latest_word_end_last(self):
        words = make_words([("a", 0.0, 1.0), ("b", 0.5, 1.4)])

        assert resolve_audio_duration(DEFAULT_OPTIONS, _analysis(words), words) == 1.4

    def test_inferred_duration_caps_extension(self):
        words = make_words([("a", 0.0, 0.2), ("b", 0.2, 0.4)])
        response = generate_captions(_analysis(words), DEFAULT_OPTIONS)

        assert response.total_duration == 0.4
        assert response.captions[0].end_time == pytest.approx(0.4)


class TestCompatibility:
    def test_unknown_durations_pass(self):
        words = make_words([("a", 0.0, 1.0)])
        check_compatibility(_analysis(words), 10.0)
        check_compatibility(_analysis(words, 10.0), None)

    def test_mismatch_raises(self):
        words = make_words([("a", 0.0, 1.0)])
        with pytest.raises(TranscriptionMismatchError):
            check_compatibility(_analysis(words, 5.0), 8.0)

    def test_boundary_is_compatible(self):
        words = make_words([("a", 0.0, 1.0)])
        check_compatibility(_analysis(words, 5.0), 7.0)
