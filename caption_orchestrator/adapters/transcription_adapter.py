"""Adapter: upstream transcription JSON to the TranscriptionAnalysis IR.

WHY: Word timings arrive from the speech-to-text collaborator in several
shapes: a word-timing analysis with per-segment word lists, a verbose
transcription with a flat "words" array, or (from the editor and the CLI)
a bare list of word objects. The chunker trusts its input, so this is the
one place where the payload is checked before it reaches the engine.

HOW: Detect the shape, validate it against a JSON Schema (jsonschema,
Draft 7), then walk the words and check the timing rules the schema cannot
express. Valid payloads become SegmentTiming / TranscriptionAnalysis
objects with WordTiming words.

RULES:
- Shapes: {"segment_timings": [...]}, {"words": [...]}, or [word, ...]
- Word text comes from "word" (or "text"); it is stripped, and empty
  tokens are skipped
- Timings must be non-negative with end >= start, and word starts must not
  go backwards across the whole transcription
- Confidence is optional (None when absent) and must lie in [0, 1]
- Every failure raises InvalidTranscriptionError naming the word index
- Input data is never modified
"""

from __future__ import annotations

from typing import Any, List, Optional

import jsonschema

from caption_chunker.models import WordTiming
from caption_orchestrator.core.ir import SegmentTiming, TranscriptionAnalysis


class InvalidTranscriptionError(ValueError):
    """Raised when a transcription payload fails schema or timing checks.

    RULES:
    - Message names the offending field path or word index
    """


_WORD_SCHEMA = {
    "type": "object",
    "properties": {
        "word": {"type": "string"},
        "text": {"type": "string"},
        "start": {"type": "number"},
        "end": {"type": "number"},
        "confidence": {
            "anyOf": [
                {"type": "number", "minimum": 0, "maximum": 1},
                {"type": "null"},
            ]
        },
    },
    "required": ["start", "end"],
    "anyOf": [{"required": ["word"]}, {"required": ["text"]}],
}

_OPTIONAL_NUMBER = {"anyOf": [{"type": "number"}, {"type": "null"}]}

WORD_LIST_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "array",
    "items": _WORD_SCHEMA,
}

VERBOSE_TRANSCRIPTION_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "text": {"type": "string"},
        "duration": _OPTIONAL_NUMBER,
        "words": {"type": "array", "items": _WORD_SCHEMA},
    },
    "required": ["words"],
}

WORD_ANALYSIS_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "success": {"type": "boolean"},
        "error": {"anyOf": [{"type": "string"}, {"type": "null"}]},
        "total_duration": _OPTIONAL_NUMBER,
        "frame_rate": _OPTIONAL_NUMBER,
        "segment_timings": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "segment_id": {"type": ["string", "integer"]},
                    "text": {"type": "string"},
                    "start_time": {"type": "number"},
                    "end_time": {"type": "number"},
                    "word_timings": {"type": "array", "items": _WORD_SCHEMA},
                },
                "required": ["word_timings"],
            },
        },
    },
    "required": ["segment_timings"],
}


def _validate(data: Any, schema: dict) -> None:
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise InvalidTranscriptionError(
            "Invalid transcription at {}: {}".format(location, exc.message)
        ) from exc


def _parse_words(raw_words: List[dict]) -> List[WordTiming]:
    """Convert schema-valid word dicts to WordTiming, skipping empty tokens."""
    words: List[WordTiming] = []
    for w in raw_words:
        text = w.get("word", w.get("text", "")).strip()
        if not text:
            continue
        words.append(WordTiming(
            word=text,
            start=float(w["start"]),
            end=float(w["end"]),
            confidence=w.get("confidence"),
        ))
    return words


def _check_timings(words: List[WordTiming]) -> None:
    """Enforce timing rules across the flattened word stream.

    The chunker assumes start-sorted, non-negative, non-inverted timings;
    reject anything else here rather than produce garbled captions.
    """
    previous_start: Optional[float] = None
    for index, word in enumerate(words):
        if word.start < 0 or word.end < 0:
            raise InvalidTranscriptionError(
                "Word {} ({!r}) has a negative timestamp".format(index, word.word)
            )
        if word.end < word.start:
            raise InvalidTranscriptionError(
                "Word {} ({!r}) ends before it starts ({} < {})".format(
                    index, word.word, word.end, word.start
                )
            )
        if previous_start is not None and word.start < previous_start:
            raise InvalidTranscriptionError(
                "Word {} ({!r}) starts before the previous word; "
                "word timings must be sorted by start".format(index, word.word)
            )
        previous_start = word.start


def _single_segment(words: List[WordTiming], text: Optional[str] = None) -> SegmentTiming:
    return SegmentTiming(
        segment_id="segment-0",
        text=text if text is not None else " ".join(w.word for w in words),
        start_time=words[0].start if words else 0.0,
        end_time=words[-1].end if words else 0.0,
        word_timings=words,
    )


def _parse_analysis(data: dict) -> TranscriptionAnalysis:
    segments: List[SegmentTiming] = []
    for index, raw in enumerate(data["segment_timings"]):
        words = _parse_words(raw["word_timings"])
        start_time = raw.get("start_time", words[0].start if words else 0.0)
        end_time = raw.get("end_time", words[-1].end if words else start_time)
        segments.append(SegmentTiming(
            segment_id=str(raw.get("segment_id", "segment-{}".format(index))),
            text=raw.get("text", " ".join(w.word for w in words)),
            start_time=float(start_time),
            end_time=float(end_time),
            word_timings=words,
        ))

    return TranscriptionAnalysis(
        segments=segments,
        total_duration=data.get("total_duration"),
        frame_rate=data.get("frame_rate"),
        success=data.get("success", True),
        error=data.get("error"),
    )


def parse_transcription(data: Any) -> TranscriptionAnalysis:
    """Validate an upstream transcription payload and parse it into the IR.

    WHY: This is the boundary between untyped service JSON and the typed
    caption engine. Anything that passes here is safe to chunk.

    HOW: Picks the schema by shape, validates, parses words, then checks
    timing order across all segments.

    Args:
        data: Decoded JSON: a word-timing analysis dict, a verbose
            transcription dict with "words", or a list of word dicts.

    Returns:
        TranscriptionAnalysis with one or more segments.

    Raises:
        InvalidTranscriptionError: If the payload has an unknown shape,
            fails its schema, or breaks a timing rule.
    """
    if isinstance(data, list):
        _validate(data, WORD_LIST_SCHEMA)
        analysis = TranscriptionAnalysis(segments=[_single_segment(_parse_words(data))])
    elif isinstance(data, dict) and "segment_timings" in data:
        _validate(data, WORD_ANALYSIS_SCHEMA)
        analysis = _parse_analysis(data)
    elif isinstance(data, dict) and "words" in data:
        _validate(data, VERBOSE_TRANSCRIPTION_SCHEMA)
        analysis = TranscriptionAnalysis(
            segments=[_single_segment(_parse_words(data["words"]), data.get("text"))],
            total_duration=data.get("duration"),
        )
    else:
        raise InvalidTranscriptionError(
            "Unrecognized transcription format: expected a word list, "
            "an object with 'words', or an object with 'segment_timings'"
        )

    _check_timings(analysis.all_words())
    return analysis
