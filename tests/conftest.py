"""Shared test fixtures for the caption test suite.

WHY: Most test modules need the same small word-timing samples and the
same transcription payloads in each upstream shape. Centralizing them here
avoids duplication and keeps every test on identical data.

HOW: make_words() builds WordTiming lists from compact tuples. Fixtures
provide the payload shapes the transcription adapter accepts, and an
autouse fixture clears CAPTION_* overrides so env defaults are the
documented ones.

RULES:
- Times are chosen to land exactly on 1/30 s frames where a test relies
  on frame arithmetic
- Fixtures return fresh objects; tests may mutate them
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from caption_chunker.models import WordTiming

_CONFIG_VARS = (
    "CAPTION_MAX_WORDS_PER_CHUNK",
    "CAPTION_MIN_CHUNK_DURATION",
    "CAPTION_MAX_CHUNK_DURATION",
    "CAPTION_FRAME_RATE",
    "CAPTION_MAX_CHARS_PER_LINE",
)


def make_words(
    rows: Sequence[Tuple[Any, ...]],
) -> List[WordTiming]:
    """Build WordTiming objects from (word, start, end[, confidence]) tuples."""
    words = []
    for row in rows:
        confidence: Optional[float] = row[3] if len(row) > 3 else None
        words.append(WordTiming(word=row[0], start=row[1], end=row[2], confidence=confidence))
    return words


def evenly_spaced(count: int, length: float = 0.2, prefix: str = "w") -> List[WordTiming]:
    """count back-to-back words of equal length, no punctuation, no pauses."""
    return [
        WordTiming(
            word="{}{}".format(prefix, i),
            start=round(i * length, 6),
            end=round((i + 1) * length, 6),
            confidence=0.9,
        )
        for i in range(count)
    ]


@pytest.fixture(autouse=True)
def _clean_caption_env(monkeypatch):
    for name in _CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def hello_world_words() -> List[WordTiming]:
    return make_words([("Hello", 0.0, 0.3, 0.95), ("world", 0.3, 0.6, 0.95)])


@pytest.fixture
def sentence_words() -> List[WordTiming]:
    """Two sentences separated by a clear pause."""
    return make_words([
        ("The", 0.0, 0.2, 0.98),
        ("quick", 0.2, 0.5, 0.97),
        ("fox", 0.5, 0.8, 0.96),
        ("jumps.", 0.8, 1.2, 0.95),
        ("Then", 1.8, 2.0, 0.94),
        ("it", 2.0, 2.1, 0.93),
        ("rests.", 2.1, 2.6, 0.92),
    ])


@pytest.fixture
def word_list_payload() -> List[Dict[str, Any]]:
    return [
        {"word": "Hello", "start": 0.0, "end": 0.4, "confidence": 0.98},
        {"word": "there,", "start": 0.45, "end": 0.8},
        {"word": "my", "start": 0.8, "end": 0.95, "confidence": 0.9},
        {"word": "friend.", "start": 0.95, "end": 1.5, "confidence": 0.97},
    ]


@pytest.fixture
def verbose_payload(word_list_payload) -> Dict[str, Any]:
    return {
        "text": "Hello there, my friend.",
        "duration": 1.6,
        "words": word_list_payload,
    }


@pytest.fixture
def analysis_payload() -> Dict[str, Any]:
    return {
        "success": True,
        "total_duration": 3.0,
        "frame_rate": 30,
        "segment_timings": [
            {
                "segment_id": "seg-1",
                "text": "Welcome back everyone.",
                "start_time": 0.0,
                "end_time": 1.2,
                "word_timings": [
                    {"word": "Welcome", "start": 0.0, "end": 0.4, "confidence": 0.99},
                    {"word": "back", "start": 0.4, "end": 0.7, "confidence": 0.98},
                    {"word": "everyone.", "start": 0.7, "end": 1.2, "confidence": 0.97},
                ],
            },
            {
                "segment_id": "seg-2",
                "text": "Let's begin.",
                "start_time": 1.8,
                "end_time": 2.6,
                "word_timings": [
                    {"word": "Let's", "start": 1.8, "end": 2.1, "confidence": 0.96},
                    {"word": "begin.", "start": 2.1, "end": 2.6, "confidence": 0.95},
                ],
            },
        ],
    }
