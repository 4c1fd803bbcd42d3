"""Data models for the caption chunker.

WHY: Speech recognition hands us a flat list of word timings and the video
timeline wants timed, line-wrapped caption chunks. Both sides need a typed,
immutable representation so the chunker can be called concurrently and its
output can be cached, compared, and serialized without defensive copies.

HOW: Frozen dataclasses. WordTiming is the input unit, CaptionChunk the
output unit, QualityMetrics the diagnostic summary. GenerationOptions and
MetricWeights are configuration records validated at construction; callers
derive variants with dataclasses.replace().

RULES:
- Times are float seconds, absolute from the start of the audio.
- WordTiming.word is never modified (trailing punctuation included).
- A missing confidence is None; consumers use effective_confidence.
- to_dict() emits the snake_case wire shape used by the timeline editor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

DEFAULT_WORD_CONFIDENCE = 0.9


@dataclass(frozen=True)
class WordTiming:
    """A single recognized word.

    Attributes:
        word: Literal token text, may carry trailing punctuation.
        start: Start time in seconds.
        end: End time in seconds.
        confidence: Recognition confidence in [0, 1], or None if unknown.
    """

    word: str
    start: float
    end: float
    confidence: Optional[float] = None

    @property
    def effective_confidence(self) -> float:
        """Confidence with the 0.9 default applied for unknown values."""
        if self.confidence is None:
            return DEFAULT_WORD_CONFIDENCE
        return self.confidence

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "start": self.start,
            "end": self.end,
            "confidence": self.effective_confidence,
        }


@dataclass(frozen=True)
class CaptionChunk:
    """One on-screen caption unit.

    RULES:
    - start_time/end_time are frame-aligned; duration == end_time - start_time
    - word_count == len(word_boundaries); char_count == len(text)
    - lines has 1 or 2 entries, each at most max_chars_per_line long
      (a single over-long word is the one exception)
    - word_boundaries are frame-aligned copies of the source words
    """

    id: str
    text: str
    start_time: float
    end_time: float
    duration: float
    word_count: int
    char_count: int
    lines: Tuple[str, ...]
    confidence: float
    word_boundaries: Tuple[WordTiming, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
            "word_count": self.word_count,
            "char_count": self.char_count,
            "lines": list(self.lines),
            "confidence": self.confidence,
            "word_boundaries": [w.to_dict() for w in self.word_boundaries],
        }


@dataclass(frozen=True)
class QualityMetrics:
    """Aggregate diagnostics over a finished chunk sequence.

    Purely informational: nothing here feeds back into chunk generation.
    """

    avg_confidence: float
    timing_precision: float
    readability_score: float

    @classmethod
    def empty(cls) -> QualityMetrics:
        return cls(avg_confidence=0.0, timing_precision=0.0, readability_score=0.0)

    def to_dict(self) -> Dict[str, float]:
        return {
            "avg_confidence": self.avg_confidence,
            "timing_precision": self.timing_precision,
            "readability_score": self.readability_score,
        }


@dataclass(frozen=True)
class GenerationOptions:
    """Tunable chunking options.

    WHY: The chunker's heuristics (word cap, minimum and maximum chunk
    duration, frame rate, line width) differ between video formats. Holding
    them in one immutable record keeps every call self-describing and safe
    to run concurrently with different settings.

    RULES:
    - max_words_per_chunk >= 1
    - max_chunk_duration >= min_chunk_duration > 0
    - frame_rate > 0, max_chars_per_line >= 1
    - audio_duration is None (unknown) or > 0; when known it is a hard
      ceiling for every chunk end
    - prevent_overlap caps the minimum-duration extension at the next
      word's start (off by default)

    Raises:
        ValueError: On construction, if any rule above is violated.
    """

    max_words_per_chunk: int = 5
    min_chunk_duration: float = 0.833
    max_chunk_duration: float = 3.5
    frame_rate: float = 30.0
    max_chars_per_line: int = 42
    audio_duration: Optional[float] = None
    prevent_overlap: bool = False

    def __post_init__(self) -> None:
        if self.max_words_per_chunk < 1:
            raise ValueError(
                "max_words_per_chunk must be at least 1 (got {})".format(
                    self.max_words_per_chunk
                )
            )
        if self.min_chunk_duration <= 0:
            raise ValueError(
                "min_chunk_duration must be positive (got {})".format(
                    self.min_chunk_duration
                )
            )
        if self.max_chunk_duration < self.min_chunk_duration:
            raise ValueError(
                "max_chunk_duration ({}) must not be below min_chunk_duration ({})".format(
                    self.max_chunk_duration, self.min_chunk_duration
                )
            )
        if self.frame_rate <= 0:
            raise ValueError("frame_rate must be positive (got {})".format(self.frame_rate))
        if self.max_chars_per_line < 1:
            raise ValueError(
                "max_chars_per_line must be at least 1 (got {})".format(
                    self.max_chars_per_line
                )
            )
        if self.audio_duration is not None and self.audio_duration <= 0:
            raise ValueError(
                "audio_duration must be positive when given (got {})".format(
                    self.audio_duration
                )
            )

    @property
    def frame_duration(self) -> float:
        return 1.0 / self.frame_rate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_words_per_chunk": self.max_words_per_chunk,
            "min_chunk_duration": self.min_chunk_duration,
            "max_chunk_duration": self.max_chunk_duration,
            "frame_rate": self.frame_rate,
            "max_chars_per_line": self.max_chars_per_line,
            "audio_duration": self.audio_duration,
            "prevent_overlap": self.prevent_overlap,
        }


@dataclass(frozen=True)
class MetricWeights:
    """Heuristic constants for the quality metrics.

    The defaults match the scores the editor has always shown. They are
    comparative tuning values, not a certified quality bound.
    """

    misalignment_weight: float = 2000.0
    overshoot_weight: float = 10.0
    max_overshoot_penalty: float = 50.0
    min_words: int = 2
    too_few_words_penalty: float = 5.0
    max_words: int = 8
    too_many_words_penalty: float = 3.0
    dense_text_penalty: float = 5.0
    comfortable_min_duration: float = 1.0
    comfortable_max_duration: float = 4.0
    comfortable_duration_bonus: float = 2.0
    max_tolerable_duration: float = 6.0
    uncomfortable_duration_penalty: float = 3.0

    def __post_init__(self) -> None:
        if self.comfortable_max_duration < self.comfortable_min_duration:
            raise ValueError("comfortable duration range is inverted")
