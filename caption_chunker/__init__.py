"""Caption chunking library for frame-accurate word-highlight captions.

WHY: Generated videos show captions a few words at a time with the spoken
word highlighted. The renderer needs caption chunks whose boundaries land
exactly on video frames, wrapped into at most two lines, with per-word
timings for the highlight. This package turns speech-recognition word
timings into those chunks and scores the result.

HOW: The public entry point is generate_chunks(words, options,
audio_duration). It runs the single-pass chunker from core.py and the
metrics calculator from metrics.py and returns both as a ChunkingResult
(a named pair, so `chunks, metrics = generate_chunks(...)` works).

RULES:
- generate_chunks() is the public API; chunk_words(), wrap_lines() and
  compute_metrics() are exported for callers that need one stage only.
- The words list must contain WordTiming objects sorted by start time.
- Options are immutable; derive variants with dataclasses.replace().
- Thread-safe: nothing here holds state between calls.
"""

from typing import List, NamedTuple, Optional, Sequence

from .core import align_to_frame, chunk_words, time_to_frame, wrap_lines
from .defaults import DEFAULT_METRIC_WEIGHTS, DEFAULT_OPTIONS
from .metrics import compute_metrics
from .models import (
    CaptionChunk,
    GenerationOptions,
    MetricWeights,
    QualityMetrics,
    WordTiming,
)

__all__ = [
    "CaptionChunk",
    "ChunkingResult",
    "DEFAULT_METRIC_WEIGHTS",
    "DEFAULT_OPTIONS",
    "GenerationOptions",
    "MetricWeights",
    "QualityMetrics",
    "WordTiming",
    "align_to_frame",
    "chunk_words",
    "compute_metrics",
    "generate_chunks",
    "time_to_frame",
    "wrap_lines",
]


class ChunkingResult(NamedTuple):
    chunks: List[CaptionChunk]
    metrics: QualityMetrics


def generate_chunks(
    words: Sequence[WordTiming],
    options: Optional[GenerationOptions] = None,
    audio_duration: Optional[float] = None,
) -> ChunkingResult:
    """Chunk word timings into captions and compute their quality metrics.

    Args:
        words: Word timings sorted by start time.
        options: Chunking options. Default: DEFAULT_OPTIONS.
        audio_duration: Known audio length in seconds. Overrides
            options.audio_duration when given.

    Returns:
        ChunkingResult(chunks, metrics). Empty input gives no chunks and
        all-zero metrics.
    """
    if options is None:
        options = DEFAULT_OPTIONS
    if audio_duration is None:
        audio_duration = options.audio_duration

    chunks = chunk_words(words, options, audio_duration)
    metrics = compute_metrics(chunks, audio_duration, options)
    return ChunkingResult(chunks=chunks, metrics=metrics)
