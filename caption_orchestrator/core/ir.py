"""Intermediate representation for transcription input and caption output.

WHY: The transcription service returns loosely shaped JSON (segments with
nested word timings, or a flat word list). The timeline editor and the
renderer expect a caption response with summary statistics. The IR gives
both ends a typed form so the pipeline, formatters, API and CLI share one
contract.

HOW: Three dataclasses:
  SegmentTiming             one recognized speech segment with its words
  TranscriptionAnalysis     the full upstream response (segments, duration)
  CaptionGenerationResponse the caption result handed downstream

RULES:
- Word timings are absolute seconds, never segment-relative
- TranscriptionAnalysis.total_duration is None when the service did not
  report one
- A failed CaptionGenerationResponse carries no captions, zero totals,
  all-zero metrics and an error message
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from caption_chunker.models import CaptionChunk, QualityMetrics, WordTiming


@dataclass
class SegmentTiming:
    """A speech segment and the words recognized in it.

    RULES:
    - word_timings keep the service's order (sorted by start)
    - start_time/end_time default to the first/last word when the service
      does not report them
    """

    segment_id: str
    text: str
    start_time: float
    end_time: float
    word_timings: List[WordTiming] = field(default_factory=list)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass
class TranscriptionAnalysis:
    """The complete upstream transcription result.

    WHY: The pipeline may reuse an analysis produced earlier for the same
    audio. Keeping the service-reported duration and success flag lets it
    decide whether that analysis still matches the audio.

    RULES:
    - success is False only when the service itself reported a failure
    - frame_rate is informational (the caption options decide alignment)
    """

    segments: List[SegmentTiming]
    total_duration: Optional[float] = None
    frame_rate: Optional[float] = None
    success: bool = True
    error: Optional[str] = None

    def all_words(self) -> List[WordTiming]:
        """Flatten every segment's words into one ordered list."""
        words: List[WordTiming] = []
        for segment in self.segments:
            words.extend(segment.word_timings)
        return words

    @property
    def word_count(self) -> int:
        return sum(len(s.word_timings) for s in self.segments)


@dataclass
class CaptionGenerationResponse:
    """Caption chunks plus summary statistics for the downstream editor.

    RULES:
    - total_chunks == len(captions)
    - total_duration is the resolved audio duration, or the last chunk's
      end when no duration is known
    - avg_words_per_chunk is 0 when there are no chunks
    """

    success: bool
    captions: List[CaptionChunk]
    total_chunks: int
    total_duration: float
    avg_words_per_chunk: float
    quality_metrics: QualityMetrics
    error: Optional[str] = None

    @classmethod
    def failure(cls, message: str) -> CaptionGenerationResponse:
        return cls(
            success=False,
            captions=[],
            total_chunks=0,
            total_duration=0.0,
            avg_words_per_chunk=0.0,
            quality_metrics=QualityMetrics.empty(),
            error=message,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "captions": [c.to_dict() for c in self.captions],
            "total_chunks": self.total_chunks,
            "total_duration": self.total_duration,
            "avg_words_per_chunk": self.avg_words_per_chunk,
            "quality_metrics": self.quality_metrics.to_dict(),
        }
        if self.error is not None:
            data["error"] = self.error
        return data
