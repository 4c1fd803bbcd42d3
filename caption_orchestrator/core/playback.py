"""Frame lookups for caption playback.

WHY: The renderer evaluates captions once per video frame: which chunk is
on screen, and which of its words is highlighted. Chunk and word times are
already frame-aligned, so converting them back to integer frames with the
same rounding gives exact, gap-free comparisons.

RULES:
- A chunk or word is active on frames start_frame <= f < end_frame
- A zero-length word is active on its single start frame
- Lookups return None / -1 when nothing is active
"""

from __future__ import annotations

from typing import Optional, Sequence

from caption_chunker import time_to_frame
from caption_chunker.models import CaptionChunk

__all__ = ["active_chunk_at_frame", "active_word_index", "time_to_frame"]


def _is_active(start: float, end: float, frame: int, frame_rate: float) -> bool:
    start_frame = time_to_frame(start, frame_rate)
    end_frame = time_to_frame(end, frame_rate)
    if end_frame == start_frame:
        return frame == start_frame
    return start_frame <= frame < end_frame


def active_chunk_at_frame(
    chunks: Sequence[CaptionChunk],
    frame: int,
    frame_rate: float,
) -> Optional[CaptionChunk]:
    """Return the first chunk on screen at frame, or None."""
    for chunk in chunks:
        start_frame = time_to_frame(chunk.start_time, frame_rate)
        end_frame = time_to_frame(chunk.end_time, frame_rate)
        if start_frame <= frame < end_frame:
            return chunk
    return None


def active_word_index(chunk: CaptionChunk, frame: int, frame_rate: float) -> int:
    """Return the index of the highlighted word at frame, or -1."""
    for index, word in enumerate(chunk.word_boundaries):
        if _is_active(word.start, word.end, frame, frame_rate):
            return index
    return -1
