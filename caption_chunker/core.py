"""Core caption chunking: boundary detection, frame alignment, line wrapping.

WHY: The video renderer shows captions a few words at a time and highlights
each word as it is spoken. It evaluates "is this chunk active" by integer
frame number, so every boundary it receives must land exactly on a frame,
and each chunk must read as a short, complete thought.

HOW: One forward pass over the word list:
  1. Append the current word to a pending buffer.
  2. Close the buffer when it hits the word cap, when a natural pause
     follows (look-ahead to the next word), when the word ends a sentence,
     when the buffer spans max_chunk_duration, or at the last word.
  3. On close, apply the minimum-duration extension and the audio-duration
     ceiling, frame-align the boundaries, wrap the text into at most two
     lines, and emit a CaptionChunk.

RULES:
- Pure and deterministic: no I/O, no clock reads, no shared mutable state.
- Words are consumed in the order given; the chunker never re-sorts.
- Pause and punctuation breaks need at least 3 words in the buffer.
- Audio-boundary correctness wins over the minimum-duration target.
- Empty input yields an empty list, never an exception.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .defaults import (
    DEFAULT_OPTIONS,
    MAX_DISPLAY_LINES,
    MIN_WORDS_FOR_NATURAL_BREAK,
    NATURAL_PAUSE_S,
    TERMINAL_PUNCTUATION_RE,
)
from .models import CaptionChunk, GenerationOptions, WordTiming

logger = logging.getLogger(__name__)

# Float noise tolerated when converting seconds to whole frames
_FRAME_EPSILON = 1e-9

# =============================================================================
# Frame Alignment
# =============================================================================


def time_to_frame(timestamp: float, frame_rate: float) -> int:
    """Return the nearest frame index for a timestamp (halves round up)."""
    return int(math.floor(timestamp * frame_rate + 0.5))


def align_to_frame(timestamp: float, frame_rate: float) -> float:
    """Snap a timestamp to the nearest multiple of one frame's duration."""
    return time_to_frame(timestamp, frame_rate) / frame_rate


# =============================================================================
# Line Wrapping
# =============================================================================


def wrap_lines(text: str, max_chars_per_line: int) -> List[str]:
    """Greedy word-wrap of caption text into at most two display lines.

    WHY: Captions are shown on at most two lines. The renderer lays out the
    `lines` hint directly, so each line must fit the configured width.

    HOW: Text that fits is returned as a single line. Otherwise words are
    accumulated while "line + ' ' + word" stays within the limit; an
    overflowing word starts the next line. A single word longer than the
    limit sits alone on its own line and is never split.

    RULES:
    - Lines beyond the second are silently dropped. The chunk's `text` keeps
      every word; only the display hint is capped.
    - Never returns an empty list for non-empty text.

    Args:
        text: Space-joined caption text.
        max_chars_per_line: Maximum characters per display line.

    Returns:
        One or two display lines.
    """
    if len(text) <= max_chars_per_line:
        return [text]

    lines = []  # type: List[str]
    current = ""

    for word in text.split():
        candidate = "{} {}".format(current, word) if current else word
        if len(candidate) <= max_chars_per_line:
            current = candidate
        elif current:
            lines.append(current)
            current = word
        else:
            # Over-long word on an empty line: place it alone
            lines.append(word)

    if current:
        lines.append(current)

    return lines[:MAX_DISPLAY_LINES]


# =============================================================================
# Chunk Boundaries
# =============================================================================


def _has_natural_pause(words: Sequence[WordTiming], index: int) -> bool:
    """True if the gap before the next word exceeds the natural pause."""
    if index >= len(words) - 1:
        return False
    return words[index + 1].start - words[index].end > NATURAL_PAUSE_S


def _ends_sentence(word: WordTiming) -> bool:
    return bool(TERMINAL_PUNCTUATION_RE.search(word.word))


def should_close_chunk(
    words: Sequence[WordTiming],
    index: int,
    buffer: Sequence[WordTiming],
    options: GenerationOptions,
) -> bool:
    """Decide whether the pending buffer closes after words[index].

    Any single condition is enough:
    - the buffer reached max_words_per_chunk
    - a pause longer than NATURAL_PAUSE_S precedes the next word (3+ words)
    - the current word ends in . ! or ? (3+ words)
    - the buffer spans at least max_chunk_duration
    - words[index] is the last word (forced flush)
    """
    word = words[index]
    size = len(buffer)

    if size >= options.max_words_per_chunk:
        return True
    if size >= MIN_WORDS_FOR_NATURAL_BREAK and _has_natural_pause(words, index):
        return True
    if size >= MIN_WORDS_FOR_NATURAL_BREAK and _ends_sentence(word):
        return True
    if word.end - buffer[0].start >= options.max_chunk_duration:
        return True
    return index == len(words) - 1


def _resolve_chunk_end(
    buffer: Sequence[WordTiming],
    options: GenerationOptions,
    audio_duration: Optional[float],
    next_start: Optional[float],
    chunk_index: int,
) -> Tuple[float, bool]:
    """Apply the minimum-duration extension and the audio ceiling.

    The extension is skipped when it would run past a known audio duration;
    the ceiling is applied afterwards as a hard clamp. With prevent_overlap
    the extension also stops at the next word's start.

    Returns:
        (end time in seconds, True if the full minimum-duration floor applies)
    """
    chunk_start = buffer[0].start
    chunk_end = buffer[-1].end
    floor_applied = False

    if chunk_end - chunk_start < options.min_chunk_duration:
        extended_end = chunk_start + options.min_chunk_duration
        stopped_early = False
        if options.prevent_overlap and next_start is not None:
            stopped_early = next_start < extended_end
            extended_end = max(chunk_end, min(extended_end, next_start))

        if audio_duration is None or extended_end <= audio_duration:
            chunk_end = extended_end
            floor_applied = not stopped_early
        else:
            logger.debug(
                "Chunk %d: keeping natural duration %.3fs to respect audio boundary",
                chunk_index, chunk_end - chunk_start,
            )

    if audio_duration is not None and chunk_end > audio_duration:
        logger.debug(
            "Chunk %d: capping end from %.3fs to %.3fs",
            chunk_index, chunk_end, audio_duration,
        )
        chunk_end = audio_duration

    return chunk_end, floor_applied


def _align_chunk_frames(
    start: float,
    end: float,
    options: GenerationOptions,
    audio_duration: Optional[float],
    floor_applied: bool,
) -> Tuple[int, int]:
    """Snap chunk boundaries to frames without breaking the duration rules.

    Boundaries round to the nearest frame, except that a floored chunk spans
    at least ceil(min_chunk_duration) frames and the end never passes the
    last whole frame of the audio.
    """
    frame_rate = options.frame_rate
    start_frame = time_to_frame(start, frame_rate)
    end_frame = time_to_frame(end, frame_rate)

    if floor_applied:
        min_frames = int(
            math.ceil(options.min_chunk_duration * frame_rate - _FRAME_EPSILON)
        )
        end_frame = max(end_frame, start_frame + min_frames)

    if audio_duration is not None:
        last_frame = int(math.floor(audio_duration * frame_rate + _FRAME_EPSILON))
        if end_frame > last_frame:
            end_frame = max(last_frame, start_frame)

    return start_frame, end_frame


def build_chunk(
    buffer: Sequence[WordTiming],
    chunk_index: int,
    options: GenerationOptions,
    audio_duration: Optional[float] = None,
    next_start: Optional[float] = None,
) -> CaptionChunk:
    """Turn a closed word buffer into a frame-aligned CaptionChunk.

    Args:
        buffer: The words of this chunk, in spoken order (non-empty).
        chunk_index: 0-based ordinal, used for the chunk id.
        options: Chunking options (frame rate, min duration, line width).
        audio_duration: Known audio length in seconds, or None.
        next_start: Start of the word following this chunk, or None.

    Returns:
        The finished chunk.
    """
    frame_rate = options.frame_rate
    chunk_end, floor_applied = _resolve_chunk_end(
        buffer, options, audio_duration, next_start, chunk_index
    )
    start_frame, end_frame = _align_chunk_frames(
        buffer[0].start, chunk_end, options, audio_duration, floor_applied
    )

    start_time = start_frame / frame_rate
    end_time = end_frame / frame_rate

    text = " ".join(w.word for w in buffer).strip()
    confidence = sum(w.effective_confidence for w in buffer) / len(buffer)

    boundaries = tuple(
        WordTiming(
            word=w.word,
            start=align_to_frame(w.start, frame_rate),
            end=align_to_frame(w.end, frame_rate),
            confidence=w.effective_confidence,
        )
        for w in buffer
    )

    return CaptionChunk(
        id="caption-{}".format(chunk_index),
        text=text,
        start_time=start_time,
        end_time=end_time,
        duration=end_time - start_time,
        word_count=len(buffer),
        char_count=len(text),
        lines=tuple(wrap_lines(text, options.max_chars_per_line)),
        confidence=confidence,
        word_boundaries=boundaries,
    )


# =============================================================================
# Chunking Pass
# =============================================================================


def chunk_words(
    words: Sequence[WordTiming],
    options: Optional[GenerationOptions] = None,
    audio_duration: Optional[float] = None,
) -> List[CaptionChunk]:
    """Group word timings into frame-aligned caption chunks.

    WHY: This is the single pass that turns raw speech-recognition output
    into the caption units the timeline and renderer consume.

    HOW: Accumulates words into a buffer and closes it whenever
    should_close_chunk() says so; build_chunk() does the timing and text
    work for each closed buffer.

    RULES:
    - Every input word lands in exactly one chunk, in order.
    - The last word always flushes the buffer, so growth is bounded.
    - An explicit audio_duration overrides options.audio_duration.

    Args:
        words: Word timings sorted by start time (caller's responsibility).
        options: Chunking options; defaults to DEFAULT_OPTIONS.
        audio_duration: Known audio length in seconds, or None.

    Returns:
        Ordered list of CaptionChunk objects (empty for empty input).
    """
    if options is None:
        options = DEFAULT_OPTIONS
    if audio_duration is None:
        audio_duration = options.audio_duration

    chunks = []  # type: List[CaptionChunk]
    buffer = []  # type: List[WordTiming]

    for i, word in enumerate(words):
        buffer.append(word)

        if not should_close_chunk(words, i, buffer, options):
            continue

        next_start = words[i + 1].start if i + 1 < len(words) else None
        chunks.append(
            build_chunk(buffer, len(chunks), options, audio_duration, next_start)
        )
        buffer = []

    return chunks
