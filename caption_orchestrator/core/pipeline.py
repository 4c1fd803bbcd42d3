"""Caption generation pipeline: transcription analysis in, caption response out.

WHY: The timeline editor asks for captions for a piece of audio and wants
either a complete caption response or a clear failure message, never an
exception. This module is that caller-facing wrapper around the caption
engine: it checks that a (possibly reused) transcription still matches the
audio, resolves the audio duration, runs the chunker, and summarizes.

HOW:
  1. Reject an analysis the transcription service itself marked failed.
  2. Reject a reused analysis whose duration drifted from the known audio
     duration by more than the tolerance.
  3. Flatten word timings; reject an analysis with no words.
  4. Resolve audio duration: options > analysis > latest word end.
  5. Run generate_chunks() and compute summary statistics.

RULES:
- generate_captions() never raises CaptionGenerationError or ValueError;
  those become CaptionGenerationResponse.failure(message)
- Failures are logged with logger.exception, successes at INFO
- The resolved audio duration is passed to the engine as a hard ceiling
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional

from caption_chunker import generate_chunks
from caption_chunker.models import GenerationOptions, WordTiming
from caption_orchestrator.config import DURATION_TOLERANCE_S, load_default_options
from caption_orchestrator.core.ir import CaptionGenerationResponse, TranscriptionAnalysis

logger = logging.getLogger(__name__)


class CaptionGenerationError(Exception):
    """Raised when captions cannot be generated from a transcription.

    RULES:
    - message is suitable for showing to the end user
    """


class TranscriptionMismatchError(CaptionGenerationError):
    """Raised when a reused transcription does not match the audio duration.

    WHY: Editors cache transcriptions. After the voice-over is regenerated,
    the cached word timings describe different audio and would produce
    captions that drift out of sync. The caller must re-transcribe.
    """


def check_compatibility(
    analysis: TranscriptionAnalysis,
    audio_duration: Optional[float],
    tolerance_s: float = DURATION_TOLERANCE_S,
) -> None:
    """Raise TranscriptionMismatchError if the analysis belongs to other audio.

    Nothing is checked unless both durations are known.
    """
    if not audio_duration or not analysis.total_duration:
        return
    drift = abs(analysis.total_duration - audio_duration)
    if drift > tolerance_s:
        raise TranscriptionMismatchError(
            "Duration mismatch: transcription={:.2f}s, audio={:.2f}s "
            "(tolerance {:.1f}s). Re-transcribe the current audio.".format(
                analysis.total_duration, audio_duration, tolerance_s
            )
        )


def resolve_audio_duration(
    options: GenerationOptions,
    analysis: TranscriptionAnalysis,
    words: List[WordTiming],
) -> Optional[float]:
    """Pick the audio duration: known from the caller, reported, or inferred."""
    if options.audio_duration:
        return options.audio_duration
    if analysis.total_duration:
        return analysis.total_duration
    if words:
        return max(w.end for w in words) or None
    return None


def _run(
    analysis: TranscriptionAnalysis,
    options: GenerationOptions,
    tolerance_s: float,
) -> CaptionGenerationResponse:
    if not analysis.success:
        raise CaptionGenerationError(
            "Transcription analysis failed: {}".format(analysis.error or "unknown error")
        )

    check_compatibility(analysis, options.audio_duration, tolerance_s)

    words = analysis.all_words()
    if not words:
        raise CaptionGenerationError("No word timings available from transcription")

    audio_duration = resolve_audio_duration(options, analysis, words)
    logger.info(
        "Chunking %d words (audio duration %.2fs, source: %s)",
        len(words),
        audio_duration or 0.0,
        "caller" if options.audio_duration else "transcription",
    )

    chunks, metrics = generate_chunks(words, options, audio_duration)

    total_words = sum(c.word_count for c in chunks)
    if audio_duration:
        total_duration = audio_duration
    else:
        total_duration = chunks[-1].end_time if chunks else 0.0

    return CaptionGenerationResponse(
        success=True,
        captions=chunks,
        total_chunks=len(chunks),
        total_duration=total_duration,
        avg_words_per_chunk=total_words / len(chunks) if chunks else 0.0,
        quality_metrics=metrics,
    )


def generate_captions(
    analysis: TranscriptionAnalysis,
    options: Optional[GenerationOptions] = None,
    tolerance_s: Optional[float] = None,
) -> CaptionGenerationResponse:
    """Generate frame-aligned captions for a transcription analysis.

    WHY: Single entry point for the API, the CLI and any in-process caller.

    HOW: Runs the pipeline steps listed in the module docstring and turns
    expected failures into a failure response.

    Args:
        analysis: Parsed upstream transcription.
        options: Chunking options; defaults come from the environment.
        tolerance_s: Allowed duration drift for a reused analysis.
            Default: DURATION_TOLERANCE_S.

    Returns:
        A successful CaptionGenerationResponse, or a failure response with
        an error message.
    """
    started = time.monotonic()
    if tolerance_s is None:
        tolerance_s = DURATION_TOLERANCE_S

    try:
        if options is None:
            options = load_default_options()
        response = _run(analysis, options, tolerance_s)
    except (CaptionGenerationError, ValueError) as exc:
        logger.exception("Caption generation failed")
        return CaptionGenerationResponse.failure(str(exc))

    logger.info(
        "Generated %d caption chunks in %.1fms",
        response.total_chunks,
        (time.monotonic() - started) * 1000,
    )
    return response
