"""Quality metrics for a finished caption chunk sequence.

WHY: The editor surfaces a confidence / timing / readability summary next
to generated captions so a user can judge whether a re-run or manual edit
is worthwhile. The numbers are diagnostic only and never feed back into
chunk generation.

HOW: One pass over the chunks per metric:
  avg_confidence    word-weighted mean of every word boundary's confidence
  timing_precision  100 minus a frame-misalignment penalty and an audio
                    overshoot penalty (capped), floored at 0
  readability_score 100 adjusted per chunk for word count, text density and
                    duration, clamped to [0, 100]

RULES:
- Empty input gives QualityMetrics.empty() (all zeros).
- All three values are rounded to 2 decimals.
- Penalty constants come from MetricWeights; defaults match production.
"""

from typing import Optional, Sequence

from .defaults import DEFAULT_METRIC_WEIGHTS, DEFAULT_OPTIONS
from .models import CaptionChunk, GenerationOptions, MetricWeights, QualityMetrics


def _frame_misalignment(timestamp: float, frame_duration: float) -> float:
    """Distance from a timestamp to the nearest frame boundary."""
    remainder = timestamp % frame_duration
    return min(remainder, frame_duration - remainder)


def _avg_confidence(chunks: Sequence[CaptionChunk]) -> float:
    confidences = [w.effective_confidence for c in chunks for w in c.word_boundaries]
    if not confidences:
        return 0.0
    return sum(confidences) / len(confidences)


def _timing_precision(
    chunks: Sequence[CaptionChunk],
    audio_duration: Optional[float],
    options: GenerationOptions,
    weights: MetricWeights,
) -> float:
    frame_duration = options.frame_duration

    misalignment = 0.0
    for chunk in chunks:
        misalignment += _frame_misalignment(chunk.start_time, frame_duration)
        misalignment += _frame_misalignment(chunk.end_time, frame_duration)

    overshoot_penalty = 0.0
    if audio_duration:
        last_end = max(c.end_time for c in chunks)
        if last_end > audio_duration:
            overshoot_penalty = min(
                weights.max_overshoot_penalty,
                (last_end - audio_duration) * weights.overshoot_weight,
            )

    score = (
        100.0
        - (misalignment / len(chunks)) * weights.misalignment_weight
        - overshoot_penalty
    )
    return max(0.0, score)


def _readability_score(
    chunks: Sequence[CaptionChunk],
    options: GenerationOptions,
    weights: MetricWeights,
) -> float:
    points = 100.0
    max_chunk_chars = 2 * options.max_chars_per_line

    for chunk in chunks:
        if chunk.word_count < weights.min_words:
            points -= weights.too_few_words_penalty
        if chunk.word_count > weights.max_words:
            points -= weights.too_many_words_penalty
        if chunk.char_count > max_chunk_chars:
            points -= weights.dense_text_penalty

        if weights.comfortable_min_duration <= chunk.duration <= weights.comfortable_max_duration:
            points += weights.comfortable_duration_bonus
        elif (chunk.duration < options.min_chunk_duration
                or chunk.duration > weights.max_tolerable_duration):
            points -= weights.uncomfortable_duration_penalty

    return max(0.0, min(100.0, points))


def compute_metrics(
    chunks: Sequence[CaptionChunk],
    audio_duration: Optional[float] = None,
    options: Optional[GenerationOptions] = None,
    weights: Optional[MetricWeights] = None,
) -> QualityMetrics:
    """Compute QualityMetrics for a chunk sequence.

    Args:
        chunks: Chunks produced by chunk_words().
        audio_duration: Known audio length in seconds, or None.
        options: The options the chunks were generated with (frame rate,
            min duration and line width feed the scores).
        weights: Heuristic constants; defaults to DEFAULT_METRIC_WEIGHTS.

    Returns:
        Rounded QualityMetrics, or all zeros for an empty sequence.
    """
    if not chunks:
        return QualityMetrics.empty()

    if options is None:
        options = DEFAULT_OPTIONS
    if weights is None:
        weights = DEFAULT_METRIC_WEIGHTS

    return QualityMetrics(
        avg_confidence=round(_avg_confidence(chunks), 2),
        timing_precision=round(
            _timing_precision(chunks, audio_duration, options, weights), 2
        ),
        readability_score=round(_readability_score(chunks, options, weights), 2),
    )
