"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate JSON Schema that
appears in the /docs UI.

HOW: One request model (transcription payload plus option overrides) and
response models mirroring CaptionGenerationResponse.to_dict(). All models
include Field descriptions for rich OpenAPI docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Option fields are all optional; unset fields keep the deployment defaults
- Cross-field option rules (max >= min duration) are checked by
  GenerationOptions, not here
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CaptionOptions(BaseModel):
    """Per-request overrides of the caption generation options.

    RULES:
    - Fields left unset fall back to the CAPTION_* environment defaults
    - audio_duration, when given, is a hard ceiling for every chunk end
    """

    max_words_per_chunk: Optional[int] = Field(
        default=None, ge=1,
        description="Maximum words per caption chunk.",
    )
    min_chunk_duration: Optional[float] = Field(
        default=None, gt=0,
        description="Minimum chunk display duration in seconds.",
    )
    max_chunk_duration: Optional[float] = Field(
        default=None, gt=0,
        description="Chunk span in seconds that forces a break.",
    )
    frame_rate: Optional[float] = Field(
        default=None, gt=0,
        description="Video frame rate that chunk boundaries are aligned to.",
    )
    max_chars_per_line: Optional[int] = Field(
        default=None, ge=1,
        description="Maximum characters per caption line.",
    )
    audio_duration: Optional[float] = Field(
        default=None, gt=0,
        description="Known audio duration in seconds.",
    )
    prevent_overlap: Optional[bool] = Field(
        default=None,
        description="Stop minimum-duration extensions at the next word's start.",
    )


class CaptionRequest(BaseModel):
    """Caption generation request body.

    WHY: The editor posts the transcription it already has (or just
    received) together with its caption settings.
    """

    transcription: Any = Field(
        description=(
            "Upstream transcription: a word-timing analysis with "
            "'segment_timings', a verbose transcription with 'words', or a "
            "bare list of word objects."
        ),
    )
    options: Optional[CaptionOptions] = Field(
        default=None,
        description="Caption option overrides.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "transcription": {
                    "duration": 1.6,
                    "words": [
                        {"word": "Hello", "start": 0.0, "end": 0.4, "confidence": 0.98},
                        {"word": "there,", "start": 0.45, "end": 0.8},
                        {"word": "friend.", "start": 0.9, "end": 1.5},
                    ],
                },
                "options": {"frame_rate": 30, "max_words_per_chunk": 5},
            }
        ]
    }}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class WordBoundaryModel(BaseModel):
    word: str = Field(description="Word text, punctuation included.")
    start: float = Field(description="Frame-aligned start time in seconds.")
    end: float = Field(description="Frame-aligned end time in seconds.")
    confidence: float = Field(description="Recognition confidence (0.9 when unknown).")


class CaptionChunkModel(BaseModel):
    """One caption chunk as returned to the editor."""

    id: str = Field(description="Chunk id, 'caption-<index>'.")
    text: str = Field(description="Space-joined chunk text.")
    start_time: float = Field(description="Frame-aligned start time in seconds.")
    end_time: float = Field(description="Frame-aligned end time in seconds.")
    duration: float = Field(description="end_time - start_time in seconds.")
    word_count: int = Field(description="Number of words in the chunk.")
    char_count: int = Field(description="Length of text in characters.")
    lines: List[str] = Field(description="One or two display lines.")
    confidence: float = Field(description="Mean word confidence.")
    word_boundaries: List[WordBoundaryModel] = Field(
        description="Per-word frame-aligned timings for highlighting.",
    )


class QualityMetricsModel(BaseModel):
    avg_confidence: float = Field(description="Mean word confidence.")
    timing_precision: float = Field(description="Frame alignment score, 0-100.")
    readability_score: float = Field(description="Readability heuristic score, 0-100.")


class CaptionResponse(BaseModel):
    """Caption generation result.

    RULES:
    - error is only present when success is false
    """

    success: bool = Field(description="Whether captions were generated.")
    captions: List[CaptionChunkModel] = Field(description="Caption chunks in order.")
    total_chunks: int = Field(description="Number of caption chunks.")
    total_duration: float = Field(description="Resolved audio duration in seconds.")
    avg_words_per_chunk: float = Field(description="Mean words per chunk.")
    quality_metrics: QualityMetricsModel = Field(description="Diagnostic quality scores.")
    error: Optional[str] = Field(default=None, description="Failure message.")


class FormatInfo(BaseModel):
    """Description of an available output format.

    WHY: Clients can query the /formats endpoint to discover which
    export formats are supported and what they produce.
    """

    key: str = Field(description="Format identifier used in export requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-captions.srt').")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response.

    WHY: Load balancers and orchestrators need a simple endpoint
    to verify the service is alive and ready.
    """

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
