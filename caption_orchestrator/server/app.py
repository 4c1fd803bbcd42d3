"""FastAPI application with caption generation routes and OpenAPI docs.

WHY: The timeline editor (and tools like curl or n8n) need an HTTP API to
turn a transcription into captions and to download them in a specific
format. FastAPI provides automatic OpenAPI documentation and request
validation.

HOW: A single FastAPI app exposes four endpoints grouped by tags. POST
/captions parses the transcription, merges option overrides over the
deployment defaults, runs the caption pipeline and returns the response
JSON. POST /captions/export/{format_key} runs the same flow and returns one
formatter's file as a download. Caption generation is CPU-bound and fast,
so it runs inline in plain ``def`` handlers (FastAPI's threadpool), with
no background jobs.

RULES:
- All endpoints have OpenAPI descriptions on every parameter and response
- Error responses use a consistent ErrorResponse schema
- Invalid transcription, invalid options and failed generation are 422
- Unknown export format is 404
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from caption_chunker.models import GenerationOptions
from caption_orchestrator import __version__
from caption_orchestrator.adapters import InvalidTranscriptionError, parse_transcription
from caption_orchestrator.config import API_HOST, API_PORT, OUTPUT_STEM, load_default_options
from caption_orchestrator.core.ir import CaptionGenerationResponse
from caption_orchestrator.core.pipeline import generate_captions
from caption_orchestrator.formatters import FORMATTERS, create_formatter
from caption_orchestrator.server.models import (
    CaptionOptions,
    CaptionRequest,
    CaptionResponse,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Caption Orchestrator API",
    description=(
        "REST API that turns word-level transcription timings into "
        "frame-aligned, line-wrapped caption chunks with per-word timings "
        "for highlighting. Export as timeline track items, SRT or JSON."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_options(overrides: Optional[CaptionOptions]) -> GenerationOptions:
    """Merge request overrides over the environment defaults.

    RULES:
    - A misconfigured deployment default is a 500
    - Overrides that break an option rule are a 422
    """
    try:
        defaults = load_default_options()
    except ValueError as exc:
        logger.exception("Invalid caption defaults in environment")
        raise HTTPException(status_code=500, detail=str(exc))

    if overrides is None:
        return defaults

    fields = overrides.model_dump(exclude_none=True)
    try:
        return dataclasses.replace(defaults, **fields)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail="Invalid options: {}".format(exc))


def _generate(request: CaptionRequest) -> tuple:
    """Parse, generate and check the result; return (response, options)."""
    options = _build_options(request.options)

    try:
        analysis = parse_transcription(request.transcription)
    except InvalidTranscriptionError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    response = generate_captions(analysis, options)
    if not response.success:
        raise HTTPException(status_code=422, detail=response.error)
    return response, options


def _to_model(response: CaptionGenerationResponse) -> CaptionResponse:
    return CaptionResponse.model_validate(response.to_dict())


# ---------------------------------------------------------------------------
# Endpoints: Captions
# ---------------------------------------------------------------------------


@app.post(
    "/captions",
    response_model=CaptionResponse,
    response_model_exclude_none=True,
    tags=["captions"],
    summary="Generate captions from a transcription",
    description=(
        "Chunk the transcription's word timings into frame-aligned captions. "
        "Option fields left out use the deployment defaults."
    ),
    responses={
        422: {"model": ErrorResponse, "description": "Invalid transcription, options, or no words"},
    },
)
def create_captions(request: CaptionRequest) -> CaptionResponse:
    response, _ = _generate(request)
    return _to_model(response)


@app.post(
    "/captions/export/{format_key}",
    tags=["captions"],
    summary="Generate captions and download one output format",
    description=(
        "Same input as POST /captions. Returns the selected formatter's "
        "output file as an attachment."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "Unknown format"},
        422: {"model": ErrorResponse, "description": "Invalid transcription, options, or no words"},
    },
)
def export_captions(format_key: str, request: CaptionRequest) -> Response:
    if format_key not in FORMATTERS:
        available = ", ".join(sorted(FORMATTERS.keys()))
        raise HTTPException(
            status_code=404,
            detail="Unknown format '{}'. Available: {}".format(format_key, available),
        )

    response, options = _generate(request)
    formatter = create_formatter(format_key, frame_rate=options.frame_rate)
    output = formatter.format(response)[0]
    filename = "{}{}".format(OUTPUT_STEM, output.suffix)

    return Response(
        content=output.content,
        media_type=output.media_type,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


# ---------------------------------------------------------------------------
# Endpoints: Formats
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
    description=(
        "Returns all supported export formats with their identifiers, "
        "human-readable names, and file suffixes."
    ),
)
def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(key=key, name=formatter.name, suffix=formatter.suffix))
    return result


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the caption-api console script."""
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
