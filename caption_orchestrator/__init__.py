"""Caption Orchestrator: word timings in, frame-aligned captions out.

WHY: Speech recognition returns word-level timings that no video timeline
can use directly. This package validates the transcription response, runs
the caption_chunker engine over it, and converts the result to the
outputs downstream tools consume (timeline track items, SRT, JSON).

HOW: Three-stage pipeline: ingest (transcription adapter), generate
(core pipeline around caption_chunker), format (pluggable formatters).
The HTTP API and the CLI are thin shells over those stages.

RULES:
- All formatters consume the same CaptionGenerationResponse
- Adding a new output format = one new formatter module, no core changes
- The IR is the stable contract between generation and formatting
"""

__version__ = "0.1.0"
