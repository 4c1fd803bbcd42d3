"""Adapter modules for converting external payloads into the IR.

WHY: The transcription service's JSON shapes differ from the typed IR the
caption pipeline consumes. Adapters bridge these representations so each
side can evolve independently.

HOW: Each adapter module provides a conversion function that validates the
external payload and maps it to IR dataclasses.

RULES:
- Adapters are pure data transformations: no I/O, no side effects.
- Each adapter lives in its own module under this package.
- Adapters must not modify the source payload.
"""

from caption_orchestrator.adapters.transcription_adapter import (
    InvalidTranscriptionError,
    parse_transcription,
)

__all__ = ["InvalidTranscriptionError", "parse_transcription"]
