"""Configuration defaults, environment overrides, and .env loading.

WHY: Caption defaults (words per chunk, frame rate, line width) differ per
deployment: a 24 fps film pipeline and a 30 fps social pipeline should not
need code changes. Keeping every tunable in one module, overridable from
the environment, makes them easy to find and to change safely.

HOW: python-dotenv loads the .env file on import. Defaults are read from
os.environ into module-level constants. load_default_options() turns them
into a validated GenerationOptions record.

RULES:
- Every default can be overridden via an environment variable
- Non-numeric values raise ValueError with the variable name in the message
- Option constraints are enforced by GenerationOptions itself
- DURATION_TOLERANCE_S is how far a reused transcription's duration may
  drift from the known audio duration before it counts as stale
"""

from __future__ import annotations

import os
from typing import Callable, TypeVar

from dotenv import load_dotenv

from caption_chunker.models import GenerationOptions

# Load .env from the project root (where the app is run from)
load_dotenv()

_T = TypeVar("_T")


def _env(name: str, default: str, cast: Callable[[str], _T]) -> _T:
    """Read and convert an environment variable, naming it on failure."""
    raw = os.getenv(name, default).strip()
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(
            "Invalid value for {}: {!r} is not a valid {}".format(
                name, raw, cast.__name__
            )
        )


# ---------------------------------------------------------------------------
# Caption generation defaults
# ---------------------------------------------------------------------------

# Raw strings, parsed lazily by load_default_options() so a bad value fails
# with the variable name at call time instead of breaking the import.
CAPTION_MAX_WORDS_PER_CHUNK = os.getenv("CAPTION_MAX_WORDS_PER_CHUNK", "5")
CAPTION_MIN_CHUNK_DURATION = os.getenv("CAPTION_MIN_CHUNK_DURATION", "0.833")
CAPTION_MAX_CHUNK_DURATION = os.getenv("CAPTION_MAX_CHUNK_DURATION", "3.5")
CAPTION_FRAME_RATE = os.getenv("CAPTION_FRAME_RATE", "30")
CAPTION_MAX_CHARS_PER_LINE = os.getenv("CAPTION_MAX_CHARS_PER_LINE", "42")

DURATION_TOLERANCE_S = _env("DURATION_TOLERANCE_S", "2.0", float)
"""Allowed drift between a reused transcription and the known audio duration."""

OUTPUT_STEM = "captions"
"""Base filename for outputs with no source file (stdin input, API downloads)."""

# ---------------------------------------------------------------------------
# Service configuration
# ---------------------------------------------------------------------------

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = _env("API_PORT", "8000", int)
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()


def load_default_options() -> GenerationOptions:
    """Build the default GenerationOptions from the environment.

    WHY: The CLI and the API both start from the deployment's defaults and
    override individual fields per request.

    HOW: Reads the CAPTION_* variables at call time (so tests and
    long-running processes see updates) and constructs a GenerationOptions.

    RULES:
    - Raises ValueError if a variable is not a number
    - Raises ValueError if the values violate the option constraints
    - audio_duration is never a deployment default (always per request)
    """
    return GenerationOptions(
        max_words_per_chunk=_env(
            "CAPTION_MAX_WORDS_PER_CHUNK", CAPTION_MAX_WORDS_PER_CHUNK, int
        ),
        min_chunk_duration=_env(
            "CAPTION_MIN_CHUNK_DURATION", CAPTION_MIN_CHUNK_DURATION, float
        ),
        max_chunk_duration=_env(
            "CAPTION_MAX_CHUNK_DURATION", CAPTION_MAX_CHUNK_DURATION, float
        ),
        frame_rate=_env("CAPTION_FRAME_RATE", CAPTION_FRAME_RATE, float),
        max_chars_per_line=_env(
            "CAPTION_MAX_CHARS_PER_LINE", CAPTION_MAX_CHARS_PER_LINE, int
        ),
    )
