"""Default options and heuristic constants for caption chunking.

WHY: The chunking heuristics (5 words, 0.833 s, 42 chars, the 0.3 s pause)
are tuning values, not derived ones. Collecting them here as named constants
makes every heuristic easy to find and lets callers start from a shared,
immutable default instead of a mutable global.

HOW: Plain module-level constants plus two frozen records,
DEFAULT_OPTIONS and DEFAULT_METRIC_WEIGHTS. Anything that needs a variant
uses dataclasses.replace() on the default.

RULES:
- Never mutate these values at runtime (the records are frozen anyway).
- NATURAL_PAUSE_S and MIN_WORDS_FOR_NATURAL_BREAK work together: a pause
  or terminal punctuation only closes a chunk that already holds 3 words.
"""

import re

from .models import DEFAULT_WORD_CONFIDENCE, GenerationOptions, MetricWeights

# Gap (seconds) before the next word that counts as a natural pause
NATURAL_PAUSE_S = 0.3

# Pause and punctuation breaks only apply once the buffer holds this many words
MIN_WORDS_FOR_NATURAL_BREAK = 3

# Sentence-ending punctuation on the current word
TERMINAL_PUNCTUATION_RE = re.compile(r"[.!?]$")

# Display lines per caption; anything beyond is dropped from `lines`
MAX_DISPLAY_LINES = 2

DEFAULT_OPTIONS = GenerationOptions()

DEFAULT_METRIC_WEIGHTS = MetricWeights()

__all__ = [
    "DEFAULT_METRIC_WEIGHTS",
    "DEFAULT_OPTIONS",
    "DEFAULT_WORD_CONFIDENCE",
    "MAX_DISPLAY_LINES",
    "MIN_WORDS_FOR_NATURAL_BREAK",
    "NATURAL_PAUSE_S",
    "TERMINAL_PUNCTUATION_RE",
]
