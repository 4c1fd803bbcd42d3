"""Abstract base formatter and output container.

WHY: Every caption output consumes the same CaptionGenerationResponse but
produces different file content. This base class enforces a consistent
interface so the CLI and the API can work with any formatter generically.

HOW: BaseFormatter is an ABC with three requirements: a ``name`` property,
a ``suffix`` property and a ``format()`` method. FormatterOutput is a plain
dataclass that bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name``, ``suffix`` and ``format()``
- ``format()`` returns a list; every current formatter returns one item
- ``suffix`` starts with a hyphen, e.g. ``"-captions.srt"``
- The caller is responsible for prepending the source filename stem
- ``format()`` expects a successful response; callers check ``success``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from caption_orchestrator.core.ir import CaptionGenerationResponse


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-captions.srt"`` → ``"interview-captions.srt"``.
        content: The file content as a string.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all caption output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement name, suffix and format()
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SRT Captions'."""

    @property
    @abstractmethod
    def suffix(self) -> str:
        """Suffix of the (first) output file, e.g. '-captions.srt'."""

    @abstractmethod
    def format(self, response: CaptionGenerationResponse) -> list[FormatterOutput]:
        """Convert a caption response into one or more output files.

        Args:
            response: A successful caption generation response.

        Returns:
            List of FormatterOutput objects, each containing a file suffix,
            content string, and MIME type.
        """
