"""Output formatter registry: pluggable format hub.

WHY: The CLI and API layers need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["srt_captions"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API paths)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be constructible with no arguments
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from caption_orchestrator.formatters.caption_json import CaptionJSONFormatter
from caption_orchestrator.formatters.srt_captions import SRTCaptionFormatter
from caption_orchestrator.formatters.track_items import TrackItemsFormatter

if TYPE_CHECKING:
    from caption_orchestrator.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "track_items": TrackItemsFormatter,
    "srt_captions": SRTCaptionFormatter,
    "caption_json": CaptionJSONFormatter,
}


def create_formatter(key: str, frame_rate: Optional[float] = None) -> BaseFormatter:
    """Instantiate a registered formatter.

    Frame-based formatters are built at frame_rate when one is given, so
    their frame numbers match the rate the captions were aligned to.

    Raises:
        KeyError: If key is not registered.
    """
    formatter_cls = FORMATTERS[key]
    if frame_rate is not None and formatter_cls is TrackItemsFormatter:
        return TrackItemsFormatter(frame_rate=frame_rate)
    return formatter_cls()
