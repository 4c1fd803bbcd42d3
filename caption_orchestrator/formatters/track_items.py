"""Timeline text-track formatter: caption chunks as editor track items.

WHY: The video editor imports captions as a text track. Each caption chunk
becomes one "text" item positioned in integer frames, carrying its display
lines and per-word boundaries so the renderer can highlight the spoken
word.

HOW: Chunk start/end times are converted to frames with the same half-up
rounding the chunker aligned them with, so start + duration of one item
lands exactly on the frame the chunk ends. Styling is configuration on the
formatter instance, not part of the caption data.

RULES:
- Registered as "track_items" in the FORMATTERS dict
- Item ids are "<track_id>-<index>", index 0-based
- start and duration are integer frames at the formatter's frame rate
- details.isCaptionTrack is always true; metadata.frameAligned is always true
- Output is a JSON array, one item per chunk (empty array for no chunks)
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from caption_chunker import time_to_frame
from caption_chunker.models import CaptionChunk
from caption_orchestrator.core.ir import CaptionGenerationResponse
from caption_orchestrator.formatters.base import BaseFormatter, FormatterOutput

DEFAULT_TRACK_ID = "ai-captions"

DEFAULT_STYLE = {
    "fontSize": 24,
    "fontFamily": "Arial, sans-serif",
    "fontWeight": "bold",
    "color": "#FFFFFF",
    "activeWordColor": "#FFD700",
    "highlightColor": "rgba(0, 0, 0, 0.7)",
    "textAlign": "center",
    "position": "bottom",
    "padding": 8,
}  # type: Dict[str, Any]


class TrackItemsFormatter(BaseFormatter):
    """Formatter that produces timeline text-track items.

    Configurable via constructor: track_id, frame_rate and style overrides
    (merged over DEFAULT_STYLE).
    """

    def __init__(
        self,
        track_id: str = DEFAULT_TRACK_ID,
        frame_rate: float = 30.0,
        style: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.track_id = track_id
        self.frame_rate = frame_rate
        self.style = dict(DEFAULT_STYLE)
        if style:
            self.style.update(style)

    @property
    def name(self) -> str:
        return "Timeline Track Items"

    @property
    def suffix(self) -> str:
        return "-captions-track.json"

    def build_items(self, chunks: List[CaptionChunk]) -> List[Dict[str, Any]]:
        """Convert caption chunks to track item dicts."""
        items = []  # type: List[Dict[str, Any]]
        for index, chunk in enumerate(chunks):
            start_frame = time_to_frame(chunk.start_time, self.frame_rate)
            end_frame = time_to_frame(chunk.end_time, self.frame_rate)
            items.append({
                "id": "{}-{}".format(self.track_id, index),
                "type": "text",
                "start": start_frame,
                "duration": end_frame - start_frame,
                "details": {
                    "text": chunk.text,
                    "lines": list(chunk.lines),
                    "isCaptionTrack": True,
                    "confidence": chunk.confidence,
                    "wordBoundaries": [w.to_dict() for w in chunk.word_boundaries],
                    "style": dict(self.style),
                },
                "metadata": {
                    "source": "ai-generated",
                    "frameAligned": True,
                    "qualityScore": chunk.confidence,
                },
            })
        return items

    def format(self, response: CaptionGenerationResponse) -> List[FormatterOutput]:
        items = self.build_items(response.captions)
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=json.dumps(items, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]
