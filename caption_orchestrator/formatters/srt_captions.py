"""SRT caption formatter.

WHY: Editors and players outside the timeline need a plain subtitle file.
SRT is the lowest common denominator and maps directly onto caption chunks.

HOW: One SRT block per chunk: 1-based index, "start --> end" timecode line,
then the chunk's display lines. Chunk times are already frame-aligned and
floored to the minimum duration by the chunker, so no timing adjustment
happens here.

RULES:
- Registered as "srt_captions" in the FORMATTERS dict
- Timecodes are HH:MM:SS,mmm, rounded to the nearest millisecond
- Empty response gives an empty string
"""

from typing import List

from caption_orchestrator.core.ir import CaptionGenerationResponse
from caption_orchestrator.formatters.base import BaseFormatter, FormatterOutput


def seconds_to_srt_time(seconds: float) -> str:
    """Convert seconds to SRT timestamp format: HH:MM:SS,mmm"""
    total_ms = int(round(seconds * 1000))
    hours, rest = divmod(total_ms, 3600000)
    minutes, rest = divmod(rest, 60000)
    secs, millis = divmod(rest, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


class SRTCaptionFormatter(BaseFormatter):
    """Formatter that produces one SRT file from caption chunks."""

    @property
    def name(self) -> str:
        return "SRT Captions"

    @property
    def suffix(self) -> str:
        return "-captions.srt"

    def format(self, response: CaptionGenerationResponse) -> List[FormatterOutput]:
        lines = []  # type: List[str]

        for i, chunk in enumerate(response.captions, 1):
            lines.append(str(i))
            lines.append("{} --> {}".format(
                seconds_to_srt_time(chunk.start_time),
                seconds_to_srt_time(chunk.end_time),
            ))
            lines.extend(chunk.lines)
            lines.append("")

        return [
            FormatterOutput(
                suffix=self.suffix,
                content="\n".join(lines),
                media_type="application/x-subrip",
            )
        ]
