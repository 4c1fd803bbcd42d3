"""Caption JSON formatter: the full generation response as a file.

WHY: The timeline editor caches caption responses and the CLI user wants
the same payload the API returns. Writing the response verbatim keeps one
wire shape everywhere.

RULES:
- Registered as "caption_json" in the FORMATTERS dict
- Content is CaptionGenerationResponse.to_dict(), pretty-printed
"""

from __future__ import annotations

import json
from typing import List

from caption_orchestrator.core.ir import CaptionGenerationResponse
from caption_orchestrator.formatters.base import BaseFormatter, FormatterOutput


class CaptionJSONFormatter(BaseFormatter):
    @property
    def name(self) -> str:
        return "Caption JSON"

    @property
    def suffix(self) -> str:
        return "-captions.json"

    def format(self, response: CaptionGenerationResponse) -> List[FormatterOutput]:
        content = json.dumps(response.to_dict(), indent=2, ensure_ascii=False)
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content,
                media_type="application/json",
            )
        ]
