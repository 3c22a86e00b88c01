"""Completion detection for the enrichment conversation.

The enrichment model signals that it is done in free-form prose. A response
is a completion candidate when it contains a completion phrase or a literal
JSON marker, and additionally carries a JSON block with the enriched
content. Whether the block actually validates is decided by the caller.
"""

import re

from pydantic import BaseModel, ConfigDict


COMPLETION_PATTERNS = (
    re.compile(r"all\s+sections\s+(are\s+)?(now\s+)?complete", re.IGNORECASE),
    re.compile(r"enrichment\s+(is\s+)?(now\s+)?complete", re.IGNORECASE),
    re.compile(r"ready\s+(to\s+)?(pass|proceed)\s+to\s+(the\s+)?designer", re.IGNORECASE),
    re.compile(r"passing\s+(this\s+)?to\s+(the\s+)?designer\s+agent", re.IGNORECASE),
)

COMPLETION_MARKERS = (
    '"status": "complete"',
    '"readyForDesigner": true',
    '"isComplete": true',
)

SECTION_KEYS = ("executiveSummary", "needs")

_FENCED_BLOCK = re.compile(r"```([^\n`]*)\r?\n?(.*?)```", re.DOTALL)


class CompletionSignal(BaseModel):
    """Evidence found in an assistant response."""
    model_config = ConfigDict(frozen=True)

    has_phrase: bool
    has_marker: bool
    has_json_block: bool

    @property
    def is_candidate(self) -> bool:
        return (self.has_phrase and self.has_json_block) or (
            self.has_marker and self.has_json_block
        )


def _has_json_block(text: str) -> bool:
    if "```json" in text:
        return True
    for _, body in _FENCED_BLOCK.findall(text):
        if any(key in body for key in SECTION_KEYS):
            return True
    return False


def detect_completion(text: str) -> CompletionSignal:
    """Classify an assistant response against the completion heuristic."""
    return CompletionSignal(
        has_phrase=any(pattern.search(text) for pattern in COMPLETION_PATTERNS),
        has_marker=any(marker in text for marker in COMPLETION_MARKERS),
        has_json_block=_has_json_block(text),
    )
