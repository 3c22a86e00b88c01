"""System prompt loading for the pipeline stages."""

import logging
from functools import lru_cache
from pathlib import Path

from proposal_engine.core.config import get_settings

logger = logging.getLogger(__name__)

PARSER_PROMPT = "parser.md"
ENRICHMENT_PROMPT = "enrichment.md"
DESIGNER_PROMPT = "designer.md"


@lru_cache()
def _read_prompt(path: Path) -> str:
    logger.debug(f"Loading system prompt from {path}")
    return path.read_text(encoding="utf-8")


def load_prompt(name: str) -> str:
    """
    Load a stage system prompt.

    Prompts are opaque configuration. They are read from ``PROMPTS_DIR`` when
    set, otherwise from the prompts bundled with the package.

    Args:
        name: Prompt file name (e.g. ``parser.md``)

    Returns:
        Prompt text
    """
    return _read_prompt(get_settings().prompts_dir / name)
