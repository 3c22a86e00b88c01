"""Integrations module - External service connectors."""

from proposal_engine.integrations.llm import LLMService, ModelProfile
from proposal_engine.integrations.extraction import (
    TextExtractionService,
    BrandExtractionService,
)

__all__ = [
    "LLMService",
    "ModelProfile",
    "TextExtractionService",
    "BrandExtractionService",
]
