"""Core module - Configuration, errors and fixed content."""

from proposal_engine.core.config import get_settings, Settings
from proposal_engine.core.exceptions import (
    ProposalEngineError,
    ValidationError,
    SessionNotFound,
    GenerationError,
    MalformedOutput,
    SchemaViolation,
    ProviderError,
    ExtractionError,
)

__all__ = [
    "get_settings",
    "Settings",
    "ProposalEngineError",
    "ValidationError",
    "SessionNotFound",
    "GenerationError",
    "MalformedOutput",
    "SchemaViolation",
    "ProviderError",
    "ExtractionError",
]
