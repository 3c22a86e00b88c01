"""Error taxonomy for the proposal pipeline.

Two families exist:

- Caller-correctable errors (``ValidationError``, ``SessionNotFound``) mean the
  request itself is out of contract and can be fixed by the caller.
- Generation errors (``MalformedOutput``, ``SchemaViolation``, ``ProviderError``)
  mean a stage failed internally. They carry the agent label and diagnostic
  detail and are never retried automatically.
"""

from typing import Any, Dict, List, Optional


class ProposalEngineError(Exception):
    """Base class for every error raised by the engine."""


# ===========================================
# Caller-correctable errors
# ===========================================

class ValidationError(ProposalEngineError):
    """Caller input is outside the accepted contract (length, format)."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class SessionNotFound(ProposalEngineError):
    """Enrichment session is unknown or has expired."""

    def __init__(self, session_id: str, ttl_minutes: float):
        self.session_id = session_id
        self.ttl_minutes = ttl_minutes
        super().__init__(
            f"Enrichment session not found or expired: {session_id}. "
            f"Sessions expire after {ttl_minutes:g} minutes of inactivity. "
            "Please start a new proposal generation."
        )


# ===========================================
# Generation errors
# ===========================================

class GenerationError(ProposalEngineError):
    """A pipeline stage failed; carries the agent label for diagnosis."""

    def __init__(self, agent: str, message: str):
        super().__init__(f"{agent}: {message}")
        self.agent = agent
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": type(self).__name__,
            "agent": self.agent,
            "message": self.message,
        }


class MalformedOutput(GenerationError):
    """LLM text could not be parsed as JSON."""

    def __init__(self, agent: str, parse_error: str, raw_excerpt: str):
        super().__init__(agent, f"returned invalid JSON: {parse_error}")
        self.parse_error = parse_error
        self.raw_excerpt = raw_excerpt

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["parse_error"] = self.parse_error
        data["raw_excerpt"] = self.raw_excerpt
        return data


class SchemaViolation(GenerationError):
    """JSON parsed but did not match the structural contract."""

    def __init__(self, agent: str, violations: List[Dict[str, str]]):
        summary = ", ".join(f"{v['path']}: {v['expected']}" for v in violations)
        super().__init__(agent, f"returned invalid output structure: {summary}")
        self.violations = violations

    @property
    def paths(self) -> List[str]:
        return [v["path"] for v in self.violations]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["violations"] = self.violations
        return data


class ProviderError(GenerationError):
    """Network, auth, rate-limit or timeout failure talking to an LLM."""


# ===========================================
# External collaborators
# ===========================================

class ExtractionError(ProposalEngineError):
    """Text or brand extraction service failed."""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message
