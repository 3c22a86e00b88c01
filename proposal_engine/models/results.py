"""Result models returned by the orchestrator entry points."""

from typing import Dict, List, Optional
from pydantic import Field

from proposal_engine.models.base import CamelModel
from proposal_engine.models.enums import GenerationStatus
from proposal_engine.models.agents import FinalProposal
from proposal_engine.models.proposal import ProposalData


class GenerationResult(CamelModel):
    """
    Tagged result of StartGeneration / ContinueEnrichment.

    ``complete`` carries ``proposal`` and ``variant_reasoning``;
    ``needs_enrichment`` carries ``enrichment_message`` and ``session_id``.
    """
    status: GenerationStatus
    proposal: Optional[ProposalData] = None
    variant_reasoning: Optional[Dict[str, str]] = None
    enrichment_message: Optional[str] = None
    session_id: Optional[str] = None

    @classmethod
    def complete(cls, final: FinalProposal) -> "GenerationResult":
        return cls(
            status=GenerationStatus.COMPLETE,
            proposal=final.proposal,
            variant_reasoning=final.variant_reasoning,
        )

    @classmethod
    def needs_enrichment(cls, message: str, session_id: str) -> "GenerationResult":
        return cls(
            status=GenerationStatus.NEEDS_ENRICHMENT,
            enrichment_message=message,
            session_id=session_id,
        )


class SessionStats(CamelModel):
    """Operational view of the session store."""
    active_sessions: int = Field(..., description="Sessions currently held")
    session_ttl_minutes: float = Field(..., description="Idle lifetime in minutes")


class ExtractedDocument(CamelModel):
    """Plain text returned by the text-extraction service."""
    text: str
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    length: int = 0


class BrandPalette(CamelModel):
    """Colours (and optional favicon) returned by the brand-extraction service."""
    url: str
    colors: List[str] = Field(default_factory=list)
    favicon: Optional[str] = None
