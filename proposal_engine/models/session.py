"""Enrichment session models."""

from datetime import datetime
from typing import List
from pydantic import Field

from proposal_engine.models.base import CamelModel
from proposal_engine.models.enums import TurnRole
from proposal_engine.models.agents import MissingOrWeakItem
from proposal_engine.models.proposal import ProposalDraft


class ConversationTurn(CamelModel):
    """One message of the enrichment conversation."""
    role: TurnRole
    content: str

    @classmethod
    def user(cls, content: str) -> "ConversationTurn":
        return cls(role=TurnRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "ConversationTurn":
        return cls(role=TurnRole.ASSISTANT, content=content)


class EnrichmentSession(CamelModel):
    """In-flight enrichment conversation owned by the session store."""
    session_id: str = Field(..., description="Opaque session identifier")
    partial_content: ProposalDraft = Field(..., description="Parser output being enriched")
    gaps: List[MissingOrWeakItem] = Field(default_factory=list, description="Sections to fix")
    transcript: List[ConversationTurn] = Field(
        default_factory=list,
        description="Append-only conversation log"
    )
    created_at: datetime = Field(..., description="Session creation time")
    last_accessed_at: datetime = Field(..., description="Last successful lookup")
