"""Output contracts for each LLM-backed stage."""

from typing import Dict, List, Optional
from pydantic import Field

from proposal_engine.models.base import CamelModel
from proposal_engine.models.enums import SectionStatus, GapStatus, OverallStatus
from proposal_engine.models.proposal import (
    ProposalDraft,
    ProposalContent,
    DesignerProposal,
    ProposalData,
)


TRACKED_SECTIONS = (
    "executiveSummary",
    "needs",
    "solution",
    "features",
    "roadmap",
    "pricing",
)


class SectionCompleteness(CamelModel):
    """Per-section verdicts produced by the parser."""
    executive_summary: SectionStatus
    needs: SectionStatus
    solution: SectionStatus
    features: SectionStatus
    roadmap: SectionStatus
    pricing: SectionStatus

    def as_dict(self) -> Dict[str, SectionStatus]:
        """Verdicts keyed by camelCase section name."""
        return {
            "executiveSummary": self.executive_summary,
            "needs": self.needs,
            "solution": self.solution,
            "features": self.features,
            "roadmap": self.roadmap,
            "pricing": self.pricing,
        }

    def all_complete(self) -> bool:
        return all(status == SectionStatus.COMPLETE for status in self.as_dict().values())


class MissingOrWeakItem(CamelModel):
    """A section the enrichment conversation has to fix."""
    section: str
    status: GapStatus
    reason: str


class ParserOutput(CamelModel):
    """Parser stage contract."""
    content: ProposalDraft
    completeness: SectionCompleteness
    overall: OverallStatus
    missing_or_weak: Optional[List[MissingOrWeakItem]] = None

    @property
    def is_complete(self) -> bool:
        return self.overall == OverallStatus.COMPLETE

    @property
    def gaps(self) -> List[MissingOrWeakItem]:
        """
        Sections needing enrichment.

        Falls back to the per-section verdicts when the model omitted the
        explicit list.
        """
        if self.missing_or_weak:
            return list(self.missing_or_weak)

        return [
            MissingOrWeakItem(
                section=section,
                status=GapStatus(status.value),
                reason=f"Section marked as {status.value} by the parser",
            )
            for section, status in self.completeness.as_dict().items()
            if status != SectionStatus.COMPLETE
        ]


class DesignerOutput(CamelModel):
    """Designer stage contract as emitted by the LLM."""
    proposal: DesignerProposal
    variant_reasoning: Dict[str, str]


class FinalProposal(CamelModel):
    """Designer result after the fixed sections were injected."""
    proposal: ProposalData
    variant_reasoning: Dict[str, str] = Field(default_factory=dict)


class EnrichmentTurn(CamelModel):
    """Outcome of one enrichment conversation turn."""
    assistant_message: str
    is_complete: bool = False
    final_content: Optional[ProposalContent] = None
