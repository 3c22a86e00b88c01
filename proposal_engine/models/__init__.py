"""Models package - All Pydantic models organized by domain."""

from proposal_engine.models.enums import (
    SectionStatus,
    GapStatus,
    OverallStatus,
    TurnRole,
    GenerationStatus,
    IconName,
    ExecutiveSummaryVariant,
    NeedsVariant,
    SolutionVariant,
    FeaturesVariant,
    RoadmapVariant,
    WhyUsVariant,
    PricingVariant,
    ContactVariant,
)
from proposal_engine.models.proposal import (
    Feature,
    RoadmapItem,
    PricingTier,
    PricingSection,
    BusinessCase,
    TechStack,
    ContactInfo,
    ProposalDraft,
    ProposalContent,
    DesignerProposal,
    ProposalData,
)
from proposal_engine.models.agents import (
    TRACKED_SECTIONS,
    SectionCompleteness,
    MissingOrWeakItem,
    ParserOutput,
    DesignerOutput,
    FinalProposal,
    EnrichmentTurn,
)
from proposal_engine.models.session import ConversationTurn, EnrichmentSession
from proposal_engine.models.results import (
    GenerationResult,
    SessionStats,
    ExtractedDocument,
    BrandPalette,
)

__all__ = [
    # Enums
    "SectionStatus",
    "GapStatus",
    "OverallStatus",
    "TurnRole",
    "GenerationStatus",
    "IconName",
    "ExecutiveSummaryVariant",
    "NeedsVariant",
    "SolutionVariant",
    "FeaturesVariant",
    "RoadmapVariant",
    "WhyUsVariant",
    "PricingVariant",
    "ContactVariant",
    # Proposal models
    "Feature",
    "RoadmapItem",
    "PricingTier",
    "PricingSection",
    "BusinessCase",
    "TechStack",
    "ContactInfo",
    "ProposalDraft",
    "ProposalContent",
    "DesignerProposal",
    "ProposalData",
    # Stage contracts
    "TRACKED_SECTIONS",
    "SectionCompleteness",
    "MissingOrWeakItem",
    "ParserOutput",
    "DesignerOutput",
    "FinalProposal",
    "EnrichmentTurn",
    # Session models
    "ConversationTurn",
    "EnrichmentSession",
    # Result models
    "GenerationResult",
    "SessionStats",
    "ExtractedDocument",
    "BrandPalette",
]
