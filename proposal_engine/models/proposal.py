"""Proposal content models."""

from typing import Annotated, Any, List, Optional
from pydantic import Field, field_validator, model_serializer

from proposal_engine.models.base import CamelModel
from proposal_engine.models.enums import (
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

NonEmptyStr = Annotated[str, Field(min_length=1)]


# ===========================================
# Section building blocks
# ===========================================

class Feature(CamelModel):
    """A single capability shown in the features section."""
    title: NonEmptyStr
    description: NonEmptyStr
    icon: Optional[IconName] = Field(None, description="Icon identifier")


class RoadmapItem(CamelModel):
    """One phase of the delivery roadmap."""
    phase: NonEmptyStr
    date: NonEmptyStr
    description: NonEmptyStr
    deliverables: Optional[List[NonEmptyStr]] = None


class PricingTier(CamelModel):
    """A priced package."""
    name: NonEmptyStr
    price: NonEmptyStr
    period: Optional[NonEmptyStr] = None
    features: List[NonEmptyStr] = Field(default_factory=list)
    recommended: Optional[bool] = None


class PricingSection(CamelModel):
    """Pricing expressed as tiers, a free-text note, or both."""
    tiers: Optional[List[PricingTier]] = None
    custom_note: Optional[NonEmptyStr] = None

    def has_content(self) -> bool:
        return bool(self.tiers) or bool(self.custom_note)


class CalculatedValue(CamelModel):
    """A headline figure with the steps used to calculate it."""
    value: NonEmptyStr
    breakdown: List[NonEmptyStr]


class BusinessMetric(CamelModel):
    label: NonEmptyStr
    value: NonEmptyStr
    breakdown: Optional[List[NonEmptyStr]] = None


class BusinessCase(CamelModel):
    """Cost savings, new income and ROI with transparent calculations."""
    cost_saving: Optional[CalculatedValue] = None
    additional_income: Optional[CalculatedValue] = None
    roi: Optional[CalculatedValue] = None
    metrics: Optional[List[BusinessMetric]] = None


class TechCategory(CamelModel):
    name: NonEmptyStr
    technologies: List[NonEmptyStr]


class TechStack(CamelModel):
    categories: List[TechCategory]


class ContactInfo(CamelModel):
    """Contact block shown at the end of every proposal."""
    name: NonEmptyStr
    role: NonEmptyStr
    email: NonEmptyStr
    phone: NonEmptyStr
    website: NonEmptyStr
    linkedin: NonEmptyStr
    calendly: Optional[str] = None
    cta: NonEmptyStr

    @model_serializer(mode="wrap")
    def _always_emit_calendly(self, handler):
        # calendly is part of the fixed contact record even when unset
        data = handler(self)
        data.setdefault("calendly", self.calendly)
        return data


# ===========================================
# Proposal content
# ===========================================

class ProposalDraft(CamelModel):
    """
    Proposal content as extracted by the parser.

    Every section key is present, but sections the source document lacks may
    be empty. The parser's completeness verdicts say which ones.
    """
    executive_summary: str = Field(..., description="Executive summary section")
    needs: List[str] = Field(..., description="Client needs, one per item")
    solution: str = Field(..., description="Proposed solution")
    business_case: Optional[BusinessCase] = Field(None, description="Optional ROI metrics")
    tech_stack: Optional[TechStack] = Field(None, description="Optional technology breakdown")
    features: List[Feature] = Field(..., description="Solution features")
    roadmap: List[RoadmapItem] = Field(..., description="Delivery phases")
    pricing: Optional[PricingSection] = Field(None, description="Pricing tiers or note")


class ProposalContent(ProposalDraft):
    """Complete proposal content: every required section is non-empty."""
    executive_summary: NonEmptyStr
    needs: List[NonEmptyStr] = Field(..., min_length=1)
    solution: NonEmptyStr
    features: List[Feature] = Field(..., min_length=1)
    roadmap: List[RoadmapItem] = Field(..., min_length=1)
    pricing: PricingSection

    @field_validator("pricing")
    @classmethod
    def _pricing_has_content(cls, value: PricingSection) -> PricingSection:
        if not value.has_content():
            raise ValueError("pricing requires at least one tier or a customNote")
        return value


class DesignerProposal(ProposalContent):
    """
    Proposal body as returned by the designer LLM.

    The why-us and contact slots are accepted in any shape because they are
    always replaced by the fixed organisational content.
    """
    executive_summary_variant: ExecutiveSummaryVariant
    needs_variant: NeedsVariant
    solution_variant: SolutionVariant
    features_variant: FeaturesVariant
    roadmap_variant: RoadmapVariant
    pricing_variant: PricingVariant
    why_us: Optional[Any] = None
    why_us_variant: Optional[Any] = None
    contact: Optional[Any] = None
    contact_variant: Optional[Any] = None


class ProposalData(DesignerProposal):
    """Final proposal body with the fixed sections in place."""
    why_us: NonEmptyStr
    why_us_variant: WhyUsVariant
    contact: ContactInfo
    contact_variant: ContactVariant
