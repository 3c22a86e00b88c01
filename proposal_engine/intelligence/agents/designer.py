"""Designer stage: variant selection plus fixed-section injection."""

import json
import logging

from proposal_engine.core.fixed_sections import (
    FIXED_SECTION_VARIANTS,
    TRACTIS_CONTACT,
    TRACTIS_WHY_US,
)
from proposal_engine.intelligence.agents.base import StageAgent
from proposal_engine.intelligence.prompt_loader import DESIGNER_PROMPT
from proposal_engine.intelligence.validation import validate_and_extract
from proposal_engine.models import (
    DesignerOutput,
    FinalProposal,
    ProposalContent,
    ProposalData,
)

logger = logging.getLogger(__name__)

_MODEL_AUTHORED_FIXED_FIELDS = {"why_us", "why_us_variant", "contact", "contact_variant"}
_FIXED_SECTION_KEYS = {"whyUs", "why_us", "contact"}


class DesignerAgent(StageAgent):
    """Chooses a presentation variant per section and appends the fixed sections."""

    label = "Designer"
    stage = "designer"
    prompt_name = DESIGNER_PROMPT

    @staticmethod
    def apply_fixed_sections(output: DesignerOutput) -> FinalProposal:
        """Replace whatever the model wrote for why-us and contact with the constants."""
        body = output.proposal.model_dump(exclude=_MODEL_AUTHORED_FIXED_FIELDS)
        body.update(
            why_us=TRACTIS_WHY_US,
            why_us_variant=FIXED_SECTION_VARIANTS["whyUs"],
            contact=TRACTIS_CONTACT,
            contact_variant=FIXED_SECTION_VARIANTS["contact"],
        )
        return FinalProposal(
            proposal=ProposalData.model_validate(body),
            variant_reasoning={
                section: reason
                for section, reason in output.variant_reasoning.items()
                if section not in _FIXED_SECTION_KEYS
            },
        )

    async def design(self, content: ProposalContent) -> FinalProposal:
        """
        Select variants for complete proposal content.

        Args:
            content: Complete (parser or enriched) proposal content

        Returns:
            FinalProposal with variants, reasoning and fixed sections

        Raises:
            ProviderError: LLM call failed
            MalformedOutput: Response was not JSON
            SchemaViolation: Response broke the designer contract
        """
        logger.info(f"[{self.label}] Selecting variants")

        content_json = json.dumps(content.to_payload(), indent=2, ensure_ascii=False)
        messages = [
            self.system_message(),
            {
                "role": "user",
                "content": (
                    "Please analyze this enriched proposal content and select the "
                    "optimal component variant for each section:\n\n"
                    f"{content_json}\n\n"
                    "Return the complete proposal with variant selections and reasoning."
                ),
            },
        ]
        response_text = await self._complete(messages)

        output = validate_and_extract(response_text, DesignerOutput, self.label)
        final = self.apply_fixed_sections(output)

        proposal = final.proposal
        logger.info(
            f"[{self.label}] Variants - executiveSummary: {proposal.executive_summary_variant.value}, "
            f"needs: {proposal.needs_variant.value}, solution: {proposal.solution_variant.value}, "
            f"features: {proposal.features_variant.value}, roadmap: {proposal.roadmap_variant.value}, "
            f"pricing: {proposal.pricing_variant.value}"
        )
        return final
