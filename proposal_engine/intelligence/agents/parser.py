"""Parser stage: raw document text to structured draft sections."""

import logging

from proposal_engine.intelligence.agents.base import StageAgent
from proposal_engine.intelligence.prompt_loader import PARSER_PROMPT
from proposal_engine.intelligence.validation import validate_and_extract
from proposal_engine.models import ParserOutput

logger = logging.getLogger(__name__)

PARSE_INSTRUCTION = (
    "Please parse the following document and structure it into proposal sections:"
)


class ParserAgent(StageAgent):
    """
    Structures extracted document text into the six proposal sections and
    rates each one as complete, weak or missing.
    """

    label = "Parser"
    stage = "parser"
    prompt_name = PARSER_PROMPT

    async def parse(self, document_text: str) -> ParserOutput:
        """
        Parse a document into draft content plus completeness verdicts.

        Args:
            document_text: Plain text extracted from the uploaded document

        Returns:
            Validated ParserOutput

        Raises:
            ProviderError: LLM call failed
            MalformedOutput: Response was not JSON
            SchemaViolation: Response broke the parser contract
        """
        logger.info(f"[{self.label}] Parsing document ({len(document_text)} chars)")

        messages = [
            self.system_message(),
            {"role": "user", "content": f"{PARSE_INSTRUCTION}\n\n{document_text}"},
        ]
        response_text = await self._complete(messages)

        result = validate_and_extract(response_text, ParserOutput, self.label)

        if result.is_complete != result.completeness.all_complete():
            logger.warning(
                f"[{self.label}] Overall status '{result.overall.value}' disagrees "
                f"with section verdicts "
                f"{ {k: v.value for k, v in result.completeness.as_dict().items()} }"
            )

        logger.info(
            f"[{self.label}] Parsed - overall: {result.overall.value}, "
            f"gaps: {[gap.section for gap in result.gaps]}"
        )
        return result
