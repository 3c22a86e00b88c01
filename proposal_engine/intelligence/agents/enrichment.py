"""Enrichment stage: one turn of the gap-filling conversation."""

import json
import logging
from typing import List, Sequence

from proposal_engine.core.exceptions import GenerationError, ProviderError
from proposal_engine.intelligence.agents.base import StageAgent
from proposal_engine.intelligence.completion import detect_completion
from proposal_engine.intelligence.prompt_loader import ENRICHMENT_PROMPT
from proposal_engine.intelligence.validation import validate_and_extract
from proposal_engine.integrations.llm import Message
from proposal_engine.models import (
    ConversationTurn,
    EnrichmentTurn,
    MissingOrWeakItem,
    ProposalContent,
    ProposalDraft,
)

logger = logging.getLogger(__name__)

OPENING_INSTRUCTION = (
    "Please start the enrichment conversation by showing the user "
    "what's complete and what needs improvement."
)
CONTINUE_INSTRUCTION = (
    "Continue the enrichment conversation below. Keep the sections that are "
    "already complete and use the user's answers to fix the rest."
)


class EnrichmentAgent(StageAgent):
    """
    Runs one conversational turn that fills missing or weak sections.

    The agent is stateless: the caller owns the transcript. Every call sends
    the system prompt, a context turn describing the partial content and its
    gaps, and then the transcript verbatim.
    """

    label = "Enrichment"
    stage = "enrichment"
    prompt_name = ENRICHMENT_PROMPT

    @staticmethod
    def build_context_message(
        partial_content: ProposalDraft,
        gaps: Sequence[MissingOrWeakItem],
        opening: bool = True
    ) -> Message:
        """Synthesize the user turn that primes the model with the proposal state."""
        content_json = json.dumps(partial_content.to_payload(), indent=2, ensure_ascii=False)
        gaps_json = json.dumps([gap.to_payload() for gap in gaps], indent=2, ensure_ascii=False)
        instruction = OPENING_INSTRUCTION if opening else CONTINUE_INSTRUCTION

        return {
            "role": "user",
            "content": (
                "Context:\n"
                f"- Partial proposal data: {content_json}\n"
                f"- Missing/weak sections: {gaps_json}\n\n"
                f"{instruction}"
            ),
        }

    def build_messages(
        self,
        partial_content: ProposalDraft,
        gaps: Sequence[MissingOrWeakItem],
        transcript: Sequence[ConversationTurn]
    ) -> List[Message]:
        messages = [
            self.system_message(),
            self.build_context_message(partial_content, gaps, opening=not transcript),
        ]
        messages.extend(
            {"role": turn.role.value, "content": turn.content} for turn in transcript
        )
        return messages

    def _check_context_size(self, messages: List[Message]) -> None:
        size = sum(len(message["content"]) for message in messages)
        limit = self.settings.ENRICHMENT_MAX_CONTEXT_CHARS
        if size > limit:
            logger.error(f"[{self.label}] Conversation too long: {size} chars > {limit}")
            raise ProviderError(
                self.label,
                f"conversation exceeds the context limit ({size} > {limit} chars); "
                "start a new proposal generation"
            )

    async def turn(
        self,
        partial_content: ProposalDraft,
        gaps: Sequence[MissingOrWeakItem],
        transcript: Sequence[ConversationTurn]
    ) -> EnrichmentTurn:
        """
        Run one enrichment turn.

        Args:
            partial_content: Parser output being enriched
            gaps: Sections that still need work
            transcript: Prior conversation, ending with the new user message
                (empty on the first turn)

        Returns:
            EnrichmentTurn with the assistant reply and, when the model
            signalled completion with valid content, the final content

        Raises:
            ProviderError: LLM call failed or the conversation is too long
        """
        logger.info(
            f"[{self.label}] Running turn {len(transcript) // 2 + 1} "
            f"({len(gaps)} gap(s), {len(transcript)} prior message(s))"
        )

        messages = self.build_messages(partial_content, gaps, transcript)
        self._check_context_size(messages)

        response_text = await self._complete(messages)

        signal = detect_completion(response_text)
        if not signal.is_candidate:
            logger.info(f"[{self.label}] Turn not complete {signal.model_dump()}")
            return EnrichmentTurn(assistant_message=response_text)

        logger.info(f"[{self.label}] Completion signalled, validating enriched content")
        try:
            final_content = validate_and_extract(response_text, ProposalContent, self.label)
        except GenerationError as e:
            logger.warning(
                f"[{self.label}] Completion signal rejected, continuing conversation: {e}"
            )
            return EnrichmentTurn(assistant_message=response_text)

        logger.info(f"[{self.label}] Enrichment complete")
        return EnrichmentTurn(
            assistant_message=response_text,
            is_complete=True,
            final_content=final_content,
        )
