"""Proposal Orchestrator - Parser, Enrichment and Designer workflow."""

import logging
from typing import Any, Optional

from proposal_engine.core.config import Settings, get_settings
from proposal_engine.core.exceptions import SessionNotFound, ValidationError
from proposal_engine.intelligence.agents import DesignerAgent, EnrichmentAgent, ParserAgent
from proposal_engine.intelligence.validation import validate_model
from proposal_engine.integrations.extraction import BrandExtractionService, TextExtractionService
from proposal_engine.models import (
    BrandPalette,
    ConversationTurn,
    ExtractedDocument,
    GenerationResult,
    ProposalContent,
    SessionStats,
)
from proposal_engine.services.session_store import SessionStore, SESSION_ID_PREFIX

logger = logging.getLogger(__name__)


class ProposalOrchestrator:
    """
    Main orchestration service for proposal generation.

    Handles both flows:
    1. Document text → Parser → (complete) Designer → proposal
    2. Document text → Parser → (incomplete) Enrichment session → user turns
       → Designer → proposal

    A session is only created when the parser reports gaps, and only deleted
    after the designer succeeded on the completing turn. A failed call never
    changes the session.
    """

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        parser: Optional[ParserAgent] = None,
        enrichment: Optional[EnrichmentAgent] = None,
        designer: Optional[DesignerAgent] = None,
        text_extractor: Optional[TextExtractionService] = None,
        brand_extractor: Optional[BrandExtractionService] = None,
        settings: Optional[Settings] = None
    ):
        self._settings = settings
        self.store = store if store is not None else SessionStore.from_settings(self.settings)
        self.parser = parser if parser is not None else ParserAgent(settings=self.settings)
        self.enrichment = (
            enrichment if enrichment is not None
            else EnrichmentAgent(llm=self.parser.llm, settings=self.settings)
        )
        self.designer = (
            designer if designer is not None
            else DesignerAgent(llm=self.parser.llm, settings=self.settings)
        )
        self.text_extractor = (
            text_extractor if text_extractor is not None
            else TextExtractionService(self.settings)
        )
        self.brand_extractor = (
            brand_extractor if brand_extractor is not None
            else BrandExtractionService(self.settings)
        )
        logger.info("Proposal orchestrator initialized")

    @property
    def settings(self) -> Settings:
        """Lazy load settings."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    # ===========================================
    # Input validation
    # ===========================================

    def validate_document_text(self, document_text: Any) -> str:
        if not document_text or not isinstance(document_text, str):
            raise ValidationError("documentText is required and must be a string")

        length = len(document_text)
        max_length = self.settings.MAX_DOCUMENT_LENGTH
        min_length = self.settings.MIN_DOCUMENT_LENGTH

        if length > max_length:
            raise ValidationError(
                f"Document exceeds maximum length of {max_length} characters",
                details=f"Received {length} characters. Please provide a shorter document."
            )
        if length < min_length:
            raise ValidationError(
                "Document is too short to generate a proposal",
                details=f"Minimum {min_length} characters required. Received {length} characters."
            )
        return document_text

    def validate_enrichment_input(self, session_id: Any, message: Any) -> None:
        if not session_id or not isinstance(session_id, str):
            raise ValidationError("sessionId is required and must be a string")
        if not self.store.is_valid_session_id(session_id):
            raise ValidationError(
                "Invalid session ID format",
                details=f"Session IDs start with '{SESSION_ID_PREFIX}'"
            )

        if not message or not isinstance(message, str):
            raise ValidationError("message is required and must be a string")

        max_length = self.settings.MAX_MESSAGE_LENGTH
        if len(message) > max_length:
            raise ValidationError(
                f"Message exceeds maximum length of {max_length} characters",
                details=f"Received {len(message)} characters."
            )
        if not message.strip():
            raise ValidationError("Message cannot be empty")

    # ===========================================
    # Entry points
    # ===========================================

    async def start_generation(self, document_text: str) -> GenerationResult:
        """
        Generate a proposal from document text.

        Steps:
        1. Validate input length
        2. Parse into sections with completeness verdicts
        3. If complete, run the designer and return the proposal
        4. Otherwise run the first enrichment turn and open a session

        Args:
            document_text: Plain text of the source document

        Returns:
            GenerationResult, either complete or needs_enrichment
        """
        document_text = self.validate_document_text(document_text)
        logger.info(f"Starting proposal generation ({len(document_text)} chars)")

        # Step 1: Parse
        parsed = await self.parser.parse(document_text)

        # Step 2a: Complete - straight to the designer
        if parsed.is_complete:
            logger.info("Parser reports content complete - skipping enrichment")
            content = validate_model(parsed.content.to_payload(), ProposalContent, self.parser.label)
            final = await self.designer.design(content)
            logger.info("Proposal generation complete")
            return GenerationResult.complete(final)

        # Step 2b: Incomplete - open an enrichment conversation
        gaps = parsed.gaps
        logger.info(f"Content needs enrichment: {[gap.section for gap in gaps]}")

        first_turn = await self.enrichment.turn(parsed.content, gaps, [])
        if first_turn.is_complete:
            logger.warning("Enrichment signalled completion on its opening turn - ignoring")

        session_id = self.store.create(parsed.content, gaps, first_turn.assistant_message)
        return GenerationResult.needs_enrichment(first_turn.assistant_message, session_id)

    async def continue_enrichment(self, session_id: str, message: str) -> GenerationResult:
        """
        Continue an enrichment conversation with the user's reply.

        Args:
            session_id: Id returned by a needs_enrichment result
            message: User reply

        Returns:
            GenerationResult, either complete or needs_enrichment

        Raises:
            ValidationError: Malformed id or message
            SessionNotFound: Session unknown or expired
        """
        self.validate_enrichment_input(session_id, message)

        async with self.store.lock(session_id):
            session = self.store.get(session_id)
            if session is None:
                raise SessionNotFound(session_id, self.store.ttl_minutes) from None

            logger.info(
                f"Continuing enrichment session {session_id} "
                f"({len(session.transcript)} message(s) so far)"
            )

            user_turn = ConversationTurn.user(message)
            turn = await self.enrichment.turn(
                session.partial_content,
                session.gaps,
                session.transcript + [user_turn]
            )

            if turn.is_complete and turn.final_content is not None:
                final = await self.designer.design(turn.final_content)
                self.store.delete(session_id)
                logger.info(f"Enrichment session {session_id} completed")
                return GenerationResult.complete(final)

            try:
                self.store.append_turns(
                    session_id,
                    user_turn,
                    ConversationTurn.assistant(turn.assistant_message)
                )
            except KeyError:
                raise SessionNotFound(session_id, self.store.ttl_minutes) from None

            return GenerationResult.needs_enrichment(turn.assistant_message, session_id)

    def get_session_stats(self) -> SessionStats:
        return self.store.stats()

    # ===========================================
    # External extraction
    # ===========================================

    async def extract_text(
        self,
        data: bytes,
        filename: str,
        content_type: Optional[str] = None
    ) -> ExtractedDocument:
        return await self.text_extractor.extract_text(data, filename, content_type)

    async def start_generation_from_file(
        self,
        data: bytes,
        filename: str,
        content_type: Optional[str] = None
    ) -> GenerationResult:
        """Extract text from an uploaded file and start generation with it."""
        document = await self.extract_text(data, filename, content_type)
        return await self.start_generation(document.text)

    async def extract_brand(self, url: str) -> BrandPalette:
        return await self.brand_extractor.extract_brand(url)
