"""Shared plumbing for the LLM-backed pipeline stages."""

import logging
from typing import List, Optional

from proposal_engine.core.config import Settings, get_settings
from proposal_engine.integrations.llm import LLMService, ModelProfile, Message
from proposal_engine.intelligence.prompt_loader import load_prompt

logger = logging.getLogger(__name__)


class StageAgent:
    """
    Base class for a single pipeline stage.

    Subclasses set ``label`` (used in logs and errors), ``stage`` (the
    settings prefix for model parameters) and ``prompt_name``.
    """

    label = "Agent"
    stage = ""
    prompt_name = ""

    def __init__(
        self,
        llm: Optional[LLMService] = None,
        settings: Optional[Settings] = None
    ):
        self._settings = settings
        self._llm = llm

    @property
    def settings(self) -> Settings:
        """Lazy load settings."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def llm(self) -> LLMService:
        """Lazy load LLM service."""
        if self._llm is None:
            self._llm = LLMService(self.settings)
        return self._llm

    @property
    def profile(self) -> ModelProfile:
        return ModelProfile.from_settings(self.settings, self.stage)

    def system_message(self) -> Message:
        return {"role": "system", "content": load_prompt(self.prompt_name)}

    async def _complete(self, messages: List[Message]) -> str:
        return await self.llm.complete(self.label, messages, self.profile)
