"""LLM integration built on CrewAI's provider-agnostic LLM client."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from crewai import LLM
from pydantic import BaseModel

from proposal_engine.core.config import Settings, get_settings
from proposal_engine.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

Message = Dict[str, str]


class ModelProfile(BaseModel):
    """Model and sampling parameters for one pipeline stage."""
    model: str
    temperature: float
    max_tokens: int

    @classmethod
    def from_settings(cls, settings: Settings, stage: str) -> "ModelProfile":
        """Build a profile from the ``<STAGE>_MODEL`` family of settings."""
        prefix = stage.upper()
        return cls(
            model=getattr(settings, f"{prefix}_MODEL"),
            temperature=getattr(settings, f"{prefix}_TEMPERATURE"),
            max_tokens=getattr(settings, f"{prefix}_MAX_TOKENS"),
        )


class LLMService:
    """
    Service for chat completions.

    Wraps CrewAI's synchronous ``LLM.call`` in ``asyncio.to_thread()`` so the
    event loop is never blocked, and bounds every call with a hard timeout.
    Any provider failure (network, auth, rate limit, context overflow,
    timeout) surfaces as ``ProviderError`` carrying the agent label.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize service."""
        self._settings = settings
        self._clients: Dict[Tuple[str, float, int], LLM] = {}

    @property
    def settings(self) -> Settings:
        """Lazy load settings."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _api_key_for(self, model: str) -> Tuple[str, str]:
        provider = model.split("/", 1)[0].lower() if "/" in model else "openai"
        key_name = {
            "groq": "GROQ_API_KEY",
            "anthropic": "ANTHROPIC_API_KEY",
        }.get(provider, "OPENAI_API_KEY")
        return key_name, getattr(self.settings, key_name)

    def _client(self, agent: str, profile: ModelProfile) -> LLM:
        """Get or create the CrewAI client for a profile."""
        cache_key = (profile.model, profile.temperature, profile.max_tokens)
        if cache_key not in self._clients:
            key_name, api_key = self._api_key_for(profile.model)
            if not api_key:
                raise ProviderError(agent, f"{key_name} not configured")

            self._clients[cache_key] = LLM(
                model=profile.model,
                api_key=api_key,
                temperature=profile.temperature,
                max_tokens=profile.max_tokens,
                timeout=self.settings.LLM_TIMEOUT_SECONDS,
            )
            logger.info(f"LLM client initialized for {profile.model}")
        return self._clients[cache_key]

    async def complete(
        self,
        agent: str,
        messages: List[Message],
        profile: ModelProfile
    ) -> str:
        """
        Run one chat completion.

        Args:
            agent: Stage label used in logs and errors
            messages: Chat messages (system, user, assistant)
            profile: Model and sampling parameters

        Returns:
            Raw assistant text

        Raises:
            ProviderError: The provider call failed or timed out
        """
        client = self._client(agent, profile)
        timeout = self.settings.LLM_TIMEOUT_SECONDS

        logger.info(f"[{agent}] Calling {profile.model} with {len(messages)} message(s)")

        try:
            response: Any = await asyncio.wait_for(
                asyncio.to_thread(client.call, messages),
                timeout=timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"[{agent}] LLM call timed out after {timeout:g}s")
            raise ProviderError(agent, f"LLM call timed out after {timeout:g}s") from e
        except Exception as e:
            logger.error(f"[{agent}] LLM call failed: {e}")
            raise ProviderError(agent, f"LLM call failed: {e}") from e

        text = response if isinstance(response, str) else str(response or "")
        logger.info(f"[{agent}] Received {len(text)} chars from {profile.model}")
        return text
