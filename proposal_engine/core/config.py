"""Configuration management for the Proposal Engine."""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


PROMPTS_PACKAGE_DIR = Path(__file__).resolve().parent.parent / "intelligence" / "prompts"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ===========================================
    # LLM Provider Keys
    # ===========================================
    GROQ_API_KEY: str = Field(default="", description="Groq API key (parser stage)")
    ANTHROPIC_API_KEY: str = Field(default="", description="Anthropic API key (enrichment/designer)")
    OPENAI_API_KEY: str = Field(default="", description="OpenAI API key (optional alternative)")

    # ===========================================
    # Stage Models (LiteLLM identifiers used by CrewAI)
    # ===========================================
    PARSER_MODEL: str = Field(
        default="groq/llama-3.3-70b-versatile",
        description="Model for the parser stage"
    )
    PARSER_TEMPERATURE: float = Field(default=0.1, description="Parser sampling temperature")
    PARSER_MAX_TOKENS: int = Field(default=8000, description="Parser response token cap")

    ENRICHMENT_MODEL: str = Field(
        default="anthropic/claude-sonnet-4-5-20250929",
        description="Model for the enrichment conversation"
    )
    ENRICHMENT_TEMPERATURE: float = Field(default=0.7, description="Enrichment sampling temperature")
    ENRICHMENT_MAX_TOKENS: int = Field(default=4096, description="Enrichment response token cap")
    ENRICHMENT_MAX_CONTEXT_CHARS: int = Field(
        default=400_000,
        description="Upper bound on the serialized enrichment conversation"
    )

    DESIGNER_MODEL: str = Field(
        default="anthropic/claude-sonnet-4-5-20250929",
        description="Model for the designer stage"
    )
    DESIGNER_TEMPERATURE: float = Field(default=0.2, description="Designer sampling temperature")
    DESIGNER_MAX_TOKENS: int = Field(default=8000, description="Designer response token cap")

    LLM_TIMEOUT_SECONDS: float = Field(default=120.0, description="Hard timeout per LLM call")

    # ===========================================
    # Prompts
    # ===========================================
    PROMPTS_DIR: Optional[str] = Field(
        default=None,
        description="Directory overriding the bundled system prompts"
    )

    # ===========================================
    # Enrichment Sessions
    # ===========================================
    SESSION_TTL_MINUTES: float = Field(default=30, description="Idle lifetime of an enrichment session")
    SESSION_CLEANUP_INTERVAL_MINUTES: float = Field(
        default=5,
        description="Interval of the expired-session sweep"
    )

    # ===========================================
    # Input Limits
    # ===========================================
    MIN_DOCUMENT_LENGTH: int = Field(default=50, description="Shortest accepted document")
    MAX_DOCUMENT_LENGTH: int = Field(default=100_000, description="Longest accepted document")
    MAX_MESSAGE_LENGTH: int = Field(default=10_000, description="Longest accepted enrichment reply")

    # ===========================================
    # External Extraction Services
    # ===========================================
    TEXT_EXTRACTION_URL: str = Field(
        default="http://localhost:3002/extract-text",
        description="Endpoint converting uploaded files to plain text"
    )
    BRAND_EXTRACTION_URL: str = Field(
        default="http://localhost:3002/extract-design",
        description="Endpoint extracting a colour palette from a website"
    )
    EXTRACTION_TIMEOUT_SECONDS: float = Field(default=60.0, description="Timeout for extraction calls")

    # ===========================================
    # Server Configuration
    # ===========================================
    DEBUG: bool = Field(default=True, description="Debug mode")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def prompts_dir(self) -> Path:
        """Directory the stage system prompts are read from."""
        return Path(self.PROMPTS_DIR) if self.PROMPTS_DIR else PROMPTS_PACKAGE_DIR


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
