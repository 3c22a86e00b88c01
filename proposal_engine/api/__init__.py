"""API module - HTTP routes."""

from proposal_engine.api.proposals import router, get_orchestrator

__all__ = ["router", "get_orchestrator"]
