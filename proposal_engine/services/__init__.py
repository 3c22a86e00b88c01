"""Services module - Session storage and workflow orchestration."""

from proposal_engine.services.session_store import SessionStore
from proposal_engine.services.proposal_orchestrator import ProposalOrchestrator

__all__ = ["SessionStore", "ProposalOrchestrator"]
