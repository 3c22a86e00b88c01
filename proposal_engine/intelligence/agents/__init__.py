"""Pipeline stage agents."""

from proposal_engine.intelligence.agents.parser import ParserAgent
from proposal_engine.intelligence.agents.enrichment import EnrichmentAgent
from proposal_engine.intelligence.agents.designer import DesignerAgent

__all__ = [
    "ParserAgent",
    "EnrichmentAgent",
    "DesignerAgent",
]
