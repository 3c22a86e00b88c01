"""Pytest fixtures and configuration for Proposal Engine tests."""

import copy
import json
import os
import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator, List

from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("GROQ_API_KEY", "gsk-test")
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test")
os.environ.setdefault("DEBUG", "true")

from proposal_engine.core.config import Settings
from proposal_engine.intelligence.agents import DesignerAgent, EnrichmentAgent, ParserAgent
from proposal_engine.services.proposal_orchestrator import ProposalOrchestrator
from proposal_engine.services.session_store import SessionStore


def fenced(data: Dict[str, Any], prose: str = "") -> str:
    """Wrap a payload in a ```json block the way the models answer."""
    block = f"```json\n{json.dumps(data, indent=2)}\n```"
    return f"{prose}\n\n{block}" if prose else block


# ===========================================
# Test Doubles
# ===========================================

class ScriptedLLM:
    """
    Stands in for LLMService.

    Replies are queued per agent label and returned in order. Queued
    exceptions are raised instead of returned.
    """

    def __init__(self):
        self.replies: Dict[str, List[Any]] = {}
        self.calls: List[Dict[str, Any]] = []

    def queue(self, agent: str, *replies: Any) -> "ScriptedLLM":
        self.replies.setdefault(agent, []).extend(replies)
        return self

    def calls_for(self, agent: str) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["agent"] == agent]

    async def complete(self, agent, messages, profile) -> str:
        self.calls.append({"agent": agent, "messages": copy.deepcopy(messages), "profile": profile})
        if not self.replies.get(agent):
            raise AssertionError(f"No scripted reply left for {agent}")
        reply = self.replies[agent].pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class ManualClock:
    """Clock the tests move by hand."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# ===========================================
# Sample Data Fixtures
# ===========================================

@pytest.fixture
def sample_document() -> str:
    """Discovery notes long enough to pass input validation."""
    return """
Discovery call notes - Acme Logistics

Acme runs 40 delivery vans out of two depots in Santiago. Dispatchers plan
routes by hand every night in spreadsheets, which takes about three hours and
still produces late deliveries. Customers have no live tracking.

They want an AI assistant that plans routes, re-plans when a driver is
delayed, and sends customers an ETA link. It must integrate with their
existing TMS. Pilot in one depot first, then roll out to the second.
    """.strip()


@pytest.fixture
def complete_content() -> Dict[str, Any]:
    """Proposal content with every section filled in."""
    return {
        "executiveSummary": "Acme Logistics will cut nightly route planning from three hours to minutes with an AI dispatch assistant.",
        "needs": [
            "Replace manual spreadsheet route planning",
            "Re-plan routes when drivers are delayed",
            "Give customers live delivery ETAs",
        ],
        "solution": "An AI dispatch assistant connected to the existing TMS that plans, monitors and re-plans routes.",
        "features": [
            {"title": "Smart routing", "description": "Plans every route overnight", "icon": "Zap"},
            {"title": "Live ETA links", "description": "Customers follow their delivery", "icon": "Clock"},
        ],
        "roadmap": [
            {"phase": "Pilot", "date": "Weeks 1-6", "description": "One depot live"},
            {"phase": "Rollout", "date": "Weeks 7-10", "description": "Second depot live"},
        ],
        "pricing": {
            "tiers": [
                {"name": "Pilot", "price": "$12,000", "features": ["One depot", "TMS integration"]},
            ]
        },
    }


@pytest.fixture
def incomplete_content(complete_content) -> Dict[str, Any]:
    """Parser draft missing pricing and with a thin roadmap."""
    content = copy.deepcopy(complete_content)
    del content["pricing"]
    content["roadmap"] = []
    return content


@pytest.fixture
def parser_complete_response(complete_content) -> str:
    return fenced({
        "content": complete_content,
        "completeness": {
            "executiveSummary": "complete",
            "needs": "complete",
            "solution": "complete",
            "features": "complete",
            "roadmap": "complete",
            "pricing": "complete",
        },
        "overall": "complete",
    })


@pytest.fixture
def parser_incomplete_response(incomplete_content) -> str:
    return fenced({
        "content": incomplete_content,
        "completeness": {
            "executiveSummary": "complete",
            "needs": "complete",
            "solution": "complete",
            "features": "complete",
            "roadmap": "missing",
            "pricing": "missing",
        },
        "overall": "incomplete",
        "missingOrWeak": [
            {"section": "roadmap", "status": "missing", "reason": "No timeline in the notes"},
            {"section": "pricing", "status": "missing", "reason": "No budget discussed"},
        ],
    })


@pytest.fixture
def enrichment_question() -> str:
    return (
        "Executive summary, needs, solution and features look great. "
        "Two sections still need work: what timeline do you have in mind, "
        "and what budget range should the pilot fit in?"
    )


@pytest.fixture
def enrichment_complete_response(complete_content) -> str:
    return fenced(
        {"isComplete": True, **complete_content},
        prose="Thanks! All sections are now complete. Here is the enriched proposal:"
    )


@pytest.fixture
def designer_response(complete_content) -> str:
    proposal = {
        **complete_content,
        "executiveSummaryVariant": "brief",
        "needsVariant": "list",
        "solutionVariant": "narrative",
        "featuresVariant": "grid",
        "roadmapVariant": "timeline",
        "pricingVariant": "tiers",
        "whyUs": "We are the best, trust us.",
        "whyUsVariant": "testimonial",
        "contact": {"name": "Someone Else"},
        "contactVariant": "footer",
    }
    return fenced({
        "proposal": proposal,
        "variantReasoning": {
            "executiveSummary": "Short summary suits the brief layout",
            "needs": "Three needs read best as a list",
            "solution": "Single-paragraph solution",
            "features": "Two features fit a grid",
            "roadmap": "Sequential phases",
            "pricing": "One priced tier",
            "whyUs": "Testimonials build trust",
            "contact": "Footer keeps it short",
        },
    })


# ===========================================
# Component Fixtures
# ===========================================

@pytest.fixture
def settings() -> Settings:
    """Settings with test keys and default limits."""
    return Settings(
        GROQ_API_KEY="gsk-test",
        ANTHROPIC_API_KEY="sk-ant-test",
        DEBUG=True,
    )


@pytest.fixture
def fake_llm() -> ScriptedLLM:
    return ScriptedLLM()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def store(clock) -> SessionStore:
    return SessionStore(
        ttl=timedelta(minutes=30),
        cleanup_interval=timedelta(minutes=5),
        clock=clock,
    )


@pytest.fixture
def parser_agent(fake_llm, settings) -> ParserAgent:
    return ParserAgent(llm=fake_llm, settings=settings)


@pytest.fixture
def enrichment_agent(fake_llm, settings) -> EnrichmentAgent:
    return EnrichmentAgent(llm=fake_llm, settings=settings)


@pytest.fixture
def designer_agent(fake_llm, settings) -> DesignerAgent:
    return DesignerAgent(llm=fake_llm, settings=settings)


@pytest.fixture
def orchestrator(
    store,
    parser_agent,
    enrichment_agent,
    designer_agent,
    settings
) -> ProposalOrchestrator:
    """Orchestrator wired to the scripted LLM and the manual clock."""
    return ProposalOrchestrator(
        store=store,
        parser=parser_agent,
        enrichment=enrichment_agent,
        designer=designer_agent,
        settings=settings,
    )


# ===========================================
# Client Fixtures
# ===========================================

@pytest.fixture
def client(orchestrator) -> Generator[TestClient, None, None]:
    """Test client with every LLM stage scripted."""
    from proposal_engine.main import create_app
    with TestClient(create_app(orchestrator)) as test_client:
        yield test_client


# ===========================================
# Pytest Configuration
# ===========================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that call real LLM providers"
    )


@pytest.fixture
def fence():
    """Helper wrapping a payload in a ```json block."""
    return fenced
