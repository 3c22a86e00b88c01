"""Tests for LLM output extraction and validation."""

import json
import pytest

from proposal_engine.core.exceptions import MalformedOutput, SchemaViolation
from proposal_engine.intelligence.validation import (
    RAW_EXCERPT_LIMIT,
    extract_json_text,
    validate_and_extract,
)
from proposal_engine.models import ParserOutput, ProposalContent, ProposalDraft


class TestExtractJsonText:
    """Tests for locating the JSON payload inside prose."""

    def test_json_fence_wins(self):
        """A ```json block is preferred over other fences."""
        text = 'Here:\n```\nnot this\n```\n```json\n{"a": 1}\n```'
        assert extract_json_text(text) == '{"a": 1}'

    def test_any_fence_fallback(self):
        """Without a json fence the first fenced block is used."""
        text = 'Result:\n```javascript\n{"a": 2}\n```\nDone.'
        assert extract_json_text(text) == '{"a": 2}'

    def test_plain_text_is_trimmed(self):
        """Bare JSON is returned trimmed."""
        assert extract_json_text('   {"a": 3}\n\n') == '{"a": 3}'

    def test_uppercase_json_fence(self):
        text = '```JSON\n{"a": 4}\n```'
        assert extract_json_text(text) == '{"a": 4}'


class TestValidateAndExtract:
    """Tests for validate_and_extract."""

    def test_valid_content_in_prose(self, complete_content, fence):
        """Content wrapped in prose and a fence validates."""
        text = fence(complete_content, prose="Here is the proposal:")

        content = validate_and_extract(text, ProposalContent, "Test")

        assert content.executive_summary.startswith("Acme Logistics")
        assert len(content.features) == 2
        assert content.pricing.tiers[0].name == "Pilot"

    def test_idempotent(self, complete_content, fence):
        """Validating the same text twice yields equal results."""
        text = fence(complete_content)

        first = validate_and_extract(text, ProposalContent, "Test")
        second = validate_and_extract(text, ProposalContent, "Test")

        assert first == second

    def test_revalidating_payload_is_stable(self, complete_content):
        """Re-serializing a validated model validates to the same model."""
        content = validate_and_extract(json.dumps(complete_content), ProposalContent, "Test")
        again = validate_and_extract(json.dumps(content.to_payload()), ProposalContent, "Test")

        assert again == content

    def test_malformed_json(self):
        """Unparseable text raises MalformedOutput with an excerpt."""
        text = "I could not finish the proposal, sorry. " * 40

        with pytest.raises(MalformedOutput) as exc_info:
            validate_and_extract(text, ProposalContent, "Parser")

        error = exc_info.value
        assert error.agent == "Parser"
        assert len(error.raw_excerpt) == RAW_EXCERPT_LIMIT
        assert error.parse_error

    def test_truncated_json(self):
        with pytest.raises(MalformedOutput):
            validate_and_extract('```json\n{"executiveSummary": "cut off', ProposalContent, "Designer")

    def test_schema_violation_reports_every_path(self, complete_content):
        """Every broken field is reported with its dotted path."""
        complete_content["needs"] = "not a list"
        complete_content["features"][1]["icon"] = "Rocket"
        del complete_content["solution"]

        with pytest.raises(SchemaViolation) as exc_info:
            validate_and_extract(json.dumps(complete_content), ProposalContent, "Enrichment")

        paths = exc_info.value.paths
        assert "needs" in paths
        assert "features.1.icon" in paths
        assert "solution" in paths

        missing = next(v for v in exc_info.value.violations if v["path"] == "solution")
        assert missing["actual"] == "missing"

    def test_empty_pricing_rejected(self, complete_content):
        """Complete content needs pricing tiers or a custom note."""
        complete_content["pricing"] = {}

        with pytest.raises(SchemaViolation) as exc_info:
            validate_and_extract(json.dumps(complete_content), ProposalContent, "Enrichment")

        assert exc_info.value.paths == ["pricing"]

    def test_custom_note_pricing_accepted(self, complete_content):
        complete_content["pricing"] = {"customNote": "Quoted after discovery"}

        content = validate_and_extract(json.dumps(complete_content), ProposalContent, "Enrichment")

        assert content.pricing.custom_note == "Quoted after discovery"
        assert content.pricing.tiers is None

    def test_draft_accepts_empty_sections(self, incomplete_content):
        """Parser drafts may leave sections empty."""
        draft = validate_and_extract(json.dumps(incomplete_content), ProposalDraft, "Parser")

        assert draft.roadmap == []
        assert draft.pricing is None

    def test_complete_content_rejects_empty_sections(self, incomplete_content):
        with pytest.raises(SchemaViolation) as exc_info:
            validate_and_extract(json.dumps(incomplete_content), ProposalContent, "Enrichment")

        assert set(exc_info.value.paths) == {"roadmap", "pricing"}

    def test_parser_output_bad_status(self, parser_complete_response):
        """Unknown verdict values are rejected."""
        text = parser_complete_response.replace('"pricing": "complete"', '"pricing": "unclear"')

        with pytest.raises(SchemaViolation) as exc_info:
            validate_and_extract(text, ParserOutput, "Parser")

        assert "completeness.pricing" in exc_info.value.paths

    def test_error_to_dict(self, complete_content):
        del complete_content["needs"]

        with pytest.raises(SchemaViolation) as exc_info:
            validate_and_extract(json.dumps(complete_content), ProposalContent, "Designer")

        data = exc_info.value.to_dict()
        assert data["error_type"] == "SchemaViolation"
        assert data["agent"] == "Designer"
        assert data["violations"][0]["path"] == "needs"
