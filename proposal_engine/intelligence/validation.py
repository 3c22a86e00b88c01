"""Extraction and validation of JSON emitted by LLM calls.

Every LLM response in the pipeline passes through ``validate_and_extract``
before it is used. It is the only place where malformed generations are
stopped from flowing downstream.
"""

import json
import logging
import re
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from proposal_engine.core.exceptions import MalformedOutput, SchemaViolation

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

RAW_EXCERPT_LIMIT = 500

_JSON_FENCE = re.compile(r"```json[ \t]*\r?\n?(.*?)```", re.DOTALL | re.IGNORECASE)
_ANY_FENCE = re.compile(r"```[^\n`]*\r?\n(.*?)```", re.DOTALL)


def extract_json_text(response_text: str) -> str:
    """
    Pull the JSON payload out of an LLM response.

    Policy:
    - a ```json fenced block wins
    - else the first fenced block of any kind
    - else the trimmed full text

    Args:
        response_text: Raw LLM output

    Returns:
        Candidate JSON string
    """
    match = _JSON_FENCE.search(response_text)
    if match:
        return match.group(1).strip()

    match = _ANY_FENCE.search(response_text)
    if match:
        return match.group(1).strip()

    return response_text.strip()


def _describe_actual(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "empty string" if not value else "string"
    if isinstance(value, list):
        return f"array of {len(value)}"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _format_violations(error: PydanticValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into path / expected / actual records."""
    violations = []
    for err in error.errors(include_url=False):
        path = ".".join(str(part) for part in err["loc"]) or "<root>"
        if err["type"] == "missing":
            actual = "missing"
        else:
            actual = _describe_actual(err.get("input"))
        violations.append({
            "path": path,
            "expected": err["msg"],
            "actual": actual,
        })
    return violations


def parse_json(response_text: str, agent_label: str) -> Any:
    """Extract and decode JSON, raising MalformedOutput on failure."""
    json_str = extract_json_text(response_text)
    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        excerpt = response_text[:RAW_EXCERPT_LIMIT]
        logger.error(f"[{agent_label}] JSON parsing failed: {e}")
        logger.error(f"[{agent_label}] Raw response (first {RAW_EXCERPT_LIMIT} chars): {excerpt}")
        raise MalformedOutput(agent_label, str(e), excerpt) from e


def validate_and_extract(
    response_text: str,
    schema: Type[ModelT],
    agent_label: str
) -> ModelT:
    """
    Parse an LLM response and validate it against a pydantic contract.

    Args:
        response_text: Raw LLM output, possibly wrapping JSON in prose or fences
        schema: Pydantic model describing the expected structure
        agent_label: Stage name reported in errors and logs

    Returns:
        Validated model instance

    Raises:
        MalformedOutput: No parseable JSON was found
        SchemaViolation: JSON parsed but broke the contract
    """
    data = parse_json(response_text, agent_label)
    return validate_model(data, schema, agent_label)


def validate_model(data: Any, schema: Type[ModelT], agent_label: str) -> ModelT:
    """
    Validate already-decoded data against a pydantic contract.

    Raises:
        SchemaViolation: Data broke the contract
    """
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        violations = _format_violations(e)
        logger.error(
            f"[{agent_label}] Schema validation failed "
            f"({len(violations)} violation(s)): "
            + "; ".join(f"{v['path']}: {v['expected']} (got {v['actual']})" for v in violations)
        )
        logger.debug(f"[{agent_label}] Parsed JSON: {json.dumps(data, indent=2, default=str)[:2000]}")
        raise SchemaViolation(agent_label, violations) from e
