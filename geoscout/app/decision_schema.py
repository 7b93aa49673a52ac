"""Strict parsing of remote engine output into a Decision."""

from __future__ import annotations

import json
from typing import Any, Dict

from pydantic import ValidationError

from geoscout.app.contract import Decision, UIDirective

MAX_OPTIONS = 12
MAX_OPTION_LEN = 80


class DecisionSchemaError(Exception):
    """Base schema error."""


class DecisionParseError(DecisionSchemaError):
    """Raised when raw text is not a JSON object."""


class DecisionSchemaViolation(DecisionSchemaError):
    """Raised when the payload does not match the Decision schema."""


def parse_decision_json(raw_text: str) -> Dict[str, Any]:
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise DecisionParseError("Output must be non-empty string containing JSON")
    if raw_text.strip().startswith("```"):
        raise DecisionParseError("Markdown fenced code blocks are forbidden")
    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise DecisionParseError(f"Invalid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise DecisionParseError("Top-level JSON must be an object")
    return parsed


def validate_decision_payload(payload: Dict[str, Any]) -> Decision:
    """Validate and return a render-safe Decision.

    An over-long display_message is truncated rather than rejected.
    """
    if not isinstance(payload.get("display_message"), str):
        raise DecisionSchemaViolation("display_message missing or not a string")
    try:
        decision = Decision.model_validate(payload)
    except ValidationError as exc:
        raise DecisionSchemaViolation(str(exc)) from exc
    if decision.ui_directive == UIDirective.START:
        raise DecisionSchemaViolation("start is only entered through a session reset")
    if len(decision.options) > MAX_OPTIONS:
        raise DecisionSchemaViolation(f"options length exceeds {MAX_OPTIONS}")
    for option in decision.options:
        if not option.strip():
            raise DecisionSchemaViolation("options must be non-empty strings")
        if len(option) > MAX_OPTION_LEN:
            raise DecisionSchemaViolation(f"option exceeds {MAX_OPTION_LEN} chars")
    if not decision.is_terminal and not decision.options:
        raise DecisionSchemaViolation("non-terminal decision must offer at least one option")
    return decision.guarded()


def decision_from_text(raw_text: str) -> Decision:
    return validate_decision_payload(parse_decision_json(raw_text))


__all__ = [
    "DecisionSchemaError",
    "DecisionParseError",
    "DecisionSchemaViolation",
    "parse_decision_json",
    "validate_decision_payload",
    "decision_from_text",
]
