import json

import pytest
from pydantic import ValidationError

from conftest import decision_json
from geoscout.app.contract import MAX_DISPLAY_MESSAGE_CHARS, Decision, UIDirective
from geoscout.app.decision_schema import (
    DecisionParseError,
    DecisionSchemaViolation,
    decision_from_text,
    parse_decision_json,
    validate_decision_payload,
)


def test_parse_accepts_object():
    parsed = parse_decision_json('{"display_message": "ok"}')
    assert parsed["display_message"] == "ok"


@pytest.mark.parametrize("raw", ["", "   ", "not-json", "[1, 2]", '"text"'])
def test_parse_rejects_non_objects(raw):
    with pytest.raises(DecisionParseError):
        parse_decision_json(raw)


def test_parse_rejects_markdown_fence():
    with pytest.raises(DecisionParseError):
        parse_decision_json('```json\n{"display_message": "x"}\n```')


def test_valid_payload_becomes_decision():
    decision = decision_from_text(decision_json())
    assert isinstance(decision, Decision)
    assert decision.ui_directive == UIDirective.PHYSICAL_TEST
    assert decision.options == ["Glassy", "Metallic", "Unsure"]
    assert decision.completed_categories == ["Color"]


def test_legacy_ui_component_key_is_accepted():
    payload = json.loads(decision_json())
    payload["ui_component"] = payload.pop("ui_directive")
    decision = validate_decision_payload(payload)
    assert decision.ui_directive == UIDirective.PHYSICAL_TEST


def test_long_display_message_is_truncated_not_rejected():
    decision = decision_from_text(decision_json(display_message="y" * 300))
    assert len(decision.display_message) == MAX_DISPLAY_MESSAGE_CHARS
    assert decision.display_message.endswith("...")


def test_exactly_max_length_message_is_untouched():
    message = "z" * MAX_DISPLAY_MESSAGE_CHARS
    assert decision_from_text(decision_json(display_message=message)).display_message == message


def test_conclusion_may_have_no_options():
    decision = decision_from_text(
        decision_json(ui_directive="conclusion", options=[], confidence=0.92, identified_mineral="Quartz")
    )
    assert decision.is_terminal
    assert decision.identified_mineral == "Quartz"


@pytest.mark.parametrize(
    "overrides",
    [
        {"display_message": None},
        {"display_message": 42},
        {"ui_directive": "dance"},
        {"confidence": 1.5},
        {"confidence": -0.1},
        {"progress": 101},
        {"options": "Glassy"},
        {"options": []},
        {"options": ["  "]},
        {"options": ["x" * 81]},
        {"options": [f"opt{i}" for i in range(13)]},
        {"surprise": True},
        {"confidence": "0.9"},
        {"confidence": True},
        {"progress": "50"},
        {"progress": True},
        {"progress": 50.0},
        {"ui_directive": "start", "options": ["Start Identification"]},
    ],
)
def test_schema_violations(overrides):
    with pytest.raises(DecisionSchemaViolation):
        decision_from_text(decision_json(**overrides))


def test_missing_display_message_is_violation():
    payload = json.loads(decision_json())
    del payload["display_message"]
    with pytest.raises(DecisionSchemaViolation):
        validate_decision_payload(payload)


def test_integer_confidence_is_accepted():
    decision = decision_from_text(decision_json(ui_directive="conclusion", options=[], confidence=1))
    assert decision.confidence == 1.0


def test_decision_is_immutable():
    decision = decision_from_text(decision_json())
    with pytest.raises(ValidationError):
        decision.progress = 99
