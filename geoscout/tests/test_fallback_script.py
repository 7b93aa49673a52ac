import logging

import pytest

from geoscout.app.contract import MAX_DISPLAY_MESSAGE_CHARS, Observation, UIDirective
from geoscout.app.inference import (
    FALLBACK_SCRIPT,
    UNKNOWN_MINERAL,
    DecisionSource,
    next_fallback_step,
    resolve_fallback,
    synthesize_local_decision,
)
from geoscout.app.inference.engine import MatchResult


def _obs(*traits):
    return {t: Observation(source="observation") for t in traits}


def test_script_order_and_progress():
    categories = [step.category for step in FALLBACK_SCRIPT]
    assert categories == ["Color", "Luster", "Transparency", "Hardness", "Streak", "Crystal Shape/Fracture"]
    assert [step.progress for step in FALLBACK_SCRIPT] == [15, 30, 45, 60, 75, 90]
    assert [step.confidence for step in FALLBACK_SCRIPT] == [0.1, 0.2, 0.3, 0.4, 0.5, 0.6]


@pytest.mark.parametrize("count", range(len(FALLBACK_SCRIPT)))
def test_script_step_by_evidence_count(count):
    decision = next_fallback_step(count, None)
    step = FALLBACK_SCRIPT[count]
    assert decision.ui_directive == step.ui_directive
    assert decision.progress == step.progress
    assert decision.options == list(step.options)
    assert decision.identified_mineral is None
    assert decision.display_message.startswith("[OFFLINE]")
    assert len(decision.display_message) <= MAX_DISPLAY_MESSAGE_CHARS


def test_empty_observations_ask_for_color():
    local = synthesize_local_decision({})
    assert local.source == DecisionSource.SCRIPT
    assert local.decision.ui_directive == UIDirective.OBSERVATION
    assert local.decision.progress == 15
    assert "Colorless" in local.decision.options


def test_strong_match_exits_early_at_any_count():
    local = synthesize_local_decision(_obs("Glassy", "Transparent", "Hexagonal"))
    assert local.source == DecisionSource.EARLY_EXIT
    decision = local.decision
    assert decision.ui_directive == UIDirective.CONCLUSION
    assert decision.identified_mineral == "Quartz (SiO₂)"
    assert decision.confidence == pytest.approx(0.75)
    assert decision.progress == 100
    assert decision.options == []
    assert decision.display_message == "[OFFLINE] Strong Match: Quartz (SiO₂)"


def test_confidence_exactly_at_threshold_does_not_exit():
    match = MatchResult(name="Borderline", confidence=0.7, match_count=3)
    assert resolve_fallback(2, match).source == DecisionSource.SCRIPT


def test_weak_match_below_mercy_follows_script():
    local = synthesize_local_decision(_obs("Red", "Dull"))
    assert local.source == DecisionSource.SCRIPT
    assert local.match is not None
    assert local.decision.progress == FALLBACK_SCRIPT[2].progress


def test_mercy_rule_concludes_with_low_confidence_marker():
    local = synthesize_local_decision(_obs("Red", "Dull", "Waxy", "Fibrous", "Translucent", "Unsure"))
    assert local.source == DecisionSource.MERCY_MATCH
    decision = local.decision
    assert decision.ui_directive == UIDirective.CONCLUSION
    assert decision.identified_mineral == "Hematite (Fe₂O₃)?"
    assert decision.confidence == pytest.approx(0.5)
    assert "(Low Confidence)" in decision.display_message


def test_mercy_rule_without_match_is_unknown():
    local = synthesize_local_decision(_obs("Green", "Waxy", "Translucent", "Unsure", "No Streak", "Fibrous"))
    assert local.source == DecisionSource.MERCY_UNKNOWN
    assert local.decision.identified_mineral == UNKNOWN_MINERAL
    assert local.decision.confidence == 0.0
    assert local.decision.ui_directive == UIDirective.CONCLUSION


def test_mercy_requires_confidence_strictly_above_floor():
    match = MatchResult(name="Edge", confidence=0.4, match_count=2)
    local = resolve_fallback(6, match)
    assert local.source == DecisionSource.MERCY_UNKNOWN


def test_evidence_beyond_mercy_limit_still_concludes():
    local = resolve_fallback(9, None)
    assert local.source == DecisionSource.MERCY_UNKNOWN


def test_negative_count_hits_safety_net(caplog):
    caplog.set_level(logging.ERROR)
    local = resolve_fallback(-1, None)
    assert local.source == DecisionSource.SEQUENCE_EXHAUSTED
    assert local.decision.identified_mineral == "Error"
    assert local.decision.ui_directive == UIDirective.CONCLUSION
    assert any("fallback script exhausted" in rec.getMessage() for rec in caplog.records)


def test_long_mineral_name_is_truncated_in_message():
    match = MatchResult(name="X" * 150, confidence=0.9, match_count=4)
    decision = resolve_fallback(3, match).decision
    assert len(decision.display_message) == MAX_DISPLAY_MESSAGE_CHARS
    assert decision.display_message.endswith("...")
    assert decision.identified_mineral == "X" * 150


def test_synthesis_does_not_mutate_input():
    obs = _obs("Red", "Dull")
    synthesize_local_decision(obs)
    assert list(obs) == ["Red", "Dull"]
