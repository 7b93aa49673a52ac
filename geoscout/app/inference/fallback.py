"""Fixed questioning order for offline sessions.

The script confidence values track schedule progress only. They are not
on the same scale as ``infer()`` confidence and must not be mixed with it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Tuple

from geoscout.app.contract import Decision, UIDirective
from geoscout.app.inference.engine import MatchResult, infer

logger = logging.getLogger(__name__)

OFFLINE_PREFIX = "[OFFLINE]"
UNKNOWN_MINERAL = "Unknown / Insufficient Data"
SEQUENCE_ERROR_MINERAL = "Error"
LOW_CONFIDENCE_SUFFIX = "?"

MERCY_LIMIT = 6
EARLY_EXIT_CONFIDENCE = 0.7
MERCY_CONFIDENCE = 0.4


class DecisionSource(str, Enum):
    EARLY_EXIT = "early_exit"
    MERCY_MATCH = "mercy_match"
    MERCY_UNKNOWN = "mercy_unknown"
    SCRIPT = "script"
    SEQUENCE_EXHAUSTED = "sequence_exhausted"


@dataclass(frozen=True)
class ScriptStep:
    category: str
    message: str
    ui_directive: UIDirective
    progress: int
    confidence: float
    options: Tuple[str, ...]

    def to_decision(self) -> Decision:
        return Decision(
            display_message=f"{OFFLINE_PREFIX} {self.message}",
            ui_directive=self.ui_directive,
            progress=self.progress,
            confidence=self.confidence,
            options=list(self.options),
            identified_mineral=None,
        )


FALLBACK_SCRIPT: Tuple[ScriptStep, ...] = (
    ScriptStep(
        category="Color",
        message="Mode: Deterministic Logic. Observe Color.",
        ui_directive=UIDirective.OBSERVATION,
        progress=15,
        confidence=0.1,
        options=("Colorless", "White", "Grey", "Black", "Red", "Green", "Yellow", "Gold", "Silver"),
    ),
    ScriptStep(
        category="Luster",
        message="Color recorded. Observe Luster (Reflection).",
        ui_directive=UIDirective.PHYSICAL_TEST,
        progress=30,
        confidence=0.2,
        options=("Glassy", "Metallic", "Pearly", "Dull", "Waxy", "Greasy"),
    ),
    ScriptStep(
        category="Transparency",
        message="Luster recorded. Check Transparency.",
        ui_directive=UIDirective.OBSERVATION,
        progress=45,
        confidence=0.3,
        options=("Transparent", "Translucent", "Opaque"),
    ),
    ScriptStep(
        category="Hardness",
        message="Check Hardness. Can it scratch glass?",
        ui_directive=UIDirective.PHYSICAL_TEST,
        progress=60,
        confidence=0.4,
        options=("Hard (>5.5)", "Soft (<5.5)", "Unsure"),
    ),
    ScriptStep(
        category="Streak",
        message="Perform Streak Test (Rub on ceramic plate).",
        ui_directive=UIDirective.PHYSICAL_TEST,
        progress=75,
        confidence=0.5,
        options=("White Streak", "Black Streak", "Red Streak", "Grey Streak", "No Streak", "Unsure"),
    ),
    ScriptStep(
        category="Crystal Shape/Fracture",
        message="Final check. Observe Crystal Shape or Fracture.",
        ui_directive=UIDirective.OBSERVATION,
        progress=90,
        confidence=0.6,
        options=("Cubic", "Hexagonal", "Rhombohedral", "Massive", "Conchoidal", "Fibrous", "None"),
    ),
)


@dataclass(frozen=True)
class LocalDecision:
    decision: Decision
    source: DecisionSource
    match: Optional[MatchResult] = None


def _conclusion(message: str, confidence: float, mineral: str) -> Decision:
    return Decision(
        display_message=message,
        ui_directive=UIDirective.CONCLUSION,
        progress=100,
        confidence=confidence,
        options=[],
        identified_mineral=mineral,
    ).guarded()


def _sequence_exhausted(evidence_count: int) -> Decision:
    logger.error("[LOCAL] fallback script exhausted", extra={"evidence_count": evidence_count})
    return Decision(
        display_message="Error: Sequence limit.",
        ui_directive=UIDirective.CONCLUSION,
        progress=0,
        confidence=0.0,
        options=[],
        identified_mineral=SEQUENCE_ERROR_MINERAL,
    )


def resolve_fallback(evidence_count: int, match: Optional[MatchResult] = None) -> LocalDecision:
    if match is not None and match.confidence > EARLY_EXIT_CONFIDENCE:
        return LocalDecision(
            decision=_conclusion(f"{OFFLINE_PREFIX} Strong Match: {match.name}", match.confidence, match.name),
            source=DecisionSource.EARLY_EXIT,
            match=match,
        )

    if evidence_count >= MERCY_LIMIT:
        if match is not None and match.confidence > MERCY_CONFIDENCE:
            return LocalDecision(
                decision=_conclusion(
                    f"{OFFLINE_PREFIX} Best possible match: {match.name} (Low Confidence)",
                    match.confidence,
                    match.name + LOW_CONFIDENCE_SUFFIX,
                ),
                source=DecisionSource.MERCY_MATCH,
                match=match,
            )
        return LocalDecision(
            decision=_conclusion(
                f"{OFFLINE_PREFIX} Logic Constraints: No matching mineral found in database.",
                0.0,
                UNKNOWN_MINERAL,
            ),
            source=DecisionSource.MERCY_UNKNOWN,
            match=match,
        )

    if 0 <= evidence_count < len(FALLBACK_SCRIPT):
        return LocalDecision(
            decision=FALLBACK_SCRIPT[evidence_count].to_decision(),
            source=DecisionSource.SCRIPT,
            match=match,
        )

    return LocalDecision(
        decision=_sequence_exhausted(evidence_count),
        source=DecisionSource.SEQUENCE_EXHAUSTED,
        match=match,
    )


def next_fallback_step(evidence_count: int, match: Optional[MatchResult] = None) -> Decision:
    return resolve_fallback(evidence_count, match).decision


def synthesize_local_decision(observations: Mapping[str, object]) -> LocalDecision:
    """Local engine plus script, driven by a copy of the observation set."""
    snapshot = dict(observations)
    return resolve_fallback(len(snapshot), infer(snapshot))


__all__ = [
    "OFFLINE_PREFIX",
    "UNKNOWN_MINERAL",
    "MERCY_LIMIT",
    "EARLY_EXIT_CONFIDENCE",
    "MERCY_CONFIDENCE",
    "DecisionSource",
    "ScriptStep",
    "FALLBACK_SCRIPT",
    "LocalDecision",
    "resolve_fallback",
    "next_fallback_step",
    "synthesize_local_decision",
]
