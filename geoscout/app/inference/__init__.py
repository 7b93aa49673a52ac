from geoscout.app.inference.engine import MatchResult, infer
from geoscout.app.inference.fallback import (
    FALLBACK_SCRIPT,
    MERCY_LIMIT,
    OFFLINE_PREFIX,
    UNKNOWN_MINERAL,
    DecisionSource,
    LocalDecision,
    next_fallback_step,
    resolve_fallback,
    synthesize_local_decision,
)

__all__ = [
    "MatchResult",
    "infer",
    "FALLBACK_SCRIPT",
    "MERCY_LIMIT",
    "OFFLINE_PREFIX",
    "UNKNOWN_MINERAL",
    "DecisionSource",
    "LocalDecision",
    "next_fallback_step",
    "resolve_fallback",
    "synthesize_local_decision",
]
