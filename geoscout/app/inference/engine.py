"""Deterministic local inference.

White-box, rule-scored identification used when the remote engine is not
available. Returns ``None`` when no rule reaches its threshold; that is
the normal "insufficient evidence" outcome, not an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from geoscout.app.knowledge import MINERAL_RULES, MineralRule

# Corroborating traits needed for a "solid" identification.
CONFIDENCE_BASELINE = 4


@dataclass(frozen=True)
class MatchResult:
    name: str
    confidence: float
    match_count: int


def canonical_traits(observed: Iterable[str]) -> frozenset[str]:
    return frozenset(str(key).strip().casefold() for key in observed)


def match_count(rule: MineralRule, observed: frozenset[str]) -> int:
    return len(rule.canonical_traits & observed)


def confidence_for(count: int) -> float:
    return min(count / CONFIDENCE_BASELINE, 1.0)


def infer(
    observations: Mapping[str, object],
    rules: Sequence[MineralRule] = MINERAL_RULES,
) -> Optional[MatchResult]:
    """Score the observation keys against every rule.

    Among qualifying rules the highest match count wins; on a tie the
    rule declared first keeps the lead (strict ``>`` comparison).
    """
    observed = canonical_traits(observations.keys())
    best: Optional[MineralRule] = None
    best_count = 0
    for rule in rules:
        count = match_count(rule, observed)
        if count < rule.min_matches:
            continue
        if best is None or count > best_count:
            best = rule
            best_count = count

    if best is None:
        return None
    return MatchResult(name=best.name, confidence=confidence_for(best_count), match_count=best_count)


__all__ = ["CONFIDENCE_BASELINE", "MatchResult", "canonical_traits", "match_count", "confidence_for", "infer"]
