"""Offline mineral knowledge base.

Field-identifiable minerals only. Declaration order matters: when two
rules tie on match count, the one declared first wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class MineralRule:
    name: str
    traits: Tuple[str, ...]
    min_matches: int

    def __post_init__(self) -> None:
        if self.min_matches < 1:
            raise ValueError(f"{self.name}: min_matches must be >= 1")
        if self.min_matches > len(self.traits):
            raise ValueError(f"{self.name}: min_matches exceeds trait count")
        folded = [t.casefold() for t in self.traits]
        if len(set(folded)) != len(folded):
            raise ValueError(f"{self.name}: duplicate traits")

    @property
    def canonical_traits(self) -> frozenset[str]:
        return frozenset(t.casefold() for t in self.traits)


MINERAL_RULES: Tuple[MineralRule, ...] = (
    MineralRule(
        name="Quartz (SiO₂)",
        traits=("Glassy", "Transparent", "Translucent", "Hexagonal", "Conchoidal", "Colorless"),
        min_matches=3,
    ),
    MineralRule(
        name="Calcite (CaCO₃)",
        traits=("Rhombohedral", "Glassy", "Pearly", "White", "Transparent"),
        min_matches=2,
    ),
    MineralRule(
        name="Feldspar",
        traits=("Opaque", "Glassy", "Pink", "White", "Blocky"),
        min_matches=3,
    ),
    MineralRule(
        name="Pyrite (FeS₂)",
        traits=("Metallic", "Gold", "Yellow", "Cubic", "Massive"),
        min_matches=3,
    ),
    MineralRule(
        name="Galena (PbS)",
        traits=("Metallic", "Cubic", "Silver", "Grey", "Opaque", "Heavy"),
        min_matches=3,
    ),
    MineralRule(
        name="Hematite (Fe₂O₃)",
        traits=("Red", "Brown", "Dull", "Earthy", "Metallic"),
        min_matches=2,
    ),
    MineralRule(
        name="Magnetite (Fe₃O₄)",
        traits=("Metallic", "Black", "Opaque", "Magnetic"),
        min_matches=3,
    ),
    MineralRule(
        name="Halite (NaCl)",
        traits=("Cubic", "Transparent", "Colorless", "Salty"),
        min_matches=3,
    ),
    MineralRule(
        name="Gypsum (CaSO₄·2H₂O)",
        traits=("White", "Transparent", "Tabular", "Soft"),
        min_matches=2,
    ),
)


__all__ = ["MineralRule", "MINERAL_RULES"]
