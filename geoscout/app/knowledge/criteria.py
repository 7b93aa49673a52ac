from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class VisualCriterion:
    category: str
    standard_options: Tuple[str, ...]
    escape_hatches: Tuple[str, ...]


# Priority order: the remote engine asks for the highest missing category first.
VISUAL_CRITERIA: Tuple[VisualCriterion, ...] = (
    VisualCriterion("Color", ("Overall", "Variations", "Uniform vs Mixed"), ("Clear / Colorless", "Other")),
    VisualCriterion("Luster", ("Glassy", "Metallic", "Pearly", "Dull", "Waxy", "Silky"), ("Dull / Earthy", "Unsure")),
    VisualCriterion("Transparency", ("Transparent", "Translucent", "Opaque"), ("Unsure",)),
    VisualCriterion(
        "Crystal Shape",
        ("Cubic", "Hexagonal", "Rhombohedral", "Prismatic", "Massive"),
        ("No Visible Crystals (Massive)",),
    ),
    VisualCriterion(
        "Cleavage/Fracture",
        ("Cleavage (1, 2, 3 directions)", "Fracture (Conchoidal, Irregular)"),
        ("No Cleavage (Fracture)", "Unsure"),
    ),
    VisualCriterion("Texture", ("Smooth", "Rough", "Grainy", "Layered"), ("Other / Mixed",)),
    VisualCriterion("Impurities", ("Veins", "Specks", "Bubbles"), ("None Visible",)),
    VisualCriterion("Tarnish", ("Rust", "Oxidation colors"), ("No Tarnish Visible",)),
    VisualCriterion("Growth", ("Single", "Clustered", "Radiating"), ("Massive / No Pattern",)),
    VisualCriterion("Appearance", ("Glass-like", "Metal-like", "Rock-like"), ("Unsure",)),
)


__all__ = ["VisualCriterion", "VISUAL_CRITERIA"]
