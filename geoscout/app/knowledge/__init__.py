from geoscout.app.knowledge.criteria import VISUAL_CRITERIA, VisualCriterion
from geoscout.app.knowledge.minerals import MINERAL_RULES, MineralRule

__all__ = [
    "MINERAL_RULES",
    "MineralRule",
    "VISUAL_CRITERIA",
    "VisualCriterion",
]
