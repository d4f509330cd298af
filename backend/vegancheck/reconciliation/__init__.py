from .quality import QualityRule, ReasoningRules, detect_quality_issues, get_reasoning_rules
from .engine import reconcile, merge_ingredients

__all__ = [
    "QualityRule",
    "ReasoningRules",
    "detect_quality_issues",
    "get_reasoning_rules",
    "reconcile",
    "merge_ingredients",
]
