"""
Local deterministic opinion on an ingredient list.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from vegancheck.models.evidence import MatchEvidence


def clamp_confidence(value: Any) -> float:
    """Clamp into [0, 1]; anything non-numeric (or NaN) becomes 0.0."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if v != v:
        return 0.0
    return min(1.0, max(0.0, v))


@dataclass(frozen=True)
class ValidationResult:
    is_vegan: bool
    non_vegan_ingredients: List[str] = field(default_factory=list)
    uncertain_ingredients: List[str] = field(default_factory=list)
    confidence: float = 1.0
    reasoning: str = ""
    debug_evidence: Optional[List[MatchEvidence]] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "non_vegan_ingredients", list(self.non_vegan_ingredients))
        object.__setattr__(self, "uncertain_ingredients", list(self.uncertain_ingredients))
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))
        if self.debug_evidence is not None:
            object.__setattr__(self, "debug_evidence", list(self.debug_evidence))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "isVegan": self.is_vegan,
            "nonVeganIngredients": list(self.non_vegan_ingredients),
            "uncertainIngredients": list(self.uncertain_ingredients),
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }
        if self.debug_evidence is not None:
            out["debugEvidence"] = [e.to_dict() for e in self.debug_evidence]
        return out
