"""
External classifier opinion, quality issues, and the reconciled verdict returned to API clients.
Field names in to_dict() are the public JSON contract; keep them stable.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence

from vegancheck.models.validation import clamp_confidence


class IncompleteClassificationError(ValueError):
    """Classifier payload is missing required fields (isVegan, confidence, ingredientList)."""

    def __init__(self, missing_fields: Sequence[str], message: Optional[str] = None):
        self.missing_fields = list(missing_fields)
        super().__init__(message or f"Incomplete classification; missing: {', '.join(self.missing_fields)}")


class ClassificationParseError(ValueError):
    """No JSON object could be extracted from the classifier's raw text."""


class QualityIssueKind(str, Enum):
    BLUR = "BLUR"
    INCOMPLETE = "INCOMPLETE"
    LIGHTING = "LIGHTING"
    UNCERTAINTY = "UNCERTAINTY"


@dataclass(frozen=True)
class QualityIssue:
    kind: QualityIssueKind
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class ExternalClassification:
    is_vegan: Optional[bool]
    confidence: float
    ingredient_list: List[str]
    non_vegan_ingredients: List[str] = field(default_factory=list)
    reasoning: str = ""
    image_quality_issues: List[str] = field(default_factory=list)  # raw codes, e.g. "BLUR"
    product_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))
        object.__setattr__(self, "ingredient_list", list(self.ingredient_list))
        object.__setattr__(self, "non_vegan_ingredients", list(self.non_vegan_ingredients))
        object.__setattr__(self, "image_quality_issues", list(self.image_quality_issues))
        object.__setattr__(self, "reasoning", self.reasoning or "")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "isVegan": self.is_vegan,
            "confidence": self.confidence,
            "ingredientList": list(self.ingredient_list),
            "nonVeganIngredients": list(self.non_vegan_ingredients),
            "reasoning": self.reasoning,
        }
        if self.image_quality_issues:
            out["imageQualityIssues"] = list(self.image_quality_issues)
        if self.product_name:
            out["productName"] = self.product_name
        return out


@dataclass(frozen=True)
class ReconciledResult:
    is_vegan: Optional[bool]
    confidence: float
    non_vegan_ingredients: List[str] = field(default_factory=list)
    reasoning: str = ""
    needs_better_input: bool = False
    quality_issues: List[QualityIssue] = field(default_factory=list)

    def __post_init__(self):
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))
        object.__setattr__(self, "non_vegan_ingredients", list(self.non_vegan_ingredients))
        object.__setattr__(self, "quality_issues", list(self.quality_issues))

    def to_dict(self) -> dict[str, Any]:
        return {
            "isVegan": self.is_vegan,
            "confidence": self.confidence,
            "nonVeganIngredients": list(self.non_vegan_ingredients),
            "reasoning": self.reasoning,
            "needsBetterInput": self.needs_better_input,
            "qualityIssues": [q.to_dict() for q in self.quality_issues],
        }
