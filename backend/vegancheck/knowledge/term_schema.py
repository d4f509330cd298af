"""
Strict contract for knowledge-base entries.
Each entry carries its display text, its category and the normalized key used for matching.
"""
from dataclasses import dataclass, field
from enum import Enum

from vegancheck.normalization.normalizer import normalize_term


class TermCategory(str, Enum):
    NON_VEGAN = "NON_VEGAN"
    UNCERTAIN = "UNCERTAIN"
    SAFE_EXCEPTION = "SAFE_EXCEPTION"


@dataclass(frozen=True)
class IngredientTerm:
    text: str
    category: TermCategory
    key: str = field(default="", compare=False)

    def __post_init__(self):
        if not self.key:
            # frozen: assign through object.__setattr__
            object.__setattr__(self, "key", normalize_term(self.text))

    def to_dict(self) -> dict:
        return {"text": self.text, "category": self.category.value}

    @classmethod
    def from_dict(cls, d: dict) -> "IngredientTerm":
        cat = d.get("category", TermCategory.NON_VEGAN)
        if isinstance(cat, str):
            cat = TermCategory(cat)
        return cls(text=d["text"], category=cat)
