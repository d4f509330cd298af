"""
Per-comparison match evidence. Diagnostic only; never drives the verdict by itself.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any

from vegancheck.knowledge.term_schema import TermCategory


class MatchKind(str, Enum):
    EXACT = "EXACT"
    FUZZY = "FUZZY"


@dataclass(frozen=True)
class MatchEvidence:
    input_term: str
    matched_term: str
    category: TermCategory
    similarity: float
    match_kind: MatchKind

    def to_dict(self) -> dict[str, Any]:
        return {
            "inputTerm": self.input_term,
            "matchedTerm": self.matched_term,
            "category": self.category.value,
            "similarity": self.similarity,
            "matchKind": self.match_kind.value,
        }
