"""
Vegan knowledge base. Loads data/knowledge_base.json once; read-only afterwards.

Three category lists: definite non-vegan terms, uncertain terms, and safe exceptions
(plant compounds that look like a non-vegan root, e.g. "havremjölk").
Queries never mutate state, so one instance is shared by every request.
"""
from pathlib import Path
from typing import Iterable, Optional, Tuple
import json
import logging
import threading

from .term_schema import IngredientTerm, TermCategory
from vegancheck.config import get_knowledge_base_path

logger = logging.getLogger(__name__)

# JSON section name -> category
_SECTIONS: dict[str, TermCategory] = {
    "non_vegan": TermCategory.NON_VEGAN,
    "uncertain": TermCategory.UNCERTAIN,
    "safe_exceptions": TermCategory.SAFE_EXCEPTION,
}


class KnowledgeBaseError(RuntimeError):
    """Knowledge base file missing or structurally invalid."""


class KnowledgeBase:
    """
    Immutable term store grouped by category.
    Terms are deduplicated by normalized key within a category (first spelling kept).
    """

    def __init__(self, terms: Iterable[IngredientTerm], version: str = "0"):
        grouped: dict[TermCategory, list[IngredientTerm]] = {c: [] for c in TermCategory}
        seen: dict[TermCategory, set[str]] = {c: set() for c in TermCategory}
        for term in terms:
            if not term.key or term.key in seen[term.category]:
                continue
            seen[term.category].add(term.key)
            grouped[term.category].append(term)
        self._by_category: dict[TermCategory, Tuple[IngredientTerm, ...]] = {
            c: tuple(items) for c, items in grouped.items()
        }
        self._version = version

    @classmethod
    def from_lists(
        cls,
        non_vegan: Iterable[str] = (),
        uncertain: Iterable[str] = (),
        safe_exceptions: Iterable[str] = (),
        version: str = "0",
    ) -> "KnowledgeBase":
        terms = [IngredientTerm(t, TermCategory.NON_VEGAN) for t in non_vegan]
        terms += [IngredientTerm(t, TermCategory.UNCERTAIN) for t in uncertain]
        terms += [IngredientTerm(t, TermCategory.SAFE_EXCEPTION) for t in safe_exceptions]
        return cls(terms, version=version)

    @classmethod
    def from_file(cls, path: Optional[Path] = None) -> "KnowledgeBase":
        path = path or get_knowledge_base_path()
        if not path.exists():
            raise KnowledgeBaseError(f"Knowledge base file not found at {path}")
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise KnowledgeBaseError(f"Knowledge base {path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise KnowledgeBaseError(f"Knowledge base {path} must be a JSON object")

        terms: list[IngredientTerm] = []
        for section, category in _SECTIONS.items():
            items = data.get(section)
            if not isinstance(items, list):
                raise KnowledgeBaseError(f"Knowledge base {path} is missing list '{section}'")
            terms.extend(IngredientTerm(str(t), category) for t in items if str(t).strip())

        kb = cls(terms, version=str(data.get("knowledge_base_version", "0")))
        logger.info(
            "Loaded knowledge base version=%s non_vegan=%d uncertain=%d safe_exceptions=%d from %s",
            kb.get_version(),
            len(kb.terms(TermCategory.NON_VEGAN)),
            len(kb.terms(TermCategory.UNCERTAIN)),
            len(kb.terms(TermCategory.SAFE_EXCEPTION)),
            path,
        )
        return kb

    def terms(self, category: TermCategory) -> Tuple[IngredientTerm, ...]:
        return self._by_category[category]

    @property
    def non_vegan(self) -> Tuple[IngredientTerm, ...]:
        return self._by_category[TermCategory.NON_VEGAN]

    @property
    def uncertain(self) -> Tuple[IngredientTerm, ...]:
        return self._by_category[TermCategory.UNCERTAIN]

    @property
    def safe_exceptions(self) -> Tuple[IngredientTerm, ...]:
        return self._by_category[TermCategory.SAFE_EXCEPTION]

    def get_version(self) -> str:
        return self._version

    def __len__(self) -> int:
        return sum(len(t) for t in self._by_category.values())


_default_kb: Optional[KnowledgeBase] = None
_default_lock = threading.Lock()


def get_knowledge_base() -> KnowledgeBase:
    """Process-wide knowledge base, loaded on first use from the configured path."""
    global _default_kb
    if _default_kb is None:
        with _default_lock:
            if _default_kb is None:
                _default_kb = KnowledgeBase.from_file()
    return _default_kb
