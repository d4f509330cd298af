"""
Deterministic local validator. Single pass over the ingredient list, input order preserved.
Per ingredient: safe exception -> vegan; else non-vegan term -> non_vegan; else uncertain term
-> uncertain; else presumed plant-derived (open world). Exact hits win over fuzzy ones, and
parenthesised sub-ingredients are checked alongside the entry itself.
"""
from typing import Iterable, List, Optional
import logging

from vegancheck.config import is_diagnostic_mode
from vegancheck.evaluation.confidence import compute_confidence
from vegancheck.knowledge.knowledge_base import KnowledgeBase, get_knowledge_base
from vegancheck.knowledge.term_schema import TermCategory
from vegancheck.matching.fuzzy import best_match
from vegancheck.models.evidence import MatchEvidence, MatchKind
from vegancheck.models.validation import ValidationResult
from vegancheck.normalization.normalizer import split_parenthesised

logger = logging.getLogger(__name__)

NEUTRAL_REASONING = "All ingredients are considered vegan."
NON_VEGAN_REASONING = "The following ingredients are not vegan: {items}."
UNCERTAIN_REASONING = "The following ingredients may be non-vegan and should be checked: {items}."

_SEVERITY = {
    TermCategory.SAFE_EXCEPTION: 0,
    TermCategory.UNCERTAIN: 1,
    TermCategory.NON_VEGAN: 2,
}


def _append_unique(target: List[str], item: str) -> None:
    if item not in target:
        target.append(item)


def build_reasoning(non_vegan: List[str], uncertain: List[str]) -> str:
    parts: List[str] = []
    if non_vegan:
        parts.append(NON_VEGAN_REASONING.format(items=", ".join(non_vegan)))
    if uncertain:
        parts.append(UNCERTAIN_REASONING.format(items=", ".join(uncertain)))
    return "\n\n".join(parts) or NEUTRAL_REASONING


class LocalValidator:
    """
    Applies the fuzzy matcher against an injected knowledge base.
    Holds no per-call state; one instance may serve concurrent requests.
    """

    def __init__(self, knowledge_base: Optional[KnowledgeBase] = None, threshold: Optional[float] = None):
        self._kb = knowledge_base if knowledge_base is not None else get_knowledge_base()
        self._threshold = threshold

    @property
    def knowledge_base(self) -> KnowledgeBase:
        return self._kb

    def _classify_term(self, term: str) -> Optional[MatchEvidence]:
        # Exact hits in any category beat fuzzy hits, so "mjölk" never resolves to safe "mjöl"
        matches = [
            best_match(term, terms, self._threshold)
            for terms in (self._kb.safe_exceptions, self._kb.non_vegan, self._kb.uncertain)
        ]
        for evidence in matches:
            if evidence is not None and evidence.match_kind is MatchKind.EXACT:
                return evidence
        return next((e for e in matches if e is not None), None)

    def classify(self, ingredient: str) -> Optional[MatchEvidence]:
        """
        Winning evidence for one ingredient, or None when nothing in the knowledge base matches.
        The head and every parenthesised sub-ingredient are checked; the worst category wins,
        so "färgämne (karmin)" is non-vegan and "emulgeringsmedel (E471)" is uncertain.
        """
        head, parts = split_parenthesised(ingredient)
        winner: Optional[MatchEvidence] = None
        for candidate in [head, *parts]:
            if not candidate:
                continue
            evidence = self._classify_term(candidate)
            if evidence is None:
                continue
            if winner is None or _SEVERITY[evidence.category] > _SEVERITY[winner.category]:
                winner = evidence
        return winner

    def validate(
        self,
        ingredients: Optional[Iterable[Optional[str]]],
        include_evidence: Optional[bool] = None,
    ) -> ValidationResult:
        """
        Classify every non-blank ingredient.
        - include_evidence: attach MatchEvidence list; defaults to diagnostic mode from config.
        """
        if include_evidence is None:
            include_evidence = is_diagnostic_mode()

        entries = [i for i in (ingredients or []) if isinstance(i, str) and i.strip()]
        non_vegan: List[str] = []
        uncertain: List[str] = []
        evidence: List[MatchEvidence] = []

        for ingredient in entries:
            match = self.classify(ingredient)
            if match is None:
                continue
            evidence.append(match)
            if match.category is TermCategory.SAFE_EXCEPTION:
                logger.debug("LOCAL_VALIDATOR safe_exception raw=%s matched=%s", ingredient, match.matched_term)
            elif match.category is TermCategory.NON_VEGAN:
                _append_unique(non_vegan, ingredient)
            else:
                _append_unique(uncertain, ingredient)

        confidence = compute_confidence(len(entries), len(uncertain))
        if non_vegan or uncertain:
            logger.info(
                "LOCAL_VALIDATOR total=%d non_vegan=%s uncertain=%s confidence=%.2f",
                len(entries), non_vegan, uncertain, confidence,
            )

        return ValidationResult(
            is_vegan=not non_vegan,
            non_vegan_ingredients=non_vegan,
            uncertain_ingredients=uncertain,
            confidence=confidence,
            reasoning=build_reasoning(non_vegan, uncertain),
            debug_evidence=evidence if include_evidence else None,
        )


_default_validator: Optional[LocalValidator] = None


def _get_default_validator() -> LocalValidator:
    global _default_validator
    if _default_validator is None:
        _default_validator = LocalValidator()
    return _default_validator


def validate_ingredients(
    ingredients: Optional[Iterable[Optional[str]]],
    knowledge_base: Optional[KnowledgeBase] = None,
    include_evidence: Optional[bool] = None,
) -> ValidationResult:
    """Validate a raw ingredient list against the process-wide (or given) knowledge base."""
    validator = LocalValidator(knowledge_base) if knowledge_base is not None else _get_default_validator()
    return validator.validate(ingredients, include_evidence=include_evidence)


def validate_ingredient(ingredient: str, include_evidence: Optional[bool] = None) -> ValidationResult:
    """Single-ingredient convenience wrapper."""
    return validate_ingredients([ingredient], include_evidence=include_evidence)
