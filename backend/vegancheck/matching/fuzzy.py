"""
Whole-string fuzzy comparison of ingredient names.

Two names match when their normalized forms are identical or within a Levenshtein
distance of floor(max_len * (1 - threshold)), never more than MAX_EDIT_DISTANCE edits.
There is no prefix or substring strategy: "mjölksyra" must never match "mjölk" because
it starts with it, and "havremjölkspulver" must never match "kärnmjölkspulver" because
only the first root differs.
"""
import math
import logging
from typing import Iterable, Optional

from rapidfuzz.distance import Levenshtein

from vegancheck.config import get_fuzzy_threshold
from vegancheck.knowledge.term_schema import IngredientTerm
from vegancheck.models.evidence import MatchEvidence, MatchKind
from vegancheck.normalization.normalizer import normalize_term

logger = logging.getLogger(__name__)

# Float slack so 5 * (1 - 0.8) floors to 1, not 0
_EPSILON = 1e-9

# Spelling variants differ by a letter or two; a swapped compound root differs by more
MAX_EDIT_DISTANCE = 2


def _max_distance(max_len: int, threshold: float) -> int:
    return min(math.floor(max_len * (1.0 - threshold) + _EPSILON), MAX_EDIT_DISTANCE)


def _keys_match(a: str, b: str, threshold: float) -> bool:
    if a == b:
        return True
    if not a or not b:
        return False
    max_len = max(len(a), len(b))
    return Levenshtein.distance(a, b) <= _max_distance(max_len, threshold)


def similarity(a: str, b: str) -> float:
    """1 - distance / max_len on normalized strings; 1.0 for two empty strings."""
    na, nb = normalize_term(a), normalize_term(b)
    max_len = max(len(na), len(nb))
    if max_len == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(na, nb) / max_len


def fuzzy_match(candidate: str, reference: str, threshold: Optional[float] = None) -> bool:
    """
    True when candidate and reference denote the same substance.
    Both empty -> True; exactly one empty -> False.
    """
    if threshold is None:
        threshold = get_fuzzy_threshold()
    return _keys_match(normalize_term(candidate or ""), normalize_term(reference or ""), threshold)


def best_match(
    candidate: str,
    terms: Iterable[IngredientTerm],
    threshold: Optional[float] = None,
) -> Optional[MatchEvidence]:
    """
    Highest-similarity term that passes fuzzy_match, or None.
    An exact (normalized) hit returns immediately.
    """
    if threshold is None:
        threshold = get_fuzzy_threshold()
    key = normalize_term(candidate)
    if not key:
        return None

    best: Optional[IngredientTerm] = None
    best_sim = 0.0
    for term in terms:
        if term.key == key:
            return MatchEvidence(candidate, term.text, term.category, 1.0, MatchKind.EXACT)
        if not _keys_match(key, term.key, threshold):
            continue
        sim = 1.0 - Levenshtein.distance(key, term.key) / max(len(key), len(term.key))
        if sim > best_sim:
            best, best_sim = term, sim

    if best is None:
        return None
    logger.debug("FUZZY_MATCH input=%s matched=%s similarity=%.3f", candidate, best.text, best_sim)
    return MatchEvidence(candidate, best.text, best.category, round(best_sim, 4), MatchKind.FUZZY)
