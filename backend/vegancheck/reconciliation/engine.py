"""
Reconciliation of the local deterministic opinion with the external classifier's opinion.

Order of rules:
1. Positive-vegan reasoning with no named non-vegan ingredient overrides a stale isVegan=false;
   a classifier that names non-vegan ingredients yet says isVegan=true is read as false.
2. Quality issues are detected from the classifier's reasoning, raw text and quality codes.
3. Quality issues + low external confidence -> ask for better input (isVegan=None),
   unless local evidence already says non-vegan.
4. isVegan=false with no named ingredient defers to the local verdict.
5. Otherwise both opinions must agree on vegan; confidence is the weaker of the two.

Pure: no I/O, no shared mutable state.
"""
from typing import Iterable, List, Optional
import logging

from vegancheck.config import get_confidence_threshold
from vegancheck.models.classification import ExternalClassification, ReconciledResult
from vegancheck.models.validation import ValidationResult
from vegancheck.normalization.normalizer import normalize_term
from vegancheck.reconciliation.quality import ReasoningRules, get_reasoning_rules

logger = logging.getLogger(__name__)


def merge_ingredients(*lists: Iterable[str]) -> List[str]:
    """Deduplicated union in first-seen order; spellings differing only in case/diacritics collapse."""
    seen: set[str] = set()
    out: List[str] = []
    for items in lists:
        for item in items:
            key = normalize_term(item)
            if key and key not in seen:
                seen.add(key)
                out.append(item)
    return out


def _join_reasoning(*parts: Optional[str]) -> str:
    return "\n\n".join(p.strip() for p in parts if p and p.strip())


def _combine(external_is_vegan: Optional[bool], local_is_vegan: bool) -> Optional[bool]:
    # Local non-vegan evidence wins over an undecided classifier
    if not local_is_vegan:
        return False
    if external_is_vegan is None:
        return None
    return external_is_vegan and local_is_vegan


def reconcile(
    external: ExternalClassification,
    local: ValidationResult,
    is_cropped: bool = False,
    raw_text: Optional[str] = None,
    rules: Optional[ReasoningRules] = None,
) -> ReconciledResult:
    """
    Merge the two opinions into the final verdict.
    - is_cropped: input was an ingredients-only crop; uses the more lenient confidence threshold.
    - raw_text: any raw classifier text accompanying the structured payload, scanned for quality issues.
    """
    rules = rules or get_reasoning_rules()

    external_is_vegan = external.is_vegan
    if not external.non_vegan_ingredients and rules.has_positive_vegan_language(external.reasoning):
        if external_is_vegan is not True:
            logger.info("RECONCILE reasoning_override external_is_vegan=%s -> True", external_is_vegan)
        external_is_vegan = True
    elif external.non_vegan_ingredients and external_is_vegan is True:
        logger.info("RECONCILE contradiction external names non_vegan=%s but is_vegan=True", external.non_vegan_ingredients)
        external_is_vegan = False

    issues = rules.detect_quality_issues(external.reasoning, raw_text, codes=external.image_quality_issues)
    confidence = min(external.confidence, local.confidence)
    non_vegan = merge_ingredients(external.non_vegan_ingredients, local.non_vegan_ingredients)
    reasoning = _join_reasoning(external.reasoning, local.reasoning)

    threshold = get_confidence_threshold(is_cropped)
    if issues and external.confidence < threshold:
        if local.is_vegan:
            logger.info(
                "RECONCILE gated needs_better_input issues=%s external_confidence=%.2f threshold=%.2f cropped=%s",
                [i.kind.value for i in issues], external.confidence, threshold, is_cropped,
            )
            return ReconciledResult(
                is_vegan=None,
                confidence=confidence,
                non_vegan_ingredients=non_vegan,
                reasoning=reasoning,
                needs_better_input=True,
                quality_issues=issues,
            )
        logger.info("RECONCILE gating skipped: local evidence is non-vegan %s", local.non_vegan_ingredients)

    if external_is_vegan is False and not external.non_vegan_ingredients:
        logger.info("RECONCILE unsupported_negative deferring to local is_vegan=%s", local.is_vegan)
        is_vegan: Optional[bool] = local.is_vegan
    else:
        is_vegan = _combine(external_is_vegan, local.is_vegan)

    logger.debug(
        "RECONCILE result is_vegan=%s confidence=%.2f non_vegan=%s issues=%d",
        is_vegan, confidence, non_vegan, len(issues),
    )
    return ReconciledResult(
        is_vegan=is_vegan,
        confidence=confidence,
        non_vegan_ingredients=non_vegan,
        reasoning=reasoning,
        needs_better_input=False,
        quality_issues=issues,
    )
