"""
Reasoning-text rules: quality-issue keyword families and positive-vegan phrases.

Rules are data (data/reasoning_rules.json), not branching code, so a new language is a
new keyword list. Keywords match on word boundaries after case-folding, so "partial"
does not fire on "partially hydrogenated". A keyword or phrase right after a negation
("not blurry", "inte suddig") does not count.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import json
import logging
import re
import threading

from vegancheck.config import get_reasoning_rules_path
from vegancheck.models.classification import QualityIssue, QualityIssueKind

logger = logging.getLogger(__name__)

_NEGATION_RE = re.compile(r"(?:(?<!\w)(?:not|never|inte|ej|icke)|n't)\s+$")


def _phrase_pattern(phrases: Iterable[str]) -> Optional[re.Pattern]:
    cleaned = sorted({p.casefold().strip() for p in phrases if p and p.strip()}, key=len, reverse=True)
    if not cleaned:
        return None
    return re.compile(r"(?<!\w)(?:" + "|".join(re.escape(p) for p in cleaned) + r")(?!\w)")


def _has_unnegated_match(pattern: Optional[re.Pattern], text: Optional[str]) -> bool:
    """True when pattern occurs in text without a negation right before it ("not blurry")."""
    if not pattern or not text:
        return False
    folded = text.casefold()
    for m in pattern.finditer(folded):
        if not _NEGATION_RE.search(folded[max(0, m.start() - 16):m.start()]):
            return True
    return False


@dataclass(frozen=True)
class QualityRule:
    """One keyword family -> one QualityIssue kind. codes are structured imageQualityIssues values."""
    kind: QualityIssueKind
    message: str
    keywords: Tuple[str, ...] = ()
    codes: Tuple[str, ...] = ()
    _pattern: Optional[re.Pattern] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "codes", tuple(c.upper() for c in self.codes))
        object.__setattr__(self, "_pattern", _phrase_pattern(self.keywords))

    def matches_text(self, text: str) -> bool:
        return _has_unnegated_match(self._pattern, text)

    def matches_codes(self, codes: Iterable[str]) -> bool:
        return any(str(c).strip().upper() in self.codes for c in codes)

    @classmethod
    def from_dict(cls, d: dict) -> "QualityRule":
        return cls(
            kind=QualityIssueKind(d["kind"]),
            message=d.get("message", ""),
            keywords=tuple(d.get("keywords", []) or []),
            codes=tuple(d.get("codes", []) or []),
        )


class ReasoningRules:
    """Immutable rule set consulted by the reconciliation engine."""

    def __init__(self, quality_rules: Iterable[QualityRule], positive_vegan_phrases: Iterable[str] = ()):
        self._quality_rules: Tuple[QualityRule, ...] = tuple(quality_rules)
        self._positive_phrases: Tuple[str, ...] = tuple(positive_vegan_phrases)
        self._positive_pattern = _phrase_pattern(self._positive_phrases)

    @property
    def quality_rules(self) -> Tuple[QualityRule, ...]:
        return self._quality_rules

    @property
    def positive_vegan_phrases(self) -> Tuple[str, ...]:
        return self._positive_phrases

    def has_positive_vegan_language(self, text: Optional[str]) -> bool:
        """True when a positive-vegan phrase occurs without a negation right before it ("not fully vegan")."""
        return _has_unnegated_match(self._positive_pattern, text)

    def detect_quality_issues(self, *texts: Optional[str], codes: Iterable[str] = ()) -> List[QualityIssue]:
        """One QualityIssue per matching family, in rule order, deduplicated by kind."""
        codes = list(codes)
        issues: List[QualityIssue] = []
        seen: set[QualityIssueKind] = set()
        for rule in self._quality_rules:
            if rule.kind in seen:
                continue
            if rule.matches_codes(codes) or any(rule.matches_text(t) for t in texts if t):
                seen.add(rule.kind)
                issues.append(QualityIssue(rule.kind, rule.message))
        return issues

    @classmethod
    def from_file(cls, path: Optional[Path] = None) -> "ReasoningRules":
        path = path or get_reasoning_rules_path()
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        rules = cls(
            quality_rules=[QualityRule.from_dict(r) for r in data.get("quality_rules", [])],
            positive_vegan_phrases=data.get("positive_vegan_phrases", []) or [],
        )
        logger.info(
            "Loaded reasoning rules version=%s quality_families=%d positive_phrases=%d from %s",
            data.get("rules_version", "0"), len(rules.quality_rules), len(rules.positive_vegan_phrases), path,
        )
        return rules


_default_rules: Optional[ReasoningRules] = None
_default_lock = threading.Lock()


def get_reasoning_rules() -> ReasoningRules:
    global _default_rules
    if _default_rules is None:
        with _default_lock:
            if _default_rules is None:
                _default_rules = ReasoningRules.from_file()
    return _default_rules


def detect_quality_issues(
    reasoning: Optional[str],
    raw_text: Optional[str] = None,
    codes: Iterable[str] = (),
    rules: Optional[ReasoningRules] = None,
) -> List[QualityIssue]:
    """Scan classifier reasoning (and any raw accompanying text) for quality-issue families."""
    return (rules or get_reasoning_rules()).detect_quality_issues(reasoning, raw_text, codes=codes)
