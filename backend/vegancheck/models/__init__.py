from .evidence import MatchEvidence, MatchKind
from .validation import ValidationResult, clamp_confidence
from .classification import (
    ExternalClassification,
    ReconciledResult,
    QualityIssue,
    QualityIssueKind,
    IncompleteClassificationError,
    ClassificationParseError,
)

__all__ = [
    "MatchEvidence",
    "MatchKind",
    "ValidationResult",
    "clamp_confidence",
    "ExternalClassification",
    "ReconciledResult",
    "QualityIssue",
    "QualityIssueKind",
    "IncompleteClassificationError",
    "ClassificationParseError",
]
