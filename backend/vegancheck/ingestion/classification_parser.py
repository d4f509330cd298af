"""
Ingestion boundary for the external classifier's output.

The classifier answers with loosely structured JSON, sometimes wrapped in prose or a
```json fence. decode_classification turns a payload dict into a typed
ExternalClassification and rejects payloads missing isVegan, confidence or ingredientList.
"""
import json
import logging
import re
from typing import Any, Iterable, List, Optional

from vegancheck.models.classification import (
    ClassificationParseError,
    ExternalClassification,
    IncompleteClassificationError,
)
from vegancheck.models.validation import clamp_confidence

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("isVegan", "confidence", "ingredientList")
_EXPECTED_KEYS = ("isVegan", "ingredientList", "nonVeganIngredients")

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*?\}")


def _clean_list(values: Any) -> List[str]:
    """Trim, drop empties, dedupe case-insensitively keeping the first spelling."""
    if not isinstance(values, list):
        return []
    seen: set[str] = set()
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        key = s.lower()
        if s and key not in seen:
            seen.add(key)
            out.append(s)
    return out


def _parse_confidence(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        raw = value.strip()
        scale = 100.0 if raw.endswith("%") else 1.0
        try:
            value = float(raw.rstrip("%")) / scale
        except ValueError:
            logger.warning("CLASSIFICATION non-numeric confidence=%r; using 0.0", value)
            return 0.0
    return clamp_confidence(value)


def decode_classification(payload: Any) -> ExternalClassification:
    """
    Validate and decode one classifier payload.
    Raises IncompleteClassificationError when a required field is absent.
    """
    if not isinstance(payload, dict):
        raise IncompleteClassificationError(list(REQUIRED_FIELDS), "Classification payload must be a JSON object")
    missing = [f for f in REQUIRED_FIELDS if f not in payload]
    if missing:
        logger.warning("CLASSIFICATION incomplete missing=%s keys=%s", missing, sorted(payload)[:10])
        raise IncompleteClassificationError(missing)
    if not isinstance(payload["ingredientList"], list):
        raise IncompleteClassificationError(["ingredientList"], "ingredientList must be a list")

    is_vegan = payload["isVegan"] if isinstance(payload["isVegan"], bool) else None
    reasoning = payload.get("reasoning")
    product_name = payload.get("productName")

    return ExternalClassification(
        is_vegan=is_vegan,
        confidence=_parse_confidence(payload["confidence"]),
        ingredient_list=_clean_list(payload["ingredientList"]),
        non_vegan_ingredients=_clean_list(payload.get("nonVeganIngredients")),
        reasoning=reasoning if isinstance(reasoning, str) else "",
        image_quality_issues=[s.upper() for s in _clean_list(payload.get("imageQualityIssues"))],
        product_name=product_name.strip() if isinstance(product_name, str) and product_name.strip() else None,
    )


def _try_json(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None


def _candidates(text: str) -> Iterable[str]:
    yield text.strip()
    for m in _FENCE_RE.finditer(text):
        yield m.group(1)
    # Outermost braces
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        yield text[start:end + 1]


def extract_json_object(text: str) -> Optional[dict]:
    """
    Best-effort extraction of the classifier's JSON object from raw text.
    Prefers an object that carries one of the expected keys.
    """
    if not text or not text.strip():
        return None
    for candidate in _candidates(text):
        parsed = _try_json(candidate)
        if isinstance(parsed, dict):
            return parsed

    fragments = _OBJECT_RE.findall(text)
    for fragment in fragments:
        parsed = _try_json(fragment)
        if isinstance(parsed, dict) and any(k in parsed for k in _EXPECTED_KEYS):
            return parsed
    for fragment in sorted(fragments, key=len, reverse=True):
        parsed = _try_json(fragment)
        if isinstance(parsed, dict):
            return parsed
    logger.warning("CLASSIFICATION no JSON object found len=%d snippet=%r", len(text), text[:100])
    return None


def parse_classification_text(text: str) -> ExternalClassification:
    """Raw classifier text -> ExternalClassification. Raises ClassificationParseError or IncompleteClassificationError."""
    payload = extract_json_object(text)
    if payload is None:
        raise ClassificationParseError("Could not extract a JSON object from the classifier response")
    result = decode_classification(payload)
    logger.info(
        "CLASSIFICATION parsed is_vegan=%s confidence=%.2f ingredients=%d non_vegan=%d",
        result.is_vegan, result.confidence, len(result.ingredient_list), len(result.non_vegan_ingredients),
    )
    return result
