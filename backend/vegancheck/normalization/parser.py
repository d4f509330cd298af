"""
Split free ingredient text (pasted label text, OCR output) into ingredient entries.
"""
import re
import logging
from typing import List

from vegancheck.normalization.normalizer import clean_ingredient

logger = logging.getLogger(__name__)

# Leading "Ingredienser:" / "Ingredients:" style headers
_HEADER_RE = re.compile(
    r"^\s*(?:ing?redien(?:s|t)er|ingredients?|inneh[åa]ll(?:er)?|contents?)\s*:\s*",
    re.IGNORECASE,
)

# Separators outside parentheses: comma, semicolon, newline, bullets, " och ", " and "
_SEPARATOR_RE = re.compile(
    r"\s*[,;]\s*|\s*[•*–—]\s*|\s+-\s+|\s+och\s+|\s+and\s+|\s*\r?\n\s*",
    re.IGNORECASE,
)


def _split_outside_parentheses(text: str) -> List[str]:
    """Split on separators at parenthesis depth 0 only, so 'emulgeringsmedel (E471, E472)' stays whole."""
    out: List[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif depth == 0:
            m = _SEPARATOR_RE.match(text, i)
            if m and m.end() > i:
                out.append(text[start:i])
                start = m.end()
                i = m.end()
                continue
        i += 1
    out.append(text[start:])
    return out


def split_ingredient_text(text: str) -> List[str]:
    """
    Split ingredient text into cleaned entries, in label order.

    "Ingredienser: socker, mjölkpulver (12%) och salt" -> ["socker", "mjölkpulver", "salt"]
    Parenthesised sub-ingredients stay with their entry ("färgämne (karmin)").
    Empty parts are dropped; nothing is resolved or deduplicated here.
    """
    if not text or not isinstance(text, str):
        return []
    body = _HEADER_RE.sub("", text.strip())
    parts = [clean_ingredient(p, keep_parentheses=True) for p in _split_outside_parentheses(body)]
    result = [p.rstrip(".").strip() for p in parts if p and p.rstrip(".").strip()]
    logger.debug("PARSER split count=%d", len(result))
    return result
