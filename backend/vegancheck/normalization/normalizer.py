"""
Deterministic normalization only. No knowledge-base lookups here.
normalize_term produces the comparison key; clean_ingredient strips label noise first.
"""
import re
import logging
import unicodedata
from typing import List, Tuple

logger = logging.getLogger(__name__)

_PERCENT_RE = re.compile(r"\s*\(\s*\d+(?:[,.]\d+)?\s*%\s*\)")
_BARE_PERCENT_RE = re.compile(r"\s+\d+(?:[,.]\d+)?\s*%$")
_PERCENT_ONLY_RE = re.compile(r"^\d+(?:[,.]\d+)?\s*%$")
_PARENS_RE = re.compile(r"\([^)]*\)")
_INNER_GROUP_RE = re.compile(r"\(([^()]*)\)")
_E_NUMBER_RE = re.compile(r"\bE\s?-?\d{3,4}[a-z]?\b", re.IGNORECASE)
_BULLET_RE = re.compile(r"^[•*\-–—]\s*")


def _fold_diacritics(text: str) -> str:
    # å, ä -> a; ö -> o; é, è, ë -> e
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_term(text: str) -> str:
    """
    Comparison key for an ingredient or knowledge-base term.
    - Trim, case-fold, fold diacritics, collapse inner whitespace.
    """
    if not text or not isinstance(text, str):
        return ""
    t = _fold_diacritics(text.strip().casefold())
    t = re.sub(r"\s+", " ", t)
    return t.strip()


def clean_ingredient(raw: str, keep_parentheses: bool = False) -> str:
    """
    Remove label noise from one ingredient entry.
    "socker (12%)" -> "socker"; "• salt" -> "salt"; "emulgeringsmedel (E471)" keeps "(E471)".
    - keep_parentheses: keep every parenthesised sub-ingredient ("färgämne (karmin)").
    """
    if not raw or not isinstance(raw, str):
        return ""
    t = raw.strip()
    t = _PERCENT_RE.sub("", t)
    t = _BARE_PERCENT_RE.sub("", t)
    if not keep_parentheses:
        t = _PARENS_RE.sub(lambda m: m.group(0) if _E_NUMBER_RE.search(m.group(0)) else "", t)
    t = _BULLET_RE.sub("", t)
    t = re.sub(r"\s+", " ", t).strip()
    if t != raw.strip():
        logger.debug("NORMALIZE cleaned raw=%s -> %s", raw, t)
    return t


def split_parenthesised(raw: str) -> Tuple[str, List[str]]:
    """
    Separate an entry into its head and its parenthesised sub-ingredients.
    "färgämne (karmin, E120)" -> ("färgämne", ["karmin", "E120"]); percentages are dropped.
    """
    if not raw or not isinstance(raw, str):
        return "", []
    inner: List[str] = []
    for group in _INNER_GROUP_RE.findall(raw):
        for part in re.split(r"[,;]", group):
            part = clean_ingredient(part)
            if part and not _PERCENT_ONLY_RE.match(part):
                inner.append(part)
    head = clean_ingredient(re.sub(r"[()]", " ", _PARENS_RE.sub(" ", raw)))
    return head, inner
