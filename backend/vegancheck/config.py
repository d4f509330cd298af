"""
Feature flags, paths, and centralized configuration.
Data paths resolve relative to the package; every value can be overridden from the environment.
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# backend/vegancheck/config.py -> parent=vegancheck, parent.parent=backend
_PACKAGE_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _PACKAGE_DIR.parent
_DATA_DIR = _PACKAGE_DIR / "data"

_TRUTHY = ("1", "true", "yes")


# --- Diagnostic mode (read per call so tests and reloads see env changes) ---
def get_app_env() -> str:
    return os.environ.get("APP_ENV", "production").strip().lower()


def is_diagnostic_mode() -> bool:
    """Match evidence is attached to results only in development / diagnostic runs."""
    if os.environ.get("VEGANCHECK_DEBUG_EVIDENCE", "").lower() in _TRUTHY:
        return True
    return get_app_env() == "development"


# --- Data paths ---
def get_knowledge_base_path() -> Path:
    override = os.environ.get("VEGANCHECK_KNOWLEDGE_BASE_PATH", "").strip()
    return Path(override) if override else _DATA_DIR / "knowledge_base.json"


def get_reasoning_rules_path() -> Path:
    override = os.environ.get("VEGANCHECK_REASONING_RULES_PATH", "").strip()
    return Path(override) if override else _DATA_DIR / "reasoning_rules.json"


# --- Thresholds ---
def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("CONFIG invalid float for %s=%r; using default %s", name, raw, default)
        return default


def get_fuzzy_threshold() -> float:
    return _float_env("VEGANCHECK_FUZZY_THRESHOLD", 0.8)


def get_confidence_threshold(is_cropped: bool) -> float:
    """Gating threshold. Full-package images are held to the stricter (higher) bar."""
    if is_cropped:
        return _float_env("VEGANCHECK_CROPPED_CONFIDENCE_THRESHOLD", 0.4)
    return _float_env("VEGANCHECK_UNCROPPED_CONFIDENCE_THRESHOLD", 0.6)


# --- Startup logging ---
def log_config() -> None:
    logger.info(
        "CONFIG: app_env=%s diagnostic=%s knowledge_base=%s reasoning_rules=%s "
        "fuzzy_threshold=%.2f uncropped_threshold=%.2f cropped_threshold=%.2f",
        get_app_env(), is_diagnostic_mode(),
        get_knowledge_base_path().exists(), get_reasoning_rules_path().exists(),
        get_fuzzy_threshold(),
        get_confidence_threshold(False), get_confidence_threshold(True),
    )
