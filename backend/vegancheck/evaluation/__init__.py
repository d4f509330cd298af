from .confidence import compute_confidence
from .validator import LocalValidator, validate_ingredients, validate_ingredient

__all__ = ["compute_confidence", "LocalValidator", "validate_ingredients", "validate_ingredient"]
