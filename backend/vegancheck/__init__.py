"""
vegancheck: local vegan classification of ingredient lists and reconciliation
with an external classifier's opinion.
"""
from vegancheck.evaluation.validator import LocalValidator, validate_ingredients, validate_ingredient
from vegancheck.reconciliation.engine import reconcile

__all__ = [
    "LocalValidator",
    "validate_ingredients",
    "validate_ingredient",
    "reconcile",
]
