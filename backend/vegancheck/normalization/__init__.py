from .normalizer import normalize_term, clean_ingredient, split_parenthesised
from .parser import split_ingredient_text

__all__ = ["normalize_term", "clean_ingredient", "split_parenthesised", "split_ingredient_text"]
