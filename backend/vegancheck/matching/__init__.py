from .fuzzy import fuzzy_match, best_match, similarity

__all__ = ["fuzzy_match", "best_match", "similarity"]
