from .term_schema import IngredientTerm, TermCategory
from .knowledge_base import KnowledgeBase, KnowledgeBaseError, get_knowledge_base

__all__ = [
    "IngredientTerm",
    "TermCategory",
    "KnowledgeBase",
    "KnowledgeBaseError",
    "get_knowledge_base",
]
