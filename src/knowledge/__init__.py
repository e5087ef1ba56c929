"""
Модуль базы знаний виджета.
"""

from .base import KnowledgeBase, KnowledgeEntry
from .data import DEFAULT_FUNCTION_WORDS, build_default_knowledge
from .matcher import KnowledgeMatcher, MatchResult
from .normalizer import InvalidQuery, TextNormalizer, ValidQuery

__all__ = [
    "KnowledgeBase",
    "KnowledgeEntry",
    "KnowledgeMatcher",
    "MatchResult",
    "TextNormalizer",
    "ValidQuery",
    "InvalidQuery",
    "DEFAULT_FUNCTION_WORDS",
    "build_default_knowledge",
]
