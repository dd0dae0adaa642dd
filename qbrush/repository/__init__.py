# -*- coding: utf-8 -*-
"""
QBrush/qbrush/repository/__init__.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Репозиторий операций для банка вопросов.
"""

from .base import QuestionRepository, QuestionStore
from .memory import InMemoryQuestionRepository

__all__ = [
    "QuestionRepository",
    "QuestionStore",
    "InMemoryQuestionRepository",
]
