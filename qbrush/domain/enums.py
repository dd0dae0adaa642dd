# -*- coding: utf-8 -*-
"""
QBrush/qbrush/domain/enums.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Определение классов перечислений для домена QBrush.

Этот модуль содержит перечисления, используемые в приложении: типы и
сложность вопросов, варианты сортировки списка и виды ошибок списка.
"""

import enum
from typing import Optional


class QuestionType(str, enum.Enum):
    """Поддерживаемые типы вопросов."""

    SINGLE_CHOICE = "choice"
    FILL_BLANK = "fill_blank"
    JUDGMENT = "judgment"
    FREE_ANSWER = "answer"


class QuestionDifficulty(str, enum.Enum):
    """Уровни сложности; порядок объявления задаёт порядок сортировки."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def star_count(self) -> int:
        """Количество звёзд для отображения сложности."""
        return _STAR_COUNTS[self]

    @classmethod
    def rank(cls, value: Optional[str]) -> int:
        """
        Позиция сложности в порядке easy < medium < hard.

        Отсутствующие и неизвестные значения получают позицию
        после всех известных уровней.
        """
        order = [member.value for member in cls]
        if value in order:
            return order.index(value)
        return len(order)


_STAR_COUNTS = {
    QuestionDifficulty.EASY: 1,
    QuestionDifficulty.MEDIUM: 2,
    QuestionDifficulty.HARD: 3,
}


class SortOption(str, enum.Enum):
    """Варианты сортировки списка вопросов."""

    UPDATED_DESC = "updated_desc"
    CREATED_DESC = "created_desc"
    TYPE_ASC = "type_asc"
    DIFFICULTY_ASC = "difficulty_asc"


class ErrorKind(str, enum.Enum):
    """Категории ошибок, показываемых списком вопросов."""

    DATABASE = "database"  # Сбой записи (удаление)
    NETWORK = "network"  # Сбой загрузки списка
    UNKNOWN = "unknown"
