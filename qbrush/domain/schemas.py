# -*- coding: utf-8 -*-
"""
QBrush/qbrush/domain/schemas.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Pydantic-схемы банка вопросов и состояния списка вопросов.
"""

from datetime import datetime, timezone
from typing import FrozenSet, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from qbrush.domain.enums import ErrorKind, QuestionDifficulty, QuestionType, SortOption


def utc_now() -> datetime:
    """Текущее время в UTC с часовым поясом."""
    return datetime.now(timezone.utc)


class Question(BaseModel):
    """
    Вопрос банка.

    Тип и сложность хранятся как текст: хранилище может содержать
    устаревшие значения, перечисления проверяются только при записи.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Идентификатор вопроса")
    content: str = Field(..., description="Текст вопроса")
    type: Optional[str] = Field(default=None, description="Тип вопроса")
    difficulty: Optional[str] = Field(default=None, description="Сложность")
    options: Optional[str] = None
    correct_answer: Optional[str] = None
    analysis: Optional[str] = Field(default=None, description="Разбор решения")
    tags: Optional[str] = Field(
        default=None, description="Теги через запятую, например 'алгебра, 9 класс'"
    )
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QuestionCreate(BaseModel):
    """Схема создания вопроса."""

    content: str = Field(..., description="Текст вопроса")
    type: Optional[QuestionType] = Field(default=None, description="Тип вопроса")
    difficulty: Optional[QuestionDifficulty] = Field(
        default=None,
        description="Сложность; если не указана, берётся из настроек",
    )
    options: Optional[str] = None
    correct_answer: Optional[str] = None
    analysis: Optional[str] = None
    tags: Optional[str] = None
    created_by: Optional[str] = None


class QuestionUpdate(BaseModel):
    """Схема обновления вопроса; None означает «не изменять»."""

    content: Optional[str] = None
    type: Optional[QuestionType] = None
    difficulty: Optional[QuestionDifficulty] = None
    options: Optional[str] = None
    correct_answer: Optional[str] = None
    analysis: Optional[str] = None
    tags: Optional[str] = None


class FilterCriteria(BaseModel):
    """Входные параметры фильтрации и сортировки списка."""

    model_config = ConfigDict(frozen=True)

    search_text: str = ""
    selected_type: Optional[str] = None
    selected_difficulty: Optional[str] = None
    selected_tags: FrozenSet[str] = frozenset()
    sort_option: SortOption = SortOption.UPDATED_DESC


class QuestionSection(BaseModel):
    """Группа вопросов одного типа для сгруппированного отображения."""

    model_config = ConfigDict(frozen=True)

    title: str
    items: List[Question]
    count: int
    latest_at: Optional[datetime] = None


class HighlightSpan(BaseModel):
    """Фрагмент текста вопроса; matched=True для совпадений с поиском."""

    model_config = ConfigDict(frozen=True)

    text: str
    matched: bool = False


class EngineError(BaseModel):
    """Ошибка, показываемая списку; id уникален для каждого случая."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    kind: ErrorKind = ErrorKind.UNKNOWN
    message: str = ""

    @property
    def description(self) -> str:
        if self.kind == ErrorKind.DATABASE:
            return f"Database Error: {self.message}"
        if self.kind == ErrorKind.NETWORK:
            return f"Network Error: {self.message}"
        return "Unknown Error"


class EngineSnapshot(BaseModel):
    """Неизменяемый снимок состояния списка для подписчиков."""

    model_config = ConfigDict(frozen=True)

    revision: int
    visible_questions: List[Question]
    sections: List[QuestionSection]
    available_tags: List[str]
    criteria: FilterCriteria
    is_loading: bool
    is_multi_selection_mode: bool
    selected_ids: FrozenSet[UUID]
    last_error: Optional[EngineError] = None
    transient_notification: Optional[str] = None
