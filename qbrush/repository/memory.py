# -*- coding: utf-8 -*-
"""
QBrush/qbrush/repository/memory.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Репозиторий вопросов в памяти процесса.

Данные не сохраняются между запусками. Репозиторий повторяет поведение
основного хранилища: сортировка по дате создания (новые первыми),
постраничная выдача и фильтры по типу, сложности и ключевому слову.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID, uuid4

from qbrush.config.logger import configure_logger
from qbrush.domain.schemas import Question, utc_now
from qbrush.utils.exceptions import NotFoundError

logger = configure_logger("repository")

_WRITABLE_FIELDS = {
    "content",
    "type",
    "difficulty",
    "options",
    "correct_answer",
    "analysis",
    "tags",
    "created_by",
}


class InMemoryQuestionRepository:
    """CRUD операции над вопросами, хранящимися в словаре."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._items: Dict[UUID, Question] = {}
        self._clock = clock

    def __len__(self) -> int:
        return len(self._items)

    # ---------------------------------------------------------------------
    # Create
    # ---------------------------------------------------------------------

    async def create(self, **fields: Any) -> Question:
        """Создать вопрос; id и даты назначаются репозиторием."""
        unknown = set(fields) - _WRITABLE_FIELDS
        if unknown:
            raise TypeError(f"Неизвестные поля вопроса: {sorted(unknown)}")

        now = self._clock()
        question = Question(id=uuid4(), created_at=now, updated_at=now, **fields)
        self._items[question.id] = question
        logger.debug(f"Создан вопрос: id={question.id}")
        return question

    # ---------------------------------------------------------------------
    # Read
    # ---------------------------------------------------------------------

    async def get(self, question_id: UUID) -> Optional[Question]:
        """Получить вопрос по ID или None."""
        return self._items.get(question_id)

    async def list(
        self,
        *,
        page: int = 1,
        page_size: int = 20,
        type: Optional[str] = None,
        difficulty: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> List[Question]:
        """Получить страницу вопросов, новые первыми."""
        if page < 1 or page_size < 1:
            raise ValueError("page и page_size должны быть положительными")

        items = list(self._items.values())
        if type:
            items = [q for q in items if q.type == type]
        if difficulty:
            items = [q for q in items if q.difficulty == difficulty]
        if keyword:
            needle = keyword.casefold()
            items = [q for q in items if needle in q.content.casefold()]

        items.sort(key=lambda q: q.created_at, reverse=True)
        offset = (page - 1) * page_size
        result = items[offset : offset + page_size]
        logger.debug(
            f"Получено {len(result)} вопросов: page={page}, page_size={page_size}"
        )
        return result

    # ---------------------------------------------------------------------
    # Update
    # ---------------------------------------------------------------------

    async def update(self, question_id: UUID, **fields: Any) -> Question:
        """Обновить переданные поля вопроса; updated_at обновляется всегда."""
        current = self._items.get(question_id)
        if current is None:
            raise NotFoundError(resource_type="Question", resource_id=question_id)

        changes = {k: v for k, v in fields.items() if k in _WRITABLE_FIELDS}
        changes["updated_at"] = self._clock()
        updated = current.model_copy(update=changes)
        self._items[question_id] = updated
        logger.debug(f"Обновлён вопрос: id={question_id}")
        return updated

    # ---------------------------------------------------------------------
    # Delete
    # ---------------------------------------------------------------------

    async def delete(self, question_id: UUID) -> None:
        """Удалить вопрос."""
        if self._items.pop(question_id, None) is None:
            raise NotFoundError(resource_type="Question", resource_id=question_id)
        logger.debug(f"Удалён вопрос: id={question_id}")

    async def delete_all(self) -> None:
        """Удалить все вопросы."""
        count = len(self._items)
        self._items.clear()
        logger.info(f"Удалены все вопросы: {count}")
