# -*- coding: utf-8 -*-
"""
QBrush/qbrush/repository/base.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Контракты доступа к данным банка вопросов.

QuestionRepository описывает низкоуровневые CRUD-операции хранилища,
QuestionStore описывает операции, которыми пользуется список вопросов.
Оба контракта асинхронные; любая операция может завершиться StorageError.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, runtime_checkable
from uuid import UUID

from qbrush.domain.schemas import Question, QuestionCreate, QuestionUpdate


@runtime_checkable
class QuestionRepository(Protocol):
    """Слой доступа к данным (DAO) для вопросов."""

    async def create(self, **fields: Any) -> Question: ...

    async def get(self, question_id: UUID) -> Optional[Question]: ...

    async def list(
        self,
        *,
        page: int = 1,
        page_size: int = 20,
        type: Optional[str] = None,
        difficulty: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> List[Question]: ...

    async def update(self, question_id: UUID, **fields: Any) -> Question: ...

    async def delete(self, question_id: UUID) -> None: ...

    async def delete_all(self) -> None: ...


@runtime_checkable
class QuestionStore(Protocol):
    """Хранилище вопросов с точки зрения списка вопросов."""

    async def list(
        self,
        *,
        page: int = 1,
        page_size: int = 20,
        type: Optional[str] = None,
        difficulty: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> List[Question]: ...

    async def create(self, payload: QuestionCreate) -> Question: ...

    async def update(self, question_id: UUID, payload: QuestionUpdate) -> Question: ...

    async def delete(self, question_id: UUID) -> None: ...
