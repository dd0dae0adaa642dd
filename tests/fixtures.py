# -*- coding: utf-8 -*-
"""
Фикстуры для тестирования банка вопросов
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from qbrush.domain.schemas import Question
from qbrush.service.questions import QuestionService

BASE_TIME = datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc)

# Короткие интервалы, чтобы тесты с таймерами не тормозили
TEST_DEBOUNCE_SECONDS = 0.05
TEST_NOTIFICATION_TTL = 0.05


class TickingClock:
    """Часы, которые сдвигаются на секунду при каждом обращении."""

    def __init__(self, start: datetime = BASE_TIME):
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


def at(minutes: int) -> datetime:
    """Момент времени через указанное число минут после BASE_TIME"""
    return BASE_TIME + timedelta(minutes=minutes)


def make_question(
    content: str = "Test question",
    type: Optional[str] = None,
    difficulty: Optional[str] = None,
    tags: Optional[str] = None,
    created_at: Optional[datetime] = None,
    updated_at: Optional[datetime] = None,
) -> Question:
    """Создать вопрос в памяти, минуя хранилище"""
    return Question(
        content=content,
        type=type,
        difficulty=difficulty,
        tags=tags,
        created_at=created_at,
        updated_at=updated_at,
    )


async def create_test_questions(
    service: QuestionService,
    count: int = 3,
    type: str = "choice",
    difficulty: str = "easy",
    prefix: str = "Test question",
) -> List[Question]:
    """Создать тестовые вопросы через сервис"""
    questions = []
    for i in range(count):
        question = await service.create(
            {
                "content": f"{prefix} {i + 1}",
                "type": type,
                "difficulty": difficulty,
            }
        )
        questions.append(question)
    return questions
