# -*- coding: utf-8 -*-
"""
Общие фикстуры для тестирования
"""

from types import SimpleNamespace

import pytest

from qbrush.repository.memory import InMemoryQuestionRepository
from qbrush.service.question_list import QuestionListEngine
from qbrush.service.questions import QuestionService
from tests.fixtures import (TEST_DEBOUNCE_SECONDS, TEST_NOTIFICATION_TTL,
                            TickingClock)


@pytest.fixture
def clock():
    """Детерминированные часы репозитория."""
    return TickingClock()


@pytest.fixture
def repository(clock):
    """Пустой репозиторий в памяти."""
    return InMemoryQuestionRepository(clock=clock)


@pytest.fixture
def service(repository):
    """Сервис вопросов поверх репозитория в памяти."""
    return QuestionService(repository)


@pytest.fixture
async def seeded(service):
    """Три вопроса: A (choice), B (fill_blank), C (judgment)."""
    a = await service.create(
        {"content": "Apple: choose the fruit", "type": "choice",
         "difficulty": "hard", "tags": "fruit, food"}
    )
    b = await service.create(
        {"content": "Banana is ____", "type": "fill_blank",
         "difficulty": "easy", "tags": "fruit"}
    )
    c = await service.create(
        {"content": "Carrots are vegetables", "type": "judgment",
         "difficulty": "medium", "tags": "vegetable,food"}
    )
    return SimpleNamespace(a=a, b=b, c=c)


@pytest.fixture
async def engine(service):
    """Список вопросов поверх сервиса."""
    engine = QuestionListEngine(
        service,
        debounce_seconds=TEST_DEBOUNCE_SECONDS,
        notification_ttl=TEST_NOTIFICATION_TTL,
    )
    yield engine
    await engine.aclose()
