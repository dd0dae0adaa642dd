# -*- coding: utf-8 -*-
"""
Unit тесты репозитория вопросов в памяти
"""

from uuid import uuid4

import pytest

from qbrush.utils.exceptions import NotFoundError


async def _seed(repository):
    """10 вопросов выбора, 10 заполнения пропусков, 10 суждений"""
    for i in range(1, 11):
        await repository.create(
            content=f"Выбор {i} - ключевое слово A", type="choice", difficulty="easy"
        )
    for i in range(1, 11):
        await repository.create(
            content=f"Пропуск {i} - ключевое слово B", type="fill_blank", difficulty="medium"
        )
    for i in range(1, 11):
        await repository.create(
            content=f"Суждение {i} - ключевое слово A", type="judgment", difficulty="hard"
        )


class TestInMemoryQuestionRepository:
    """Тесты CRUD репозитория"""

    @pytest.mark.asyncio
    async def test_crud_workflow(self, repository):
        created = await repository.create(content="Тестовый вопрос", type="choice")
        assert created.id is not None

        fetched = await repository.get(created.id)
        assert fetched == created

        updated = await repository.update(created.id, content="Обновлённый вопрос")
        assert updated.content == "Обновлённый вопрос"
        assert (await repository.get(created.id)).content == "Обновлённый вопрос"

        await repository.delete(created.id)
        assert await repository.get(created.id) is None
        assert len(repository) == 0

    @pytest.mark.asyncio
    async def test_pagination(self, repository):
        await _seed(repository)

        assert len(await repository.list(page=1, page_size=20)) == 20
        assert len(await repository.list(page=2, page_size=20)) == 10
        assert await repository.list(page=3, page_size=20) == []

    @pytest.mark.asyncio
    async def test_newest_first(self, repository):
        first = await repository.create(content="Первый")
        second = await repository.create(content="Второй")

        result = await repository.list()

        assert [q.id for q in result] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_filters(self, repository):
        await _seed(repository)

        choice = await repository.list(page_size=100, type="choice")
        hard = await repository.list(page_size=100, difficulty="hard")
        keyword = await repository.list(page_size=100, keyword="КЛЮЧЕВОЕ слово a")
        combined = await repository.list(
            page_size=100, type="choice", keyword="ключевое слово A"
        )

        assert len(choice) == 10
        assert all(q.type == "choice" for q in choice)
        assert len(hard) == 10
        assert len(keyword) == 20
        assert len(combined) == 10

    @pytest.mark.asyncio
    async def test_invalid_page(self, repository):
        with pytest.raises(ValueError):
            await repository.list(page=0)

    @pytest.mark.asyncio
    async def test_unknown_fields_rejected(self, repository):
        with pytest.raises(TypeError):
            await repository.create(content="Вопрос", qtype="choice")

    @pytest.mark.asyncio
    async def test_update_and_delete_unknown_id(self, repository):
        with pytest.raises(NotFoundError):
            await repository.update(uuid4(), content="Текст")
        with pytest.raises(NotFoundError):
            await repository.delete(uuid4())

    @pytest.mark.asyncio
    async def test_delete_all(self, repository):
        await _seed(repository)

        await repository.delete_all()

        assert len(repository) == 0
