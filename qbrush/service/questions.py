# -*- coding: utf-8 -*-
"""
QBrush/qbrush/service/questions.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Сервисный слой для работы с вопросами.

Сервис проверяет входные данные, подставляет значения по умолчанию и
переупаковывает сбои репозитория в StorageError. Именно он выступает
хранилищем (QuestionStore) для списка вопросов.
"""

from typing import Any, List, Mapping, Optional, Union
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from qbrush.config.logger import configure_logger
from qbrush.config.settings import settings
from qbrush.domain.enums import QuestionDifficulty, QuestionType
from qbrush.domain.schemas import Question, QuestionCreate, QuestionUpdate
from qbrush.repository.base import QuestionRepository
from qbrush.utils.exceptions import StorageError, ValidationError

logger = configure_logger("service")

CreatePayload = Union[QuestionCreate, Mapping[str, Any]]
UpdatePayload = Union[QuestionUpdate, Mapping[str, Any]]


def _parse(schema, payload):
    """Привести словарь к схеме; ошибки pydantic становятся ValidationError."""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(dict(payload))
    except PydanticValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) for err in e.errors()
        )
        if any(err["loc"][:1] == ("type",) for err in e.errors()):
            raise ValidationError("Недопустимый тип вопроса") from e
        raise ValidationError(f"Некорректные данные вопроса: {fields}") from e


def _enum_value(value):
    return value.value if isinstance(value, (QuestionType, QuestionDifficulty)) else value


class QuestionService:
    """Сервис для работы с вопросами."""

    def __init__(self, repository: QuestionRepository):
        self._repository = repository

    async def create(self, payload: CreatePayload) -> Question:
        """Создать новый вопрос."""
        data = _parse(QuestionCreate, payload)
        # Пустота проверяется по тексту без пробелов, сохраняется исходный текст
        if not data.content.strip():
            logger.warning("Отклонено создание вопроса: пустой текст")
            raise ValidationError("Текст вопроса не может быть пустым")

        if data.difficulty is not None:
            difficulty = data.difficulty.value
        else:
            try:
                difficulty = QuestionDifficulty(settings.default_difficulty).value
            except ValueError:
                raise ValidationError(
                    f"Недопустимая сложность по умолчанию: {settings.default_difficulty}"
                ) from None

        logger.info(f"Создание нового вопроса: type={_enum_value(data.type)}")
        try:
            question = await self._repository.create(
                content=data.content,
                type=_enum_value(data.type),
                difficulty=difficulty,
                options=data.options,
                correct_answer=data.correct_answer,
                analysis=data.analysis,
                tags=data.tags,
                created_by=data.created_by or settings.default_created_by,
            )
        except StorageError:
            raise
        except Exception as e:
            logger.error(f"Ошибка создания вопроса: {type(e).__name__}: {e}")
            raise StorageError(str(e)) from e

        logger.info(f"Создан вопрос с ID {question.id}")
        return question

    async def get(self, question_id: UUID) -> Optional[Question]:
        """Получить вопрос по ID."""
        logger.debug(f"Получение вопроса с ID: {question_id}")
        try:
            return await self._repository.get(question_id)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(str(e)) from e

    async def list(
        self,
        *,
        page: int = 1,
        page_size: int = 20,
        type: Optional[str] = None,
        difficulty: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> List[Question]:
        """Получить страницу вопросов."""
        logger.debug(
            f"Получение списка вопросов: page={page}, page_size={page_size}, "
            f"type={type}, difficulty={difficulty}, keyword={keyword!r}"
        )
        try:
            return await self._repository.list(
                page=page,
                page_size=page_size,
                type=type,
                difficulty=difficulty,
                keyword=keyword,
            )
        except StorageError:
            raise
        except Exception as e:
            logger.error(f"Ошибка получения списка вопросов: {e}")
            raise StorageError(str(e)) from e

    async def update(self, question_id: UUID, payload: UpdatePayload) -> Question:
        """Обновить вопрос."""
        data = _parse(QuestionUpdate, payload)
        changes = data.model_dump(exclude_none=True)
        if "content" in changes:
            if not changes["content"].strip():
                logger.warning(f"Отклонено обновление вопроса {question_id}: пустой текст")
                raise ValidationError("Текст вопроса не может быть пустым")
        changes = {key: _enum_value(value) for key, value in changes.items()}

        logger.info(f"Обновление вопроса {question_id}")
        try:
            return await self._repository.update(question_id, **changes)
        except StorageError:
            raise
        except Exception as e:
            logger.error(f"Ошибка обновления вопроса {question_id}: {e}")
            raise StorageError(str(e)) from e

    async def delete(self, question_id: UUID) -> None:
        """Удалить вопрос."""
        logger.info(f"Удаление вопроса {question_id}")
        try:
            await self._repository.delete(question_id)
        except StorageError:
            logger.error(f"Вопрос с ID {question_id} не удалён")
            raise
        except Exception as e:
            logger.error(f"Ошибка удаления вопроса {question_id}: {e}")
            raise StorageError(str(e)) from e

    async def delete_all(self) -> None:
        """Удалить все вопросы."""
        logger.warning("Удаление всех вопросов")
        try:
            await self._repository.delete_all()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(str(e)) from e
