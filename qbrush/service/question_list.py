# -*- coding: utf-8 -*-
"""
QBrush/qbrush/service/question_list.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Состояние экрана списка вопросов.

QuestionListEngine хранит полный список вопросов из последней загрузки,
пересчитывает видимый список при смене фильтров, отслеживает выбор
нескольких вопросов и выполняет оптимистичное удаление.

Всё состояние принадлежит одному циклу событий asyncio: интенты вызываются
из этого цикла, обращения к хранилищу ожидаются через await, и только их
результаты применяются к состоянию.
"""

from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Set
from uuid import UUID

from qbrush.config.logger import configure_logger
from qbrush.config.settings import settings
from qbrush.domain.enums import ErrorKind, SortOption
from qbrush.domain.schemas import (EngineError, EngineSnapshot, FilterCriteria,
                                   HighlightSpan, Question, QuestionSection)
from qbrush.repository.base import QuestionStore
from qbrush.service.filtering import (apply_filters, collect_tags,
                                      ensure_aware, group_sections)
from qbrush.utils.exceptions import StorageError
from qbrush.utils.text import highlight

logger = configure_logger("question_list")

Subscriber = Callable[[EngineSnapshot], None]


def _as_storage_error(error: Exception) -> StorageError:
    if isinstance(error, StorageError):
        return error
    wrapped = StorageError(str(error) or type(error).__name__)
    wrapped.__cause__ = error
    return wrapped


def _enum_value(value):
    return getattr(value, "value", value) or None


class QuestionListEngine:
    """Список вопросов с фильтрами, выбором и оптимистичным удалением."""

    def __init__(
        self,
        store: QuestionStore,
        *,
        debounce_seconds: Optional[float] = None,
        notification_ttl: Optional[float] = None,
        page_size: Optional[int] = None,
        concurrent_deletes: Optional[bool] = None,
        success_message: Optional[str] = None,
    ):
        self._store = store
        self._debounce_seconds = (
            settings.search_debounce_seconds
            if debounce_seconds is None
            else debounce_seconds
        )
        self._notification_ttl = (
            settings.notification_ttl_seconds
            if notification_ttl is None
            else notification_ttl
        )
        self._page_size = page_size or settings.page_size
        self._concurrent_deletes = (
            settings.concurrent_deletes
            if concurrent_deletes is None
            else concurrent_deletes
        )
        self._success_message = success_message or settings.delete_success_message

        self._all: List[Question] = []
        self._last_modified: Dict[UUID, Optional[datetime]] = {}
        self._visible: List[Question] = []
        self._criteria = FilterCriteria()
        self._revision = 0

        self._pending_search: Optional[str] = None
        self._debounce_task: Optional[asyncio.Task] = None

        self._reload_ticket = 0
        self._applied_ticket = 0
        self._loading = 0
        self._pending_deletes: Set[UUID] = set()
        # Номер завершённого удаления для каждого удалённого вопроса и
        # номера, с которыми стартовали загрузки, ещё ожидающие ответа
        self._delete_epoch = 0
        self._finished_deletes: Dict[UUID, int] = {}
        self._reload_epochs: List[int] = []

        self._multi_selection = False
        self._selected_ids: Set[UUID] = set()

        self._last_error: Optional[EngineError] = None
        self._notification: Optional[str] = None
        self._notification_task: Optional[asyncio.Task] = None

        self._subscribers: List[Subscriber] = []

    # ------------------------------------------------------------------
    # Наблюдаемое состояние
    # ------------------------------------------------------------------

    @property
    def all_questions(self) -> List[Question]:
        return list(self._all)

    @property
    def visible_questions(self) -> List[Question]:
        return list(self._visible)

    @property
    def sections(self) -> List[QuestionSection]:
        return group_sections(self._visible, self._criteria.selected_type)

    @property
    def available_tags(self) -> List[str]:
        """Теги по всем загруженным вопросам, независимо от фильтров."""
        return collect_tags(self._all)

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def search_text(self) -> str:
        """Последний введённый текст поиска, в том числе ещё не применённый."""
        if self._pending_search is not None:
            return self._pending_search
        return self._criteria.search_text

    @property
    def revision(self) -> int:
        """Счётчик пересчётов видимого списка."""
        return self._revision

    @property
    def is_loading(self) -> bool:
        return self._loading > 0

    @property
    def is_multi_selection_mode(self) -> bool:
        return self._multi_selection

    @property
    def selected_ids(self) -> Set[UUID]:
        return set(self._selected_ids)

    @property
    def last_error(self) -> Optional[EngineError]:
        return self._last_error

    @property
    def transient_notification(self) -> Optional[str]:
        return self._notification

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            revision=self._revision,
            visible_questions=list(self._visible),
            sections=self.sections,
            available_tags=self.available_tags,
            criteria=self._criteria,
            is_loading=self.is_loading,
            is_multi_selection_mode=self._multi_selection,
            selected_ids=frozenset(self._selected_ids),
            last_error=self._last_error,
            transient_notification=self._notification,
        )

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Подписаться на изменения состояния.

        Args:
            callback: Получает EngineSnapshot после каждого изменения

        Returns:
            Функция отписки
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        if not self._subscribers:
            return
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Ошибка в подписчике списка вопросов")

    def highlight(self, question: Question) -> List[HighlightSpan]:
        """Фрагменты текста вопроса с подсветкой текущего поиска."""
        return highlight(question.content, self._criteria.search_text)

    # ------------------------------------------------------------------
    # Пересчёт
    # ------------------------------------------------------------------

    def _recompute(self) -> None:
        self._visible = apply_filters(self._all, self._criteria)
        self._revision += 1
        logger.debug(
            f"Пересчёт списка: revision={self._revision}, "
            f"visible={len(self._visible)}, total={len(self._all)}"
        )
        self._notify()

    def _update_criteria(self, **changes) -> None:
        criteria = self._criteria.model_copy(update=changes)
        if criteria == self._criteria:
            return
        self._criteria = criteria
        self._recompute()

    # ------------------------------------------------------------------
    # Интенты фильтрации
    # ------------------------------------------------------------------

    def set_search_text(self, text: str) -> None:
        """
        Задать текст поиска с задержкой (debounce).

        Каждый вызов откладывает пересчёт; применяется только последнее
        значение после паузы. Без запущенного цикла событий текст
        применяется сразу.
        """
        self._pending_search = text or ""
        self._cancel_debounce()

        if self._debounce_seconds <= 0:
            self.flush_search()
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.flush_search()
            return
        self._debounce_task = loop.create_task(self._debounced_search())

    async def _debounced_search(self) -> None:
        await asyncio.sleep(self._debounce_seconds)
        self._debounce_task = None
        self.flush_search()

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None:
            self._debounce_task.cancel()
            self._debounce_task = None

    def flush_search(self) -> None:
        """Немедленно применить отложенный текст поиска."""
        self._cancel_debounce()
        if self._pending_search is None:
            return
        text, self._pending_search = self._pending_search, None
        logger.debug(f"Применение поиска: {text!r}")
        self._update_criteria(search_text=text)

    def set_type_filter(self, question_type) -> None:
        """Фильтр по типу; None означает «все типы»."""
        self._update_criteria(selected_type=_enum_value(question_type))

    def set_difficulty_filter(self, difficulty) -> None:
        """Фильтр по сложности; None означает «любая сложность»."""
        self._update_criteria(selected_difficulty=_enum_value(difficulty))

    def toggle_tag(self, tag: str) -> None:
        tags = set(self._criteria.selected_tags)
        if tag in tags:
            tags.remove(tag)
        else:
            tags.add(tag)
        self._update_criteria(selected_tags=frozenset(tags))

    def set_selected_tags(self, tags: Iterable[str]) -> None:
        self._update_criteria(selected_tags=frozenset(tags))

    def set_sort_option(self, sort_option: SortOption) -> None:
        self._update_criteria(sort_option=SortOption(sort_option))

    # ------------------------------------------------------------------
    # Загрузка
    # ------------------------------------------------------------------

    def _has_changes(self, questions: List[Question]) -> bool:
        if len(questions) != len(self._all):
            return True
        for question in questions:
            if question.id not in self._last_modified:
                return True
            previous = ensure_aware(self._last_modified[question.id])
            current = ensure_aware(question.updated_at)
            if current is None:
                continue
            if previous is None or current > previous:
                return True
        return False

    async def reload(self) -> bool:
        """
        Загрузить список из хранилища.

        Returns:
            True, если загруженные данные применены и список пересчитан

        Raises:
            StorageError: Если хранилище не вернуло список; состояние сохраняется
        """
        self._reload_ticket += 1
        ticket = self._reload_ticket
        epoch = self._delete_epoch
        self._reload_epochs.append(epoch)
        self._loading += 1
        self._notify()

        failure: Optional[StorageError] = None
        try:
            questions = await self._store.list(page=1, page_size=self._page_size)
        except Exception as e:
            failure = _as_storage_error(e)
        finally:
            self._loading -= 1
            hidden = self._deleted_since(epoch)
            self._reload_epochs.remove(epoch)
            self._prune_finished_deletes()

        if failure is not None:
            logger.error(f"Ошибка загрузки списка вопросов: {failure.detail}")
            # Ошибку вытесненной загрузки не показываем поверх новых данных
            if ticket == self._reload_ticket:
                self._record_error(ErrorKind.NETWORK, failure)
            else:
                self._notify()
            raise failure

        if ticket <= self._applied_ticket:
            logger.debug(f"Устаревший результат загрузки отброшен: ticket={ticket}")
            self._notify()
            return False
        self._applied_ticket = ticket

        # Ответ мог быть прочитан до завершения удаления
        questions = [q for q in questions if q.id not in hidden]

        if not self._has_changes(questions) and self._visible:
            logger.debug("Загрузка без изменений, пересчёт пропущен")
            self._notify()
            return False

        self._all = list(questions)
        self._last_modified = {q.id: q.updated_at for q in questions}
        logger.info(f"Загружено вопросов: {len(questions)}")
        self._recompute()
        return True

    async def refresh(self) -> bool:
        return await self.reload()

    # ------------------------------------------------------------------
    # Выбор
    # ------------------------------------------------------------------

    def enter_multi_selection(self) -> None:
        if self._multi_selection:
            return
        self._multi_selection = True
        self._notify()

    def exit_multi_selection(self) -> None:
        """Выйти из режима выбора; выбор всегда сбрасывается."""
        self._multi_selection = False
        self._selected_ids.clear()
        self._notify()

    def toggle_selection(self, question_id: UUID) -> bool:
        """
        Переключить выбор вопроса.

        Вне режима выбора вызов игнорируется.

        Returns:
            Выбран ли вопрос после вызова
        """
        if not self._multi_selection:
            logger.debug(f"Выбор вне режима выбора проигнорирован: {question_id}")
            return False
        if question_id in self._selected_ids:
            self._selected_ids.remove(question_id)
        else:
            self._selected_ids.add(question_id)
        self._notify()
        return question_id in self._selected_ids

    def is_selected(self, question_id: UUID) -> bool:
        return question_id in self._selected_ids

    # ------------------------------------------------------------------
    # Удаление
    # ------------------------------------------------------------------

    def _remove_locally(self, ids: Set[UUID]) -> None:
        self._all = [q for q in self._all if q.id not in ids]
        self._selected_ids -= ids

    async def delete_one(self, question_id: UUID) -> None:
        """
        Удалить один вопрос оптимистично.

        Вопрос сразу убирается из списка; при ошибке хранилища ошибка
        записывается в last_error, список перезагружается и ошибка
        пробрасывается вызывающему.
        """
        logger.info(f"Удаление вопроса {question_id}")
        self._remove_locally({question_id})
        self._recompute()
        await self._delete_ids([question_id])

    async def delete_selected(self) -> None:
        """Удалить все выбранные вопросы и выйти из режима выбора."""
        ids = set(self._selected_ids)
        if not ids:
            return

        ordered = [q.id for q in self._all if q.id in ids]
        ordered += [i for i in ids if i not in ordered]
        logger.info(f"Пакетное удаление вопросов: {len(ordered)}")

        self._remove_locally(ids)
        self._multi_selection = False
        self._selected_ids.clear()
        self._recompute()
        await self._delete_ids(ordered)

    async def _delete_ids(self, ids: List[UUID]) -> None:
        self._pending_deletes.update(ids)
        failure: Optional[StorageError] = None
        try:
            if self._concurrent_deletes:
                results = await asyncio.gather(
                    *(self._store.delete(i) for i in ids), return_exceptions=True
                )
                failures = [r for r in results if isinstance(r, Exception)]
                if failures:
                    raise failures[0]
            else:
                for question_id in ids:
                    await self._store.delete(question_id)
        except Exception as e:
            failure = _as_storage_error(e)
        else:
            self._mark_deleted(ids)
        finally:
            self._pending_deletes.difference_update(ids)

        if failure is not None:
            self._record_error(ErrorKind.DATABASE, failure)
            logger.error(f"Ошибка удаления вопросов: {failure.detail}")
            await self._reconcile()
            raise failure

        logger.info(f"Удалено вопросов: {len(ids)}")
        self._show_notification(self._success_message)

    def _mark_deleted(self, ids: Iterable[UUID]) -> None:
        """Запомнить удалённые вопросы для загрузок, начатых раньше."""
        self._delete_epoch += 1
        if not self._reload_epochs:
            return
        for question_id in ids:
            self._finished_deletes[question_id] = self._delete_epoch

    def _deleted_since(self, epoch: int) -> Set[UUID]:
        hidden = set(self._pending_deletes)
        hidden.update(
            question_id
            for question_id, finished in self._finished_deletes.items()
            if finished > epoch
        )
        return hidden

    def _prune_finished_deletes(self) -> None:
        oldest = min(self._reload_epochs, default=self._delete_epoch)
        self._finished_deletes = {
            question_id: finished
            for question_id, finished in self._finished_deletes.items()
            if finished > oldest
        }

    async def _reconcile(self) -> None:
        """Перезагрузить список после неудачной оптимистичной операции."""
        try:
            await self.reload()
        except StorageError as e:
            logger.warning(f"Не удалось синхронизировать список: {e.detail}")

    # ------------------------------------------------------------------
    # Ошибки и уведомления
    # ------------------------------------------------------------------

    def _record_error(self, kind: ErrorKind, error: StorageError) -> None:
        self._last_error = EngineError(kind=kind, message=error.detail)
        self._notify()

    def clear_error(self) -> None:
        if self._last_error is None:
            return
        self._last_error = None
        self._notify()

    def _show_notification(self, message: str) -> None:
        if self._notification_task is not None:
            self._notification_task.cancel()
        self._notification = message
        self._notify()
        self._notification_task = asyncio.get_running_loop().create_task(
            self._expire_notification()
        )

    async def _expire_notification(self) -> None:
        await asyncio.sleep(self._notification_ttl)
        self._notification_task = None
        self._notification = None
        self._notify()

    async def aclose(self) -> None:
        """Отменить отложенный поиск и таймер уведомления."""
        tasks = [t for t in (self._debounce_task, self._notification_task) if t]
        self._debounce_task = None
        self._notification_task = None
        for task in tasks:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
