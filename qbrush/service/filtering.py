# -*- coding: utf-8 -*-
"""
QBrush/qbrush/service/filtering.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Фильтрация, сортировка и группировка списка вопросов в памяти.

Все функции модуля чистые: результат зависит только от аргументов,
поэтому их удобно тестировать без движка списка и без хранилища.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from qbrush.domain.enums import QuestionDifficulty, SortOption
from qbrush.domain.schemas import FilterCriteria, Question, QuestionSection
from qbrush.utils.text import matches_search, parse_tags

UNCATEGORIZED = "uncategorized"

# Самое раннее возможное время для отсутствующих дат
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)

QuestionPredicate = Callable[[Question], bool]


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Наивные даты считаются UTC, чтобы их можно было сравнивать."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def last_touched(question: Question) -> datetime:
    """Дата последнего изменения: updated_at, затем created_at, затем EARLIEST."""
    return (
        ensure_aware(question.updated_at)
        or ensure_aware(question.created_at)
        or EARLIEST
    )


# ---------------------------------------------------------------------------
# Предикаты фильтров
# ---------------------------------------------------------------------------


def type_predicate(selected_type: Optional[str]) -> QuestionPredicate:
    if not selected_type:
        return lambda q: True
    return lambda q: q.type == selected_type


def difficulty_predicate(selected_difficulty: Optional[str]) -> QuestionPredicate:
    if not selected_difficulty:
        return lambda q: True
    return lambda q: q.difficulty == selected_difficulty


def text_predicate(search_text: str) -> QuestionPredicate:
    if not (search_text or "").strip():
        return lambda q: True
    return lambda q: matches_search(q.content, search_text)


def tag_predicate(selected_tags: Iterable[str]) -> QuestionPredicate:
    wanted = frozenset(selected_tags)
    if not wanted:
        return lambda q: True
    return lambda q: not wanted.isdisjoint(parse_tags(q.tags))


def build_predicates(criteria: FilterCriteria) -> List[QuestionPredicate]:
    """Предикаты в порядке применения: тип, сложность, текст, теги."""
    return [
        type_predicate(criteria.selected_type),
        difficulty_predicate(criteria.selected_difficulty),
        text_predicate(criteria.search_text),
        tag_predicate(criteria.selected_tags),
    ]


# ---------------------------------------------------------------------------
# Сортировка
# ---------------------------------------------------------------------------


def sort_questions(
    questions: Iterable[Question], sort_option: SortOption
) -> List[Question]:
    """Стабильная сортировка по выбранному варианту."""
    items = list(questions)
    if sort_option == SortOption.UPDATED_DESC:
        items.sort(key=last_touched, reverse=True)
    elif sort_option == SortOption.CREATED_DESC:
        items.sort(
            key=lambda q: ensure_aware(q.created_at) or EARLIEST, reverse=True
        )
    elif sort_option == SortOption.TYPE_ASC:
        items.sort(key=lambda q: q.type or "")
    elif sort_option == SortOption.DIFFICULTY_ASC:
        items.sort(key=lambda q: QuestionDifficulty.rank(q.difficulty))
    return items


def apply_filters(
    questions: Sequence[Question], criteria: FilterCriteria
) -> List[Question]:
    """
    Применить все фильтры и сортировку.

    Args:
        questions: Полный список вопросов в порядке хранилища
        criteria: Параметры фильтрации и сортировки

    Returns:
        Видимые вопросы в порядке отображения
    """
    predicates = build_predicates(criteria)
    result = [q for q in questions if all(check(q) for check in predicates)]
    return sort_questions(result, criteria.sort_option)


# ---------------------------------------------------------------------------
# Группировка и теги
# ---------------------------------------------------------------------------


def _make_section(title: str, items: List[Question]) -> QuestionSection:
    latest = max((last_touched(q) for q in items), default=None)
    if latest == EARLIEST:
        latest = None
    return QuestionSection(
        title=title, items=items, count=len(items), latest_at=latest
    )


def group_sections(
    visible: Sequence[Question], selected_type: Optional[str]
) -> List[QuestionSection]:
    """
    Сгруппировать видимые вопросы по типу.

    При выбранном типе возвращается одна секция со всеми вопросами,
    иначе по секции на каждый тип в лексикографическом порядке.
    """
    if selected_type:
        return [_make_section(selected_type, list(visible))]

    groups: Dict[str, List[Question]] = {}
    for question in visible:
        groups.setdefault(question.type or UNCATEGORIZED, []).append(question)
    return [_make_section(key, groups[key]) for key in sorted(groups)]


def collect_tags(questions: Iterable[Question]) -> List[str]:
    """Все различные теги по списку вопросов в лексикографическом порядке."""
    tags = set()
    for question in questions:
        tags.update(parse_tags(question.tags))
    return sorted(tags)
