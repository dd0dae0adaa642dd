"""
Модуль для разбора поискового запроса, тегов и подсветки совпадений
"""

import re
from typing import Iterable, List, Optional, Pattern, Set

from qbrush.domain.schemas import HighlightSpan

# Разделители токенов поиска: пробелы и знаки препинания
_TOKEN_SEPARATORS = re.compile(r"[\W_]+")


def tokenize_search(text: str) -> List[str]:
    """
    Разбивает поисковый запрос на токены:
    - Делит по пробелам и знакам препинания
    - Убирает пустые токены
    - Убирает повторы, сохраняя порядок
    """
    if not text:
        return []

    tokens: List[str] = []
    seen: Set[str] = set()
    for token in _TOKEN_SEPARATORS.split(text):
        key = token.casefold()
        if token and key not in seen:
            seen.add(key)
            tokens.append(token)
    return tokens


def build_search_pattern(tokens: Iterable[str]) -> Optional[Pattern[str]]:
    """
    Собирает одно регулярное выражение-альтернативу по всем токенам.

    Длинные токены идут первыми, чтобы «алгебра» побеждала «алг».
    """
    ordered = sorted({t for t in tokens if t}, key=len, reverse=True)
    if not ordered:
        return None
    return re.compile("|".join(re.escape(t) for t in ordered), re.IGNORECASE)


def matches_search(content: Optional[str], search_text: str) -> bool:
    """
    Проверяет, подходит ли текст вопроса под поисковый запрос.

    Пустой запрос пропускает всё. Вопрос подходит, если хотя бы один токен
    встречается в тексте без учёта регистра. Запрос только из знаков
    препинания сравнивается как подстрока целиком.
    """
    query = (search_text or "").strip()
    if not query:
        return True
    if not content:
        return False

    pattern = build_search_pattern(tokenize_search(query))
    if pattern is None:
        return query.casefold() in content.casefold()
    return pattern.search(content) is not None


def highlight(content: Optional[str], search_text: str) -> List[HighlightSpan]:
    """
    Делит текст на фрагменты с подсветкой совпадений.

    Фрагменты идут слева направо без пропусков и пересечений,
    их конкатенация в точности равна исходному тексту.
    """
    content = content or ""
    pattern = build_search_pattern(tokenize_search(search_text))
    if pattern is None or not content:
        return [HighlightSpan(text=content)] if content else []

    spans: List[HighlightSpan] = []
    cursor = 0
    for match in pattern.finditer(content):
        start, end = match.span()
        if start > cursor:
            spans.append(HighlightSpan(text=content[cursor:start]))
        spans.append(HighlightSpan(text=content[start:end], matched=True))
        cursor = end
    if cursor < len(content):
        spans.append(HighlightSpan(text=content[cursor:]))
    return spans


def parse_tags(tags: Optional[str]) -> List[str]:
    """
    Разбирает строку тегов через запятую.

    Пробелы по краям убираются, пустые теги отбрасываются.
    """
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]
