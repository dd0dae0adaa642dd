# -*- coding: utf-8 -*-
"""
QBrush/qbrush/config/settings.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Конфигурация настроек приложения с использованием Pydantic.

Этот модуль загружает конфигурацию из .env файла и переменных окружения
с префиксом QBRUSH_, предоставляя централизованную систему управления
настройками для банка вопросов.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Корень проекта (QBrush/)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

ENV_PATH = (BASE_DIR / ".env").resolve()


class Settings(BaseSettings):
    """Настройки приложения, загружаемые из .env файла."""

    # .env используется только если файл существует,
    # переменные окружения всегда имеют приоритет
    _env_file = ENV_PATH if ENV_PATH.exists() else None

    model_config = SettingsConfigDict(
        env_prefix="QBRUSH_",
        env_file=_env_file,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Конфигурация логирования
    log_level: str = "INFO"
    debug: bool = False

    # Конфигурация списка вопросов
    search_debounce_ms: int = Field(default=300, ge=0)
    notification_ttl_seconds: float = Field(default=2.0, ge=0)
    page_size: int = Field(default=20, gt=0)
    concurrent_deletes: bool = False

    # Значения по умолчанию для новых вопросов
    default_difficulty: str = "medium"
    default_created_by: str = "admin"

    # Тексты уведомлений
    delete_success_message: str = "Вопрос удалён"

    @property
    def search_debounce_seconds(self) -> float:
        """Интервал debounce поиска в секундах."""
        return self.search_debounce_ms / 1000


settings = Settings()
