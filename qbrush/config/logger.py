# -*- coding: utf-8 -*-
"""
Настройка логирования для QBrush с использованием loguru.
"""
import logging
import sys

from loguru import logger

from qbrush.config.settings import settings

# Удаляем стандартный хендлер loguru
logger.remove()


class InterceptHandler(logging.Handler):
    """Перехватывает стандартные логи и перенаправляет их в loguru."""

    def emit(self, record):
        # Пропускаем отладочный шум asyncio (медленные колбэки и т.п.)
        if record.name.startswith("asyncio") and record.levelno < logging.WARNING:
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = sys._getframe(6), 6
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


# Перехватываем все стандартные логи
logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

log_level = settings.log_level.upper()
debug_mode = settings.debug

console_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

logger.add(
    sys.stdout,
    format=console_format,
    level="DEBUG" if debug_mode else log_level,
    colorize=True,
    backtrace=False,
    diagnose=False,
    filter=lambda record: record["level"].name != "TRACE" or debug_mode,
)


def configure_logger(name: str = "qbrush"):
    """
    Возвращает настроенный логгер, привязанный к компоненту.

    Args:
        name: Имя компонента, попадает в extra["component"]

    Returns:
        loguru.Logger: Настроенный логгер
    """
    return logger.bind(component=name)
