# -*- coding: utf-8 -*-
"""
Этот модуль определяет пользовательские исключения для банка вопросов QBrush.
Исключения разделены на ошибки валидации (до обращения к хранилищу)
и ошибки хранилища (сбой операции чтения или записи).
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Перечисление для уникальных кодов ошибок."""

    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"


class QBrushException(Exception):
    """Базовый класс для пользовательских исключений QBrush."""

    def __init__(self, detail: str, error_code: str):
        """
        Инициализирует QBrushException с сообщением и кодом ошибки.

        Args:
            detail (str): Сообщение об ошибке.
            error_code (str): Уникальный код ошибки.
        """
        super().__init__(detail)
        self.detail = detail
        self.error_code = error_code

    def __str__(self) -> str:
        return self.detail


class ValidationError(QBrushException):
    """Вызывается, когда входные данные недействительны."""

    def __init__(self, detail: str):
        super().__init__(detail=detail, error_code=ErrorCode.VALIDATION_ERROR)


class StorageError(QBrushException):
    """Вызывается при сбое хранилища; оборачивает исходную ошибку."""

    def __init__(self, detail: str, error_code: str = ErrorCode.STORAGE_ERROR):
        super().__init__(detail=f"Ошибка хранилища: {detail}", error_code=error_code)
        self.reason = detail


class NotFoundError(StorageError):
    """Вызывается, когда ресурс не найден."""

    def __init__(
        self,
        resource_type: str,
        resource_id: object = None,
        details: str | None = None,
    ):
        """
        Инициализирует NotFoundError.

        Args:
            resource_type (str): Тип ресурса (например, "Question").
            resource_id (optional): ID ресурса.
            details (str, optional): Дополнительные детали об ошибке.
        """
        detail = f"{resource_type} не найден"
        if resource_id:
            detail = f"{resource_type} с ID {resource_id} не найден"
        if details:
            detail = f"{detail}: {details}"
        super().__init__(detail=detail, error_code=ErrorCode.NOT_FOUND)
        self.resource_type = resource_type
        self.resource_id = resource_id
