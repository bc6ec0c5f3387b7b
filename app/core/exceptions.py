"""
Доменные исключения.

Сервисы и движок сессии бросают их, роутеры переводят в HTTP-ответы:
NotFoundError → 404, ForbiddenError → 403.
"""


class AppError(Exception):
    """Базовое исключение приложения."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    """Сущность с указанным id не существует (или не видна в текущем контексте)."""


class ForbiddenError(AppError):
    """Сущность существует, но доступ к ней запрещён."""


class InvalidStateError(AppError):
    """Операция нарушает контракт машины состояний сессии."""
