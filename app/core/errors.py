"""
Типизированные ошибки приложения

Закрытый набор категорий ошибок. Любая ошибка внутри единицы работы
откатывает транзакцию; категория влияет только на формирование ответа.
"""

import enum
from typing import Any

from sqlalchemy.exc import NoResultFound


class ErrorKind(str, enum.Enum):
    """Категории ошибок"""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    DATABASE = "database"


class AppError(Exception):
    """Базовое исключение приложения"""

    kind: ErrorKind = ErrorKind.DATABASE
    code: str = "DATABASE_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)

    @property
    def is_client_error(self) -> bool:
        return self.status_code < 500


class ValidationError(AppError):
    """
    Нарушение бизнес-правил или некорректные входные данные

    details содержит список всех найденных нарушений, а не только первое.
    """

    kind = ErrorKind.VALIDATION
    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(AppError):
    """Запрошенный ресурс не существует"""

    kind = ErrorKind.NOT_FOUND
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None):
        self.resource = resource
        self.resource_id = resource_id
        details = {"resource": resource, "id": resource_id} if resource_id is not None else None
        super().__init__(f"{resource} not found", details)


class UnauthorizedError(AppError):
    """Операция требует аутентифицированного пользователя"""

    kind = ErrorKind.UNAUTHORIZED
    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(AppError):
    """
    Недостаточно прав

    Сообщение намеренно не различает "не существует" и "принадлежит другому".
    """

    kind = ErrorKind.FORBIDDEN
    code = "FORBIDDEN"
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class ConflictError(AppError):
    """
    Конфликт состояния или связей между сущностями

    Например, запись была изменена другой транзакцией между чтением
    и попыткой обновления (optimistic locking).
    """

    kind = ErrorKind.CONFLICT
    code = "CONFLICT"
    status_code = 409


class DatabaseError(AppError):
    """
    Ошибка хранилища (не удалось применить или отменить изменения)

    Исходный текст ошибки драйвера хранится в details и cause,
    но не попадает в ответ клиенту.
    """

    kind = ErrorKind.DATABASE
    code = "DATABASE_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Any = None, cause: BaseException | None = None):
        super().__init__(message, details)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


def coerce_error(error: BaseException) -> AppError:
    """
    Приведение произвольной ошибки к таксономии

    Args:
        error: Исключение из бизнес-логики или драйвера БД

    Returns:
        AppError; неизвестные ошибки становятся DatabaseError с исходным текстом
    """
    if isinstance(error, AppError):
        return error
    if isinstance(error, NoResultFound):
        return NotFoundError("Resource")
    return DatabaseError("Database operation failed", details=str(error), cause=error)
