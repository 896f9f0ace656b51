"""Формирование ответа об ошибке для граничного слоя"""
import logging
from typing import Any

from pydantic import BaseModel

from app.core.errors import AppError, ErrorKind, coerce_error


logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Стандартизированный ответ об ошибке"""

    status: int
    code: str
    message: str
    details: Any = None
    request_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Тело ответа в формате {"error": {...}}"""
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        if self.request_id:
            body["request_id"] = self.request_id
        return {"error": body}


def build_error_response(error: BaseException, request_id: str | None = None) -> ErrorResponse:
    """
    Преобразование исключения в ответ клиенту

    Ядро не пишет в ответ само - граничный слой вызывает эту функцию
    и отдаёт результат как есть.

    Args:
        error: Исключение из сервиса (таксономия или ошибка драйвера)
        request_id: Correlation ID запроса

    Returns:
        ErrorResponse с фиксированными статусом и кодом для категории
    """
    app_error: AppError = coerce_error(error)

    if app_error.kind is ErrorKind.DATABASE:
        # Текст ошибки хранилища - только в лог
        logger.error(
            "DATABASE ERROR | request_id=%s | %s | details=%s",
            request_id,
            app_error.message,
            app_error.details,
            exc_info=error,
        )
        details = None
    else:
        logger.warning(
            "%s | request_id=%s | %s | details=%s",
            app_error.code,
            request_id,
            app_error.message,
            app_error.details,
        )
        details = app_error.details

    return ErrorResponse(
        status=app_error.status_code,
        code=app_error.code,
        message=app_error.message,
        details=details,
        request_id=request_id,
    )
