"""
Конфигурация приложения (короткие импорты)

Используйте app.core для новых модулей.
"""

from app.core.config import (
    MAX_ADDRESS_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_PAYMENT_METHOD_LENGTH,
    Config,
)
from app.core.constants import OrderItemType, OrderStatus, UserRole


__all__ = [
    "MAX_ADDRESS_LENGTH",
    "MAX_NOTES_LENGTH",
    "MAX_PAYMENT_METHOD_LENGTH",
    "Config",
    "OrderItemType",
    "OrderStatus",
    "UserRole",
]
