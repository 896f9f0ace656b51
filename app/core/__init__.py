"""Ядро приложения - конфигурация, константы, ошибки"""

from app.core.config import Config
from app.core.constants import OrderItemType, OrderStatus, UserRole


__all__ = [
    "Config",
    "OrderItemType",
    "OrderStatus",
    "UserRole",
]
