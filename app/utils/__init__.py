"""Утилиты и вспомогательные функции"""
from app.utils.helpers import (
    ensure_aware,
    format_money,
    get_now,
    to_money,
    to_naive_utc,
)


__all__ = [
    # DateTime utilities
    "ensure_aware",
    "get_now",
    "to_naive_utc",
    # Money utilities
    "format_money",
    "to_money",
]
