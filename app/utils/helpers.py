"""
Вспомогательные функции
"""

import logging
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal


logger = logging.getLogger(__name__)


MONEY_QUANT = Decimal("0.01")


def get_now() -> datetime:
    """
    Получить текущее время в UTC

    Returns:
        datetime объект с timezone
    """
    return datetime.now(UTC)


def ensure_aware(dt: datetime) -> datetime:
    """
    Привести datetime к aware-виду

    Наивные значения (например, прочитанные из SQLite) считаются UTC.

    Args:
        dt: Дата и время

    Returns:
        datetime с timezone
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def to_money(value: Decimal | float | int | str) -> Decimal:
    """
    Приведение суммы к Decimal с точностью до копеек

    Float сначала переводится в строку, чтобы 9.99 оставалось 9.99.

    Args:
        value: Сумма

    Returns:
        Decimal, округлённый до 0.01
    """
    if isinstance(value, float):
        value = repr(value)
    return Decimal(value).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal | float | None) -> str:
    """Форматирование суммы для логов и сообщений"""
    if value is None:
        return "0.00"
    return f"{to_money(value):.2f}"


def to_naive_utc(dt: datetime) -> datetime:
    """
    Приведение к наивному UTC для колонок DateTime без timezone

    Args:
        dt: Дата и время (aware или наивное UTC)

    Returns:
        Наивный datetime в UTC
    """
    return ensure_aware(dt).astimezone(UTC).replace(tzinfo=None)
