"""
Тесты для вспомогательных функций
"""
from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.utils.helpers import ensure_aware, format_money, to_money, to_naive_utc


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (9.99, Decimal("9.99")),
        ("14.99", Decimal("14.99")),
        (3, Decimal("3.00")),
        (Decimal("2.005"), Decimal("2.01")),
        (0.1 + 0.2, Decimal("0.30")),
    ],
)
def test_to_money(value, expected):
    """Тест округления сумм до копеек"""
    assert to_money(value) == expected


def test_format_money():
    assert format_money(Decimal("34.97")) == "34.97"
    assert format_money(12.5) == "12.50"
    assert format_money(None) == "0.00"


def test_ensure_aware():
    naive = datetime(2030, 1, 1, 12, 0)
    assert ensure_aware(naive).tzinfo is UTC

    aware = datetime(2030, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=3)))
    assert ensure_aware(aware) is aware


def test_to_naive_utc():
    """Тест приведения к наивному UTC для колонок без timezone"""
    moscow = datetime(2030, 1, 1, 15, 0, tzinfo=timezone(timedelta(hours=3)))

    result = to_naive_utc(moscow)

    assert result.tzinfo is None
    assert result == datetime(2030, 1, 1, 12, 0)
