#!/usr/bin/env python3
"""
Заполнение каталога демонстрационными блюдами и меню

Использование:
    python scripts/seed_catalog.py
"""

import asyncio
import sys
from decimal import Decimal
from pathlib import Path


# Добавляем корневую директорию в путь
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.bootstrap import shutdown, startup
from app.repositories import CatalogRepository
from app.utils.helpers import format_money


DEMO_MEALS = [
    ("Борщ", Decimal("5.49")),
    ("Плов", Decimal("12.99")),
    ("Сырники", Decimal("6.50")),
    ("Компот", Decimal("1.99")),
]

DEMO_MENU = "Обед недели"


async def seed_catalog():
    """Создание блюд и одного меню из всех блюд"""
    factory = await startup()
    try:
        async with factory.db.get_session() as session:
            catalog = CatalogRepository(session)
            meal_ids = []
            for name, price in DEMO_MEALS:
                meal = await catalog.create_meal(name, price)
                meal_ids.append(meal.id)
                print(f"   #{meal.id:<4} {name:<20} {format_money(meal.price)}")

            menu = await catalog.create_menu(DEMO_MENU, meal_ids)
            menu = await catalog.get_menu_with_meals(menu.id)
            print(f"\n✅ Меню #{menu.id} '{DEMO_MENU}': {format_money(catalog.menu_price(menu))}")
    finally:
        await shutdown(factory)


if __name__ == "__main__":
    asyncio.run(seed_catalog())
