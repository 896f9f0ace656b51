"""
Репозиторий каталога: блюда и меню
"""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.database.orm_models import Meal, Menu, MenuMeal
from app.repositories.base import BaseRepository
from app.utils.helpers import to_money


logger = logging.getLogger(__name__)


class CatalogRepository(BaseRepository[Meal]):
    """Чтение блюд и меню для оформления заказа"""

    async def get_meal(self, meal_id: int) -> Meal | None:
        return await self.session.get(Meal, meal_id)

    async def get_menu_with_meals(self, menu_id: int) -> Menu | None:
        """
        Получение меню вместе со всеми блюдами

        Args:
            menu_id: ID меню

        Returns:
            Menu с загруженными menu_meals.meal или None
        """
        stmt = (
            select(Menu)
            .options(selectinload(Menu.menu_meals).selectinload(MenuMeal.meal))
            .where(Menu.id == menu_id)
        )
        return await self._scalar_one_or_none(stmt)

    @staticmethod
    def menu_price(menu: Menu) -> Decimal:
        """Цена меню - сумма текущих цен всех блюд, входящих в меню"""
        return sum(
            (to_money(menu_meal.meal.price) for menu_meal in menu.menu_meals),
            start=Decimal("0.00"),
        )

    async def create_meal(self, name: str, price: Decimal | float | str) -> Meal:
        meal = Meal(name=name, price=to_money(price))
        self.session.add(meal)
        await self.session.flush()
        logger.info(f"Создано блюдо #{meal.id} ({name})")
        return meal

    async def update_meal_price(self, meal_id: int, price: Decimal | float | str) -> Meal | None:
        meal = await self.get_meal(meal_id)
        if meal is None:
            return None
        meal.price = to_money(price)
        await self.session.flush()
        return meal

    async def create_menu(self, name: str, meal_ids: list[int] | None = None) -> Menu:
        """
        Создание меню с набором блюд

        Args:
            name: Название меню
            meal_ids: ID блюд, входящих в меню

        Returns:
            Созданное меню
        """
        menu = Menu(name=name)
        self.session.add(menu)
        await self.session.flush()
        for meal_id in meal_ids or []:
            await self.attach_meal(menu.id, meal_id)
        logger.info(f"Создано меню #{menu.id} ({name}), блюд: {len(meal_ids or [])}")
        return menu

    async def attach_meal(self, menu_id: int, meal_id: int, delivery_day: str = "monday") -> MenuMeal:
        menu_meal = MenuMeal(menu_id=menu_id, meal_id=meal_id, delivery_day=delivery_day)
        self.session.add(menu_meal)
        await self.session.flush()
        return menu_meal
