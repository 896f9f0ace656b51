"""
Репозиторий для работы с заказами
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from app.core.errors import ConflictError
from app.database.orm_models import Order
from app.repositories.base import BaseRepository
from app.utils.helpers import format_money


logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository[Order]):
    """Репозиторий для работы с заказами и их позициями"""

    async def add(self, order: Order) -> Order:
        """
        Сохранение заказа вместе с позициями

        Заказ вставляется первым, затем позиции (по внешнему ключу).

        Args:
            order: Собранный заказ с позициями

        Returns:
            Заказ с присвоенными ID
        """
        self.session.add(order)
        await self.session.flush()
        logger.info(
            f"Создан заказ #{order.id} (user={order.user_id}, позиций: {len(order.items)}, "
            f"сумма: {format_money(order.total_amount)})"
        )
        return order

    async def get_by_id(self, order_id: int, with_items: bool = True) -> Order | None:
        """
        Получение заказа по ID

        Args:
            order_id: ID заказа
            with_items: Загрузить позиции заказа

        Returns:
            Заказ или None
        """
        stmt = select(Order).where(Order.id == order_id)
        if with_items:
            stmt = stmt.options(selectinload(Order.items))
        return await self._scalar_one_or_none(stmt)

    async def get_all(
        self,
        user_id: int | None = None,
        status: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Order]:
        """
        Получение заказов с фильтрацией

        Args:
            user_id: Фильтр по владельцу (None - все заказы)
            status: Фильтр по статусу
            limit: Лимит количества
            offset: Смещение

        Returns:
            Список заказов, новые первыми
        """
        stmt = select(Order).options(selectinload(Order.items))

        if user_id is not None:
            stmt = stmt.where(Order.user_id == user_id)
        if status:
            stmt = stmt.where(Order.status == status)

        stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())

        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)

        return await self._scalars(stmt)

    async def compare_and_set_status(self, order: Order, new_status: str) -> Order:
        """
        Смена статуса с проверкой версии (optimistic locking)

        UPDATE применяется только если статус и версия не изменились с момента
        чтения, поэтому две конкурентные смены статуса не могут обе пройти.

        Args:
            order: Заказ, прочитанный в текущей единице работы
            new_status: Новый статус

        Returns:
            Обновлённый заказ

        Raises:
            ConflictError: Заказ был изменён другой транзакцией
        """
        stmt = (
            update(Order)
            .where(
                Order.id == order.id,
                Order.version == order.version,
                Order.status == order.status,
            )
            .values(status=new_status, version=Order.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount != 1:
            logger.warning(
                f"Конфликт версий заказа #{order.id} (ожидалась версия {order.version})"
            )
            raise ConflictError(
                "Order was modified by another request",
                details={"order_id": order.id, "expected_version": order.version},
            )

        await self.session.refresh(order, attribute_names=["status", "version", "updated_at"])
        return order

    async def delete(self, order: Order) -> None:
        """Удаление заказа; позиции удаляются каскадно"""
        await self.session.delete(order)
        await self.session.flush()
        logger.info(f"Удалён заказ #{order.id}")
