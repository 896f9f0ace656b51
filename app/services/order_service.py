"""
Сервис для работы с заказами (бизнес-логика жизненного цикла)
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.config import Config
from app.core.constants import OrderItemType, OrderStatus
from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from app.database.orm_models import Order, OrderItem
from app.database.transaction import TransactionManager
from app.domain.context import (
    Identity,
    IdentityResolver,
    RequestContext,
    context_identity,
    require_identity,
)
from app.domain.order_state_machine import OrderStateMachine
from app.repositories import CatalogRepository, OrderRepository
from app.schemas.order import OrderCreateSchema, OrderItemCreateSchema
from app.utils.helpers import format_money, to_money, to_naive_utc


logger = logging.getLogger(__name__)


class OrderService:
    """
    Сервис для управления заказами

    Каждая операция записи выполняется одной единицей работы через
    TransactionManager: либо применяется целиком, либо не применяется вовсе.
    """

    def __init__(
        self,
        transactions: TransactionManager,
        state_machine: OrderStateMachine | None = None,
        privileged_roles: Iterable[str] | None = None,
        identity_resolver: IdentityResolver = context_identity,
    ):
        """
        Инициализация сервиса

        Args:
            transactions: Менеджер транзакций (привязан к пулу по умолчанию)
            state_machine: State machine для валидации переходов
            privileged_roles: Роли, которым доступны чужие заказы
            identity_resolver: Внешний резолвер пользователя по контексту
        """
        if privileged_roles is None:
            privileged_roles = Config.PRIVILEGED_ROLES
        self.transactions = transactions
        self.state_machine = state_machine or OrderStateMachine()
        self.privileged_roles = frozenset(role.lower() for role in privileged_roles)
        self.identity_resolver = identity_resolver

    # ==================== CREATE ====================

    async def create_order(
        self, ctx: RequestContext, request: OrderCreateSchema | Mapping[str, Any]
    ) -> Order:
        """
        Создание нового заказа

        Цены и названия позиций фиксируются на момент создания, сумма
        считается здесь и никогда не берётся из запроса.

        Args:
            ctx: Контекст запроса
            request: Данные заказа (схема или словарь)

        Returns:
            Созданный заказ со статусом pending

        Raises:
            UnauthorizedError: Пользователь не определён
            ValidationError: Некорректные данные (все нарушения в details)
            NotFoundError: Блюдо или меню из позиции не найдено
        """
        identity = require_identity(ctx, self.identity_resolver)
        data = self._parse_create_request(request)

        async def unit_of_work(tx_ctx: RequestContext) -> Order:
            catalog = CatalogRepository(tx_ctx.session)
            orders = OrderRepository(tx_ctx.session)

            order = Order(
                user_id=identity.user_id,
                status=self.state_machine.INITIAL_STATE,
                delivery_address=data.delivery_address,
                delivery_date=to_naive_utc(data.delivery_date),
                delivery_notes=data.delivery_notes,
                payment_method=data.payment_method,
                version=1,
            )

            for item_data in data.items:
                order.items.append(await self._build_item(catalog, item_data))

            order.calculate_total_amount()

            violations = order.validate()
            if violations:
                raise ValidationError("Order validation failed", details=violations)

            return await orders.add(order)

        order = await self.transactions.run_in_transaction(ctx, unit_of_work)
        logger.info(
            f"Заказ #{order.id} создан пользователем {identity.user_id} "
            f"на сумму {format_money(order.total_amount)}"
        )
        return order

    @staticmethod
    def _parse_create_request(
        request: OrderCreateSchema | Mapping[str, Any],
    ) -> OrderCreateSchema:
        """Валидация входных данных; ошибки pydantic собираются в один ValidationError"""
        if isinstance(request, OrderCreateSchema):
            return request
        try:
            return OrderCreateSchema.model_validate(request)
        except PydanticValidationError as e:
            violations = []
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"])
                violations.append(f"{location}: {error['msg']}" if location else error["msg"])
            raise ValidationError("Invalid request data", details=violations) from e

    @staticmethod
    async def _build_item(catalog: CatalogRepository, item_data: OrderItemCreateSchema) -> OrderItem:
        """
        Позиция заказа со снимком цены и названия

        Для меню цена - сумма текущих цен всех блюд меню.

        Raises:
            NotFoundError: Блюдо или меню не существует
        """
        item = OrderItem(
            item_type=item_data.item_type,
            item_id=item_data.item_id,
            quantity=item_data.quantity,
            notes=item_data.notes,
        )

        if item_data.item_type == OrderItemType.MEAL:
            meal = await catalog.get_meal(item_data.item_id)
            if meal is None:
                raise NotFoundError("Meal", item_data.item_id)
            item.price = to_money(meal.price)
            item.name = meal.name
        else:
            menu = await catalog.get_menu_with_meals(item_data.item_id)
            if menu is None:
                raise NotFoundError("Menu", item_data.item_id)
            item.price = catalog.menu_price(menu)
            item.name = menu.name

        return item

    # ==================== READ ====================

    async def get_order(self, ctx: RequestContext, order_id: int) -> Order:
        """
        Получение заказа по ID

        Raises:
            NotFoundError: Заказ не найден
            ForbiddenError: Заказ принадлежит другому пользователю
        """
        identity = require_identity(ctx, self.identity_resolver)

        async with self.transactions.handle_scope(ctx) as session:
            order = await OrderRepository(session).get_by_id(order_id)

        if order is None:
            raise NotFoundError("Order", order_id)
        self._ensure_can_access(identity, order, "view")
        return order

    async def list_orders(
        self,
        ctx: RequestContext,
        status: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Order]:
        """
        Список заказов: свои для обычного пользователя, все для привилегированных

        Args:
            ctx: Контекст запроса
            status: Фильтр по статусу
            limit: Лимит количества
            offset: Смещение

        Returns:
            Список заказов

        Raises:
            ValidationError: Неизвестный статус или некорректная пагинация
        """
        identity = require_identity(ctx, self.identity_resolver)

        if status is not None:
            status = status.strip().lower()
            if not OrderStatus.is_valid(status):
                raise ValidationError(
                    "Invalid status filter",
                    details=f"Allowed values: {', '.join(OrderStatus.all_statuses())}",
                )

        violations = []
        if limit is not None and limit <= 0:
            violations.append("limit must be greater than 0")
        if offset is not None and offset < 0:
            violations.append("offset must not be negative")
        if violations:
            raise ValidationError("Invalid pagination", details=violations)

        owner_id = None if self.is_privileged(identity) else identity.user_id

        async with self.transactions.handle_scope(ctx) as session:
            return await OrderRepository(session).get_all(
                user_id=owner_id, status=status, limit=limit, offset=offset
            )

    # ==================== STATUS ====================

    async def update_status(self, ctx: RequestContext, order_id: int, target_status: str) -> Order:
        """
        Смена статуса заказа по графу переходов

        Args:
            ctx: Контекст запроса
            order_id: ID заказа
            target_status: Целевой статус

        Returns:
            Обновлённый заказ

        Raises:
            NotFoundError: Заказ не найден
            ForbiddenError: Нет прав на заказ
            InvalidStateTransitionError: Переход отсутствует в графе
            ConflictError: Заказ изменён параллельным запросом
        """
        identity = require_identity(ctx, self.identity_resolver)
        target_status = (target_status or "").strip().lower()

        async def unit_of_work(tx_ctx: RequestContext) -> Order:
            orders = OrderRepository(tx_ctx.session)
            order = await self._load_for_update(orders, identity, order_id, "update")

            old_status = order.status
            self.state_machine.validate_transition(old_status, target_status)

            await orders.compare_and_set_status(order, target_status)
            logger.info(
                f"Статус заказа #{order_id} изменен с {old_status} на {target_status} "
                f"пользователем {identity.user_id} "
                f"({self.state_machine.get_transition_description(old_status, target_status)})"
            )
            return order

        return await self.transactions.run_in_transaction(ctx, unit_of_work)

    async def cancel_order(self, ctx: RequestContext, order_id: int) -> Order:
        """
        Отмена заказа (только из pending или paid)

        Raises:
            ValidationError: Заказ в текущем статусе нельзя отменить
        """
        identity = require_identity(ctx, self.identity_resolver)

        async def unit_of_work(tx_ctx: RequestContext) -> Order:
            orders = OrderRepository(tx_ctx.session)
            order = await self._load_for_update(orders, identity, order_id, "cancel")

            old_status = order.status
            self.state_machine.validate_cancellation(old_status)

            await orders.compare_and_set_status(order, OrderStatus.CANCELLED)
            logger.info(
                f"Заказ #{order_id} отменён пользователем {identity.user_id} (был {old_status})"
            )
            return order

        return await self.transactions.run_in_transaction(ctx, unit_of_work)

    async def delete_order(self, ctx: RequestContext, order_id: int) -> None:
        """
        Удаление заказа вместе с позициями (только привилегированные роли)

        Raises:
            ForbiddenError: Роль не привилегированная
            NotFoundError: Заказ не найден
        """
        identity = require_identity(ctx, self.identity_resolver)
        if not self.is_privileged(identity):
            raise ForbiddenError("You don't have permission to delete orders")

        async def unit_of_work(tx_ctx: RequestContext) -> None:
            orders = OrderRepository(tx_ctx.session)
            order = await orders.get_by_id(order_id)
            if order is None:
                raise NotFoundError("Order", order_id)
            await orders.delete(order)

        await self.transactions.without_result(ctx, unit_of_work)
        logger.info(f"Заказ #{order_id} удалён пользователем {identity.user_id}")

    # ==================== ACCESS ====================

    def is_privileged(self, identity: Identity) -> bool:
        return identity.role.lower() in self.privileged_roles

    def _ensure_can_access(self, identity: Identity, order: Order, action: str) -> None:
        """Только владелец или привилегированная роль; сообщение не раскрывает владельца"""
        if self.is_privileged(identity):
            return
        if order.user_id != identity.user_id:
            logger.warning(
                f"Отказ в доступе: пользователь {identity.user_id} -> заказ #{order.id} ({action})"
            )
            raise ForbiddenError(f"You don't have permission to {action} this order")

    async def _load_for_update(
        self, orders: OrderRepository, identity: Identity, order_id: int, action: str
    ) -> Order:
        order = await orders.get_by_id(order_id, with_items=True)
        if order is None:
            raise NotFoundError("Order", order_id)
        self._ensure_can_access(identity, order, action)
        return order
