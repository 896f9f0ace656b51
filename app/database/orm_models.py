"""
SQLAlchemy ORM модели для базы данных
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship
from sqlalchemy.sql import func

from app.core.constants import OrderItemType, OrderStatus


# Базовый класс для всех моделей
Base = declarative_base()

_STATUS_VALUES = ", ".join(f"'{status}'" for status in OrderStatus.all_statuses())
_ITEM_TYPE_VALUES = ", ".join(f"'{item_type}'" for item_type in OrderItemType.all_types())


class Meal(Base):
    """Блюдо каталога"""

    __tablename__ = "meals"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    menu_meals: Mapped[list["MenuMeal"]] = relationship("MenuMeal", back_populates="meal")

    __table_args__ = (CheckConstraint("price >= 0", name="chk_meals_price"),)


class Menu(Base):
    """Недельное меню - набор блюд, продаваемый как одна позиция"""

    __tablename__ = "menus"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    week_start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    week_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    menu_meals: Mapped[list["MenuMeal"]] = relationship(
        "MenuMeal", back_populates="menu", cascade="all, delete-orphan"
    )


class MenuMeal(Base):
    """Связь меню и блюда (блюдо на конкретный день доставки)"""

    __tablename__ = "menu_meals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    menu_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("menus.id", ondelete="CASCADE"), nullable=False
    )
    meal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("meals.id", ondelete="CASCADE"), nullable=False
    )
    delivery_day: Mapped[str] = mapped_column(String(20), nullable=False, default="monday")

    menu: Mapped["Menu"] = relationship("Menu", back_populates="menu_meals")
    meal: Mapped["Meal"] = relationship("Meal", back_populates="menu_meals")

    __table_args__ = (Index("idx_menu_meals_menu", "menu_id"),)


class Order(Base):
    """Модель заказа"""

    __tablename__ = "orders"
    __mapper_args__ = {"eager_defaults": True}

    # Основные поля
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    driver_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=OrderStatus.PENDING)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)

    # Доставка
    delivery_address: Mapped[str] = mapped_column(Text, nullable=False)
    delivery_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    delivery_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Оплата (непрозрачные строки, шлюз не моделируется)
    payment_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Системные поля
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    # Связи
    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id",
    )

    # Индексы и ограничения
    __table_args__ = (
        Index("idx_orders_user_id", "user_id"),
        Index("idx_orders_status", "status"),
        Index("idx_orders_user_status", "user_id", "status"),
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="chk_orders_status"),
        CheckConstraint("total_amount >= 0", name="chk_orders_total_amount"),
    )

    def calculate_total_amount(self) -> Decimal:
        """Пересчёт суммы заказа по позициям (price × quantity)"""
        total = sum(
            (Decimal(item.price) * item.quantity for item in self.items), start=Decimal("0.00")
        )
        self.total_amount = total
        return total

    def validate(self) -> list[str]:
        """
        Проверка собранного заказа перед записью

        Собирает все нарушения, включая нарушения каждой позиции.

        Returns:
            Список сообщений об ошибках
        """
        errors = []
        if not self.user_id:
            errors.append("User ID is required")
        if not self.delivery_address or not self.delivery_address.strip():
            errors.append("Delivery address is required")
        if self.delivery_date is None:
            errors.append("Delivery date is required")
        if not self.items:
            errors.append("Order must contain at least one item")
        for index, item in enumerate(self.items, start=1):
            errors.extend(f"Item {index}: {message}" for message in item.validate())
        return errors

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "driver_id": self.driver_id,
            "status": self.status,
            "total_amount": str(self.total_amount),
            "delivery_address": self.delivery_address,
            "delivery_date": self.delivery_date.isoformat() if self.delivery_date else None,
            "delivery_notes": self.delivery_notes,
            "payment_id": self.payment_id,
            "payment_method": self.payment_method,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "items": [item.to_dict() for item in self.items],
        }


class OrderItem(Base):
    """
    Позиция заказа

    price и name - снимок на момент создания заказа; последующие изменения
    блюда или меню не влияют на исторические заказы.
    """

    __tablename__ = "order_items"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    item_type: Mapped[str] = mapped_column(String(10), nullable=False)
    item_id: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    order: Mapped["Order"] = relationship("Order", back_populates="items")

    __table_args__ = (
        Index("idx_order_items_order_id", "order_id"),
        CheckConstraint(f"item_type IN ({_ITEM_TYPE_VALUES})", name="chk_order_items_type"),
        CheckConstraint("quantity > 0", name="chk_order_items_quantity"),
        CheckConstraint("price > 0", name="chk_order_items_price"),
    )

    def validate(self) -> list[str]:
        """
        Проверка позиции до записи в БД

        Returns:
            Список всех найденных нарушений (пустой, если позиция валидна)
        """
        errors = []
        if self.item_type not in OrderItemType.all_types():
            errors.append("Item type must be either 'meal' or 'menu'")
        if not self.item_id:
            errors.append("Item ID is required")
        if self.quantity is None or self.quantity <= 0:
            errors.append("Quantity must be greater than 0")
        if self.price is None or Decimal(self.price) <= 0:
            errors.append("Price must be greater than 0")
        if not self.name or not self.name.strip():
            errors.append("Name is required")
        return errors

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "item_type": self.item_type,
            "item_id": self.item_id,
            "quantity": self.quantity,
            "price": str(self.price),
            "name": self.name,
            "notes": self.notes,
        }
