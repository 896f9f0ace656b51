"""
Тесты для моделей данных
"""
from datetime import datetime, timedelta
from decimal import Decimal

from app.config import OrderItemType, OrderStatus
from app.database.orm_models import Order, OrderItem


def make_item(**overrides) -> OrderItem:
    data = {
        "item_type": OrderItemType.MEAL,
        "item_id": 1,
        "quantity": 2,
        "price": Decimal("9.99"),
        "name": "Плов",
    }
    data.update(overrides)
    return OrderItem(**data)


def make_order(items: list[OrderItem], **overrides) -> Order:
    data = {
        "user_id": 7,
        "status": OrderStatus.PENDING,
        "delivery_address": "ул. Ленина, 10",
        "delivery_date": datetime.now() + timedelta(days=1),
    }
    data.update(overrides)
    order = Order(**data)
    order.items.extend(items)
    return order


class TestOrderItemModel:
    """Тесты для модели OrderItem"""

    def test_valid_item(self):
        assert make_item().validate() == []

    def test_collects_all_violations(self):
        """Тест: валидация возвращает все нарушения, а не первое"""
        item = make_item(item_type="drink", item_id=None, quantity=0, price=Decimal("0"), name=" ")

        errors = item.validate()

        assert errors == [
            "Item type must be either 'meal' or 'menu'",
            "Item ID is required",
            "Quantity must be greater than 0",
            "Price must be greater than 0",
            "Name is required",
        ]

    def test_negative_price(self):
        assert "Price must be greater than 0" in make_item(price=Decimal("-1.00")).validate()


class TestOrderModel:
    """Тесты для модели Order"""

    def test_calculate_total_amount(self):
        """Тест пересчёта суммы: 2 × 9.99 + 1 × 14.99"""
        order = make_order(
            [make_item(), make_item(item_id=2, quantity=1, price=Decimal("14.99"), name="Борщ")]
        )

        total = order.calculate_total_amount()

        assert total == Decimal("34.97")
        assert order.total_amount == Decimal("34.97")

    def test_valid_order(self):
        assert make_order([make_item()]).validate() == []

    def test_order_violations_include_items(self):
        """Тест: нарушения заказа и всех позиций собираются вместе"""
        order = make_order(
            [make_item(), make_item(quantity=0)],
            user_id=None,
            delivery_address="   ",
        )

        errors = order.validate()

        assert errors == [
            "User ID is required",
            "Delivery address is required",
            "Item 2: Quantity must be greater than 0",
        ]

    def test_empty_order(self):
        assert "Order must contain at least one item" in make_order([]).validate()

    def test_to_dict(self):
        order = make_order([make_item()])
        order.calculate_total_amount()

        data = order.to_dict()

        assert data["total_amount"] == "19.98"
        assert data["status"] == OrderStatus.PENDING
        assert data["items"][0]["name"] == "Плов"
        assert data["items"][0]["price"] == "9.99"
