"""
Константы приложения - роли, статусы заказов, типы позиций
"""


class UserRole:
    """Роли пользователей"""

    ADMIN = "admin"
    DRIVER = "driver"
    CUSTOMER = "customer"

    @classmethod
    def all_roles(cls) -> list[str]:
        """Список всех ролей"""
        return [cls.ADMIN, cls.DRIVER, cls.CUSTOMER]


class OrderStatus:
    """Статусы заказов"""

    PENDING = "pending"  # Создан, ожидает оплаты
    PAID = "paid"  # Оплачен
    PREPARING = "preparing"  # Готовится на кухне
    DELIVERING = "delivering"  # Передан курьеру
    DELIVERED = "delivered"  # Доставлен
    CANCELLED = "cancelled"  # Отменён

    @classmethod
    def all_statuses(cls) -> list[str]:
        """Список всех статусов"""
        return [
            cls.PENDING,
            cls.PAID,
            cls.PREPARING,
            cls.DELIVERING,
            cls.DELIVERED,
            cls.CANCELLED,
        ]

    @classmethod
    def is_valid(cls, status: str) -> bool:
        return status in cls.all_statuses()

    @classmethod
    def get_status_name(cls, status: str) -> str:
        """Человекочитаемое название статуса"""
        names = {
            cls.PENDING: "Pending",
            cls.PAID: "Paid",
            cls.PREPARING: "Preparing",
            cls.DELIVERING: "Delivering",
            cls.DELIVERED: "Delivered",
            cls.CANCELLED: "Cancelled",
        }
        return names.get(status, status)


class OrderItemType:
    """Типы позиций заказа: отдельное блюдо или меню целиком"""

    MEAL = "meal"
    MENU = "menu"

    @classmethod
    def all_types(cls) -> list[str]:
        return [cls.MEAL, cls.MENU]
