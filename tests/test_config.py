"""
Тесты для модуля config
"""
from app.config import Config, OrderItemType, OrderStatus, UserRole


class TestUserRole:
    """Тесты для класса UserRole"""

    def test_all_roles(self):
        """Тест получения всех ролей"""
        roles = UserRole.all_roles()
        assert UserRole.ADMIN in roles
        assert UserRole.DRIVER in roles
        assert UserRole.CUSTOMER in roles
        assert len(roles) == 3


class TestOrderStatus:
    """Тесты для класса OrderStatus"""

    def test_all_statuses(self):
        """Тест получения всех статусов"""
        assert OrderStatus.all_statuses() == [
            "pending",
            "paid",
            "preparing",
            "delivering",
            "delivered",
            "cancelled",
        ]

    def test_is_valid(self):
        assert OrderStatus.is_valid(OrderStatus.PAID)
        assert not OrderStatus.is_valid("PAID")
        assert not OrderStatus.is_valid("shipped")

    def test_get_status_name(self):
        """Тест получения названия статуса"""
        assert OrderStatus.get_status_name(OrderStatus.PENDING) == "Pending"
        assert OrderStatus.get_status_name(OrderStatus.CANCELLED) == "Cancelled"
        assert OrderStatus.get_status_name("unknown") == "unknown"


class TestOrderItemType:
    def test_all_types(self):
        assert OrderItemType.all_types() == ["meal", "menu"]


class TestConfig:
    """Тесты для класса Config"""

    def test_defaults(self):
        """Тест значений по умолчанию"""
        assert Config.DATABASE_URL
        assert "admin" in Config.PRIVILEGED_ROLES
        assert Config.MAX_ITEMS_PER_ORDER > 0
        assert Config.MAX_ITEM_QUANTITY > 0

    def test_mock_config(self, mock_config):
        """Тест подмены конфигурации в тестах"""
        assert Config.PRIVILEGED_ROLES == [UserRole.ADMIN]
        assert Config.LOG_LEVEL == "DEBUG"
