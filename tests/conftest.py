"""
Pytest fixtures и конфигурация для тестов
"""
import sys
from collections.abc import AsyncGenerator
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import update


# Добавляем корневую директорию в PYTHONPATH
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from app.config import Config, UserRole
from app.database import Database
from app.database.orm_models import Order
from app.domain.context import Identity, RequestContext
from app.repositories import CatalogRepository
from app.services import ServiceFactory
from app.utils.helpers import get_now


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """
    Фикстура для тестовой базы данных (файл SQLite во временной директории)
    """
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'test_orders.db'}", echo=False)
    await database.connect()
    await database.init_db()
    yield database
    await database.disconnect()


@pytest.fixture
def factory(db: Database) -> ServiceFactory:
    """
    Фикстура для фабрики сервисов поверх тестовой БД
    """
    return ServiceFactory(db, privileged_roles=[UserRole.ADMIN])


@pytest.fixture
def transactions(factory: ServiceFactory):
    return factory.transactions


@pytest.fixture
def order_service(factory: ServiceFactory):
    return factory.order_service


@pytest.fixture
def customer_id() -> int:
    """
    Фикстура для ID покупателя
    """
    return 7


@pytest.fixture
def other_customer_id() -> int:
    return 8


@pytest.fixture
def admin_id() -> int:
    """
    Фикстура для ID администратора
    """
    return 1


@pytest.fixture
def customer_ctx(customer_id: int) -> RequestContext:
    return RequestContext(
        request_id="req-customer", identity=Identity(customer_id, UserRole.CUSTOMER)
    )


@pytest.fixture
def other_customer_ctx(other_customer_id: int) -> RequestContext:
    return RequestContext(
        request_id="req-other", identity=Identity(other_customer_id, UserRole.CUSTOMER)
    )


@pytest.fixture
def admin_ctx(admin_id: int) -> RequestContext:
    return RequestContext(request_id="req-admin", identity=Identity(admin_id, UserRole.ADMIN))


@pytest.fixture
def driver_ctx() -> RequestContext:
    return RequestContext(request_id="req-driver", identity=Identity(50, UserRole.DRIVER))


@pytest.fixture
def anonymous_ctx() -> RequestContext:
    return RequestContext(request_id="req-anon")


@pytest_asyncio.fixture
async def catalog(db: Database) -> dict:
    """
    Фикстура с блюдами и меню

    Returns:
        Словарь ID: meal_a (9.99), meal_b (14.99), meal_c (12.99), menu (A + B)
    """
    async with db.get_session() as session:
        repo = CatalogRepository(session)
        meal_a = await repo.create_meal("Плов", Decimal("9.99"))
        meal_b = await repo.create_meal("Борщ", Decimal("14.99"))
        meal_c = await repo.create_meal("Лагман", Decimal("12.99"))
        menu = await repo.create_menu("Обед недели", [meal_a.id, meal_b.id])
        return {
            "meal_a": meal_a.id,
            "meal_b": meal_b.id,
            "meal_c": meal_c.id,
            "menu": menu.id,
        }


@pytest.fixture
def order_payload():
    """
    Фабрика тела запроса на создание заказа
    """

    def _make(*items: tuple[str, int, int], **overrides) -> dict:
        payload = {
            "delivery_address": "ул. Ленина, дом 10, квартира 5",
            "delivery_date": (get_now() + timedelta(days=2)).isoformat(),
            "delivery_notes": "Позвонить за 10 минут",
            "payment_method": "card",
            "items": [
                {"item_type": item_type, "item_id": item_id, "quantity": quantity}
                for item_type, item_id, quantity in items
            ],
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def force_status(db: Database):
    """
    Принудительная установка статуса в обход state machine (подготовка данных)
    """

    async def _force(order_id: int, status: str) -> None:
        async with db.get_session() as session:
            await session.execute(update(Order).where(Order.id == order_id).values(status=status))

    return _force


@pytest.fixture
def mock_config(monkeypatch) -> None:
    """
    Фикстура для замены конфигурации на тестовую
    """
    monkeypatch.setattr(Config, "PRIVILEGED_ROLES", [UserRole.ADMIN])
    monkeypatch.setattr(Config, "LOG_LEVEL", "DEBUG")
