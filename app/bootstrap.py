"""
Сборка приложения: логирование, мониторинг, БД и сервисы
"""

import logging

from app.database import ORMDatabase, get_database
from app.services import ServiceFactory
from app.utils.logging_setup import setup_logging
from app.utils.sentry import init_sentry


logger = logging.getLogger(__name__)


async def startup(database_url: str | None = None, configure_logging: bool = True) -> ServiceFactory:
    """
    Инициализация сервиса заказов

    Args:
        database_url: URL базы данных (по умолчанию Config.DATABASE_URL)
        configure_logging: Настроить root logger (выключается в тестах)

    Returns:
        ServiceFactory поверх подключённой БД
    """
    if configure_logging:
        setup_logging()

    # Инициализация Sentry (опционально)
    init_sentry()

    db = get_database(database_url)
    logger.info("=" * 60)
    logger.info("Инициализация базы данных...")
    logger.info(f"   DATABASE_URL: {db.database_url}")
    logger.info("=" * 60)

    await db.connect()
    try:
        await db.init_db()
    except Exception:
        await db.disconnect()
        raise

    logger.info("OK: Сервис заказов готов к работе")
    return ServiceFactory(db)


async def shutdown(factory: ServiceFactory) -> None:
    """Закрытие пула соединений"""
    db: ORMDatabase = factory.db
    factory.reset()
    await db.disconnect()
    logger.info("Сервис заказов остановлен")
