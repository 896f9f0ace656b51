"""
Конфигурация приложения из переменных окружения (.env)
"""

import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


class Config:
    """Конфигурация сервиса заказов"""

    # База данных
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "data/orders.db")
    DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite+aiosqlite:///{DATABASE_PATH}")
    DATABASE_ECHO: bool = _get_bool("DATABASE_ECHO")

    # Логирование и мониторинг
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOGS_DIR: str = os.getenv("LOGS_DIR", "logs")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    SENTRY_DSN: str | None = os.getenv("SENTRY_DSN")

    # Роли, которым разрешено работать с чужими заказами
    PRIVILEGED_ROLES: list[str] = _get_list("PRIVILEGED_ROLES", "admin")

    # Ограничения валидации
    MAX_ITEMS_PER_ORDER: int = int(os.getenv("MAX_ITEMS_PER_ORDER", "50"))
    MAX_ITEM_QUANTITY: int = int(os.getenv("MAX_ITEM_QUANTITY", "100"))


# Лимиты длины текстовых полей
MAX_ADDRESS_LENGTH = int(os.getenv("MAX_ADDRESS_LENGTH", "500"))
MAX_NOTES_LENGTH = int(os.getenv("MAX_NOTES_LENGTH", "1000"))
MAX_PAYMENT_METHOD_LENGTH = 50
