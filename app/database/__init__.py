"""
Database package: подключение к БД, ORM модели, менеджер транзакций.
"""

from app.database.orm_database import ORMDatabase
from app.database.transaction import TransactionManager, UnitOfWork


Database = ORMDatabase


def get_database(database_url: str | None = None) -> ORMDatabase:
    """
    Фабрика для получения экземпляра БД.

    Используйте эту функцию вместо прямого вызова `ORMDatabase()`
    в точках сборки приложения.
    """
    return ORMDatabase(database_url)


__all__ = ["Database", "ORMDatabase", "TransactionManager", "UnitOfWork", "get_database"]
