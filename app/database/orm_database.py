"""
SQLAlchemy ORM Database класс
"""

import logging
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.config import Config
from app.database.orm_models import Base
from app.database.transaction import TransactionManager


logger = logging.getLogger(__name__)


class ORMDatabase:
    """Подключение к БД через SQLAlchemy ORM (async)"""

    def __init__(self, database_url: str | None = None, echo: bool | None = None):
        """
        Инициализация ORM Database

        Args:
            database_url: URL базы данных (SQLite или PostgreSQL)
            echo: Логировать SQL (по умолчанию из Config.DATABASE_ECHO)
        """
        self.database_url = database_url or Config.DATABASE_URL
        self.echo = Config.DATABASE_ECHO if echo is None else echo
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None
        self._transactions: TransactionManager | None = None
        self._is_sqlite = self.database_url.startswith("sqlite")

    async def connect(self):
        """Подключение к базе данных"""
        try:
            logger.info("Инициализация подключения к БД...")
            logger.info(f"   Is SQLite: {self._is_sqlite}")

            engine_kwargs: dict = {"echo": self.echo, "pool_pre_ping": True}
            if self._is_sqlite:
                engine_kwargs["connect_args"] = {"check_same_thread": False}
                if ":memory:" in self.database_url or self.database_url.endswith("://"):
                    # Одна общая in-memory база на все сессии
                    engine_kwargs["poolclass"] = StaticPool
            else:
                engine_kwargs["pool_recycle"] = 3600

            self.engine = create_async_engine(self.database_url, **engine_kwargs)

            if self._is_sqlite:
                self._install_sqlite_hooks(self.engine)

            self.session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,  # Объекты доступны после закрытия сессии
            )
            self._transactions = TransactionManager(self.session_factory)

            logger.info("OK: Подключено к базе данных")
        except Exception as e:
            logger.error(f"ERROR: Ошибка подключения к БД: {e}")
            raise

    @staticmethod
    def _install_sqlite_hooks(engine: AsyncEngine) -> None:
        """
        Настройка SQLite для корректной работы SAVEPOINT и внешних ключей

        Драйвер сам не эмитит BEGIN; это делает SQLAlchemy, иначе вложенные
        savepoint'ы и откат DDL работают некорректно.
        """

        @event.listens_for(engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN")

    async def init_db(self):
        """
        Создание таблиц, если их ещё нет

        Миграции схемы - зона внешнего инструмента; здесь только create_all
        для локального запуска и тестов.
        """
        if not self.engine:
            await self.connect()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("OK: Схема БД проверена")

    async def disconnect(self):
        """Отключение от базы данных"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            self._transactions = None
            logger.info("Отключено от базы данных")

    @property
    def transactions(self) -> TransactionManager:
        """Менеджер транзакций, привязанный к пулу этого подключения"""
        if self._transactions is None:
            raise RuntimeError("База данных не подключена")
        return self._transactions

    @asynccontextmanager
    async def get_session(self):
        """
        Context manager для получения сессии вне контекста запроса

        Usage:
            async with db.get_session() as session:
                session.add(meal)
                # Автоматический commit/rollback
        """
        if not self.session_factory:
            raise RuntimeError("База данных не подключена")

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
                logger.debug("OK: Транзакция успешно завершена (commit)")
            except Exception as e:
                await session.rollback()
                logger.error(f"ERROR: Транзакция отменена (rollback): {e}")
                raise
