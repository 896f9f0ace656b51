"""
Базовый репозиторий для работы с базой данных
"""

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession


logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Базовый класс для всех репозиториев

    Репозиторий работает поверх переданного handle (AsyncSession) и не
    управляет транзакциями: commit/rollback - зона TransactionManager.
    """

    def __init__(self, session: AsyncSession):
        """
        Инициализация репозитория

        Args:
            session: Активная сессия (handle текущей единицы работы)
        """
        self.session = session

    async def _scalar_one_or_none(self, stmt: Select[Any]) -> Any | None:
        """
        Получение одной записи

        Args:
            stmt: SELECT запрос

        Returns:
            Объект или None
        """
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _scalars(self, stmt: Select[Any]) -> list[Any]:
        """
        Получение всех записей

        Args:
            stmt: SELECT запрос

        Returns:
            Список объектов
        """
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
