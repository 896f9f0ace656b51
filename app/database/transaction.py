"""
Менеджер транзакций

Выполняет единицу работы атомарно. Если в контексте уже есть активная
транзакция, вложенный вызов открывает SAVEPOINT на той же сессии вместо
новой транзакции, поэтому бизнес-операции можно свободно вкладывать
друг в друга.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction, async_sessionmaker

from app.core.errors import DatabaseError
from app.domain.context import RequestContext


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Единица работы получает производный контекст; его session - активный handle
UnitOfWork = Callable[[RequestContext], Awaitable[T]]

# Ключ session.info: задача, открывшая транзакцию верхнего уровня
OWNER_TASK_KEY = "transaction_owner_task"


class TransactionManager:
    """
    Атомарное выполнение единиц работы поверх AsyncSession

    Менеджер не использует внутрипроцессных блокировок: корректность
    обеспечивается только транзакциями и savepoint'ами СУБД. Сессия
    принадлежит одному запросу и закрывается по выходу из run_in_transaction.

    Вложенные вызовы на одном handle должны выполняться последовательно, в той
    же задаче asyncio: вызов из параллельной задачи отклоняется DatabaseError.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Args:
            session_factory: Фабрика сессий пула соединений по умолчанию
        """
        self.session_factory = session_factory

    async def run_in_transaction(self, ctx: RequestContext, unit_of_work: UnitOfWork[T]) -> T:
        """
        Выполнение единицы работы в транзакции

        Args:
            ctx: Контекст запроса (может уже содержать активную транзакцию)
            unit_of_work: Корутина-функция, принимающая производный контекст

        Returns:
            Результат единицы работы

        Raises:
            Исходное исключение единицы работы (после отката) или
            DatabaseError, если не удалось начать/зафиксировать транзакцию
        """
        if ctx.session is not None:
            return await self._run_in_savepoint(ctx, unit_of_work)
        return await self._run_in_new_transaction(ctx, unit_of_work)

    async def without_result(
        self, ctx: RequestContext, unit_of_work: UnitOfWork[Any]
    ) -> None:
        """То же, что run_in_transaction, но результат отбрасывается"""
        await self.run_in_transaction(ctx, unit_of_work)

    def current_handle(self, ctx: RequestContext) -> AsyncSession:
        """
        Активная сессия из контекста или новая сессия пула по умолчанию

        Никогда не возвращает None. Сессию, созданную здесь, закрывает
        вызывающий код; удобнее использовать handle_scope().
        """
        if ctx.session is not None:
            return ctx.session
        return self.session_factory()

    @asynccontextmanager
    async def handle_scope(self, ctx: RequestContext) -> AsyncIterator[AsyncSession]:
        """
        Context manager для операций чтения

        Usage:
            async with transactions.handle_scope(ctx) as session:
                order = await session.get(Order, order_id)
        """
        if ctx.session is not None:
            yield ctx.session
            return

        session = self.session_factory()
        try:
            yield session
        finally:
            await session.close()

    async def _run_in_new_transaction(
        self, ctx: RequestContext, unit_of_work: UnitOfWork[T]
    ) -> T:
        session = self.session_factory()
        try:
            try:
                await session.begin()
            except SQLAlchemyError as e:
                raise DatabaseError(
                    "Failed to begin transaction", details=str(e), cause=e
                ) from e

            session.info[OWNER_TASK_KEY] = asyncio.current_task()
            logger.debug("Транзакция начата (request_id=%s)", ctx.request_id)

            try:
                result = await unit_of_work(ctx.with_session(session))
            except BaseException as e:
                # Включая CancelledError (таймаут вызывающего) и KeyboardInterrupt
                await self._rollback_quietly(session, ctx, e)
                raise

            try:
                await session.commit()
            except SQLAlchemyError as e:
                await self._rollback_quietly(session, ctx, e)
                raise DatabaseError(
                    "Failed to commit transaction", details=str(e), cause=e
                ) from e

            logger.debug("OK: Транзакция зафиксирована (request_id=%s)", ctx.request_id)
            return result
        finally:
            await session.close()

    async def _run_in_savepoint(self, ctx: RequestContext, unit_of_work: UnitOfWork[T]) -> T:
        session = ctx.session
        self._ensure_owner_task(session)

        # SQLAlchemy именует savepoint'ы монотонным счётчиком соединения (sa_savepoint_N)
        try:
            savepoint = await session.begin_nested()
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to create savepoint", details=str(e), cause=e) from e

        logger.debug("Savepoint создан (request_id=%s)", ctx.request_id)

        try:
            result = await unit_of_work(ctx)
        except BaseException as e:
            await self._rollback_savepoint_quietly(savepoint, ctx, e)
            raise

        try:
            await savepoint.commit()
        except SQLAlchemyError as e:
            # Записи вложенной работы не должны остаться во внешней транзакции
            await self._rollback_savepoint_quietly(savepoint, ctx, e)
            raise DatabaseError("Failed to release savepoint", details=str(e), cause=e) from e

        return result

    @staticmethod
    def _ensure_owner_task(session: AsyncSession) -> None:
        """
        Вложенные вызовы на одном handle выполняются только последовательно

        AsyncSession не допускает конкурентного использования, поэтому вложенный
        вызов из другой задачи (например, asyncio.gather внутри единицы работы)
        отклоняется до обращения к сессии.
        """
        owner = session.info.get(OWNER_TASK_KEY)
        if owner is not None and owner is not asyncio.current_task():
            raise DatabaseError(
                "Concurrent use of a transaction handle",
                details="Nested units of work on one handle must run sequentially",
            )

    @staticmethod
    async def _rollback_savepoint_quietly(
        savepoint: AsyncSessionTransaction, ctx: RequestContext, error: BaseException
    ) -> None:
        """Откат к savepoint без маскировки исходной ошибки (best-effort, только лог)"""
        try:
            await savepoint.rollback()
            logger.debug(
                "Откат к savepoint (request_id=%s): %s", ctx.request_id, type(error).__name__
            )
        except Exception as rollback_error:
            logger.error(
                "ERROR: Не удалось откатиться к savepoint (request_id=%s): %s "
                "(исходная ошибка: %r)",
                ctx.request_id,
                rollback_error,
                error,
            )

    @staticmethod
    async def _rollback_quietly(
        session: AsyncSession, ctx: RequestContext, error: BaseException
    ) -> None:
        """Откат без маскировки исходной ошибки (best-effort, только лог)"""
        try:
            await session.rollback()
            logger.debug(
                "Транзакция отменена (rollback, request_id=%s): %s",
                ctx.request_id,
                type(error).__name__,
            )
        except Exception as rollback_error:
            logger.error(
                "ERROR: Ошибка при откате транзакции (request_id=%s): %s (исходная ошибка: %r)",
                ctx.request_id,
                rollback_error,
                error,
            )
