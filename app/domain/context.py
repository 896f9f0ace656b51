"""
Контекст запроса: идентичность пользователя и активная транзакция

Контекст передаётся явно по цепочке вызовов. Он неизменяемый: открытие
транзакции порождает новый контекст, исходный остаётся прежним.
"""

from dataclasses import dataclass, replace
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import UnauthorizedError


@dataclass(frozen=True)
class Identity:
    """Аутентифицированный пользователь (выдаётся внешним сервисом авторизации)"""

    user_id: int
    role: str


@dataclass(frozen=True)
class RequestContext:
    """
    Носитель данных одного запроса

    Attributes:
        request_id: Correlation ID от граничного слоя (может отсутствовать)
        identity: Пользователь или None для анонимного запроса
        session: Активная транзакция (handle) или None
    """

    request_id: str | None = None
    identity: Identity | None = None
    session: AsyncSession | None = None

    @property
    def in_transaction(self) -> bool:
        return self.session is not None

    def with_session(self, session: AsyncSession) -> "RequestContext":
        """Новый контекст с привязанной транзакцией"""
        return replace(self, session=session)


class IdentityResolver(Protocol):
    """Интерфейс внешнего сервиса, определяющего пользователя по контексту"""

    def __call__(self, ctx: RequestContext) -> Identity | None: ...


def context_identity(ctx: RequestContext) -> Identity | None:
    """Резолвер по умолчанию: идентичность уже лежит в контексте"""
    return ctx.identity


def require_identity(
    ctx: RequestContext, resolver: IdentityResolver = context_identity
) -> Identity:
    """
    Получение пользователя, обязательного для операции

    Args:
        ctx: Контекст запроса
        resolver: Внешний резолвер идентичности

    Returns:
        Identity

    Raises:
        UnauthorizedError: Если пользователь не определён
    """
    identity = resolver(ctx)
    if identity is None:
        raise UnauthorizedError("User must be logged in")
    return identity
