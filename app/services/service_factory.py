"""
Factory для создания сервисов
"""

import logging

from app.database.orm_database import ORMDatabase
from app.database.transaction import TransactionManager
from app.domain.order_state_machine import OrderStateMachine
from app.services.order_service import OrderService


logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory для создания сервисов с инжекцией зависимостей
    """

    def __init__(self, db: ORMDatabase, privileged_roles: list[str] | None = None):
        """
        Инициализация фабрики

        Args:
            db: Подключённая база данных
            privileged_roles: Переопределение Config.PRIVILEGED_ROLES
        """
        self.db = db
        self.privileged_roles = privileged_roles
        self._order_service = None
        self._state_machine = None

    @property
    def transactions(self) -> TransactionManager:
        return self.db.transactions

    @property
    def state_machine(self) -> OrderStateMachine:
        """Ленивая инициализация OrderStateMachine"""
        if self._state_machine is None:
            self._state_machine = OrderStateMachine()
        return self._state_machine

    @property
    def order_service(self) -> OrderService:
        """Получение Order Service"""
        if self._order_service is None:
            self._order_service = OrderService(
                transactions=self.transactions,
                state_machine=self.state_machine,
                privileged_roles=self.privileged_roles,
            )
        return self._order_service

    def reset(self):
        """Сброс кэшированных сервисов (для тестирования)"""
        self._order_service = None
        self._state_machine = None
        logger.debug("ServiceFactory: сервисы сброшены")
