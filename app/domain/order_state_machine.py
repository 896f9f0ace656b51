"""
State Machine для валидации переходов статусов заказов
"""

from dataclasses import dataclass

from app.core.constants import OrderStatus
from app.core.errors import ValidationError


class InvalidStateTransitionError(ValidationError):
    """Исключение при попытке недопустимого перехода статуса"""

    def __init__(self, from_state: str, to_state: str, reason: str = ""):
        self.from_state = from_state
        self.to_state = to_state
        self.reason = reason
        super().__init__(
            "Invalid status transition",
            details=reason or f"Cannot change status from {from_state} to {to_state}",
        )


@dataclass
class OrderStateTransitionResult:
    """Результат валидации перехода статуса"""

    is_valid: bool
    error_message: str | None = None


class OrderStateMachine:
    """
    State Machine для управления жизненным циклом заказа

    Граф переходов:

    PENDING → PAID → PREPARING → DELIVERING → DELIVERED
       ↓        ↓
    CANCELLED  CANCELLED

    DELIVERED и CANCELLED - терминальные, из них переходов нет ни для какой роли.
    """

    # Допустимые переходы: из какого статуса в какие можно перейти
    TRANSITIONS: dict[str, frozenset[str]] = {
        OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
        OrderStatus.PAID: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
        OrderStatus.PREPARING: frozenset({OrderStatus.DELIVERING}),
        OrderStatus.DELIVERING: frozenset({OrderStatus.DELIVERED}),
        OrderStatus.DELIVERED: frozenset(),  # Терминальное состояние
        OrderStatus.CANCELLED: frozenset(),  # Терминальное состояние
    }

    # Отмена разрешена только из этих статусов. Проверяется независимо от
    # TRANSITIONS: изменение общего графа не должно открыть отмену из
    # терминального статуса.
    CANCELLABLE_STATES: frozenset[str] = frozenset({OrderStatus.PENDING, OrderStatus.PAID})

    INITIAL_STATE = OrderStatus.PENDING

    @classmethod
    def can_transition(cls, from_state: str, to_state: str) -> bool:
        """
        Проверка возможности перехода между статусами

        Args:
            from_state: Текущий статус
            to_state: Целевой статус

        Returns:
            True если ребро есть в графе
        """
        return to_state in cls.TRANSITIONS.get(from_state, frozenset())

    @classmethod
    def can_cancel(cls, state: str) -> bool:
        return state in cls.CANCELLABLE_STATES

    @classmethod
    def validate_transition(
        cls, from_state: str, to_state: str, raise_exception: bool = True
    ) -> OrderStateTransitionResult:
        """
        Валидация перехода статуса

        Args:
            from_state: Текущий статус заказа
            to_state: Целевой статус
            raise_exception: Выбрасывать ли исключение при ошибке

        Returns:
            OrderStateTransitionResult с результатом валидации

        Raises:
            ValidationError: Если целевой статус неизвестен
            InvalidStateTransitionError: Если переход недопустим и raise_exception=True
        """
        if not OrderStatus.is_valid(to_state):
            error_msg = (
                f"Unknown status '{to_state}'. "
                f"Allowed values: {', '.join(OrderStatus.all_statuses())}"
            )
            if raise_exception:
                raise ValidationError("Invalid status", details=error_msg)
            return OrderStateTransitionResult(is_valid=False, error_message=error_msg)

        if cls.can_transition(from_state, to_state):
            return OrderStateTransitionResult(is_valid=True)

        error_msg = f"Cannot change status from {from_state} to {to_state}"
        allowed = cls.get_available_transitions(from_state)
        if allowed:
            error_msg += f". Allowed transitions: {', '.join(allowed)}"
        else:
            error_msg += f". Status '{from_state}' is terminal"

        if raise_exception:
            raise InvalidStateTransitionError(from_state, to_state, error_msg)

        return OrderStateTransitionResult(is_valid=False, error_message=error_msg)

    @classmethod
    def validate_cancellation(
        cls, state: str, raise_exception: bool = True
    ) -> OrderStateTransitionResult:
        """
        Валидация отмены заказа

        Отмена должна пройти и собственную проверку, и общий граф переходов.

        Raises:
            ValidationError: Если заказ в этом статусе нельзя отменить
        """
        if not cls.can_cancel(state):
            error_msg = f"Order in {state} status cannot be cancelled"
            if raise_exception:
                raise ValidationError("Cannot cancel order", details=error_msg)
            return OrderStateTransitionResult(is_valid=False, error_message=error_msg)

        return cls.validate_transition(state, OrderStatus.CANCELLED, raise_exception)

    @classmethod
    def get_available_transitions(cls, from_state: str) -> list[str]:
        """
        Список статусов, в которые можно перейти из текущего

        Порядок соответствует порядку OrderStatus.all_statuses().
        """
        allowed = cls.TRANSITIONS.get(from_state, frozenset())
        return [status for status in OrderStatus.all_statuses() if status in allowed]

    @classmethod
    def get_transition_description(cls, from_state: str, to_state: str) -> str:
        """Описание перехода для логов"""
        descriptions = {
            (OrderStatus.PENDING, OrderStatus.PAID): "Order paid",
            (OrderStatus.PENDING, OrderStatus.CANCELLED): "Order cancelled before payment",
            (OrderStatus.PAID, OrderStatus.PREPARING): "Kitchen started preparing",
            (OrderStatus.PAID, OrderStatus.CANCELLED): "Paid order cancelled",
            (OrderStatus.PREPARING, OrderStatus.DELIVERING): "Handed over to driver",
            (OrderStatus.DELIVERING, OrderStatus.DELIVERED): "Order delivered",
        }
        return descriptions.get(
            (from_state, to_state),
            f"Transition from {OrderStatus.get_status_name(from_state)} "
            f"to {OrderStatus.get_status_name(to_state)}",
        )

    @classmethod
    def is_terminal_state(cls, state: str) -> bool:
        """
        Проверка, является ли статус терминальным

        Returns:
            True если из этого статуса нельзя никуда перейти
        """
        return len(cls.TRANSITIONS.get(state, frozenset())) == 0
