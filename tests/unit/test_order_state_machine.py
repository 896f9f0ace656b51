"""
Тесты для OrderStateMachine
"""
from itertools import product

import pytest

from app.config import OrderStatus
from app.core.errors import ErrorKind, ValidationError
from app.domain.order_state_machine import InvalidStateTransitionError, OrderStateMachine


ALLOWED_EDGES = {
    (OrderStatus.PENDING, OrderStatus.PAID),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.PAID, OrderStatus.PREPARING),
    (OrderStatus.PAID, OrderStatus.CANCELLED),
    (OrderStatus.PREPARING, OrderStatus.DELIVERING),
    (OrderStatus.DELIVERING, OrderStatus.DELIVERED),
}


class TestTransitionGraph:
    """Тесты графа переходов"""

    @pytest.mark.parametrize(
        ("from_state", "to_state"), list(product(OrderStatus.all_statuses(), repeat=2))
    )
    def test_graph_is_exact(self, from_state, to_state):
        """Тест: разрешены ровно перечисленные рёбра"""
        expected = (from_state, to_state) in ALLOWED_EDGES
        assert OrderStateMachine.can_transition(from_state, to_state) is expected

    def test_initial_state(self):
        assert OrderStateMachine.INITIAL_STATE == OrderStatus.PENDING

    @pytest.mark.parametrize("state", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_states(self, state):
        assert OrderStateMachine.is_terminal_state(state)
        assert OrderStateMachine.get_available_transitions(state) == []

    def test_available_transitions_order(self):
        assert OrderStateMachine.get_available_transitions(OrderStatus.PAID) == [
            OrderStatus.PREPARING,
            OrderStatus.CANCELLED,
        ]


class TestValidateTransition:
    """Тесты валидации перехода"""

    def test_valid_transition(self):
        result = OrderStateMachine.validate_transition(OrderStatus.PENDING, OrderStatus.PAID)
        assert result.is_valid
        assert result.error_message is None

    def test_invalid_transition_names_both_statuses(self):
        """Тест: ошибка называет текущий и запрошенный статус"""
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            OrderStateMachine.validate_transition(OrderStatus.PAID, OrderStatus.DELIVERED)

        error = exc_info.value
        assert error.kind is ErrorKind.VALIDATION
        assert error.from_state == OrderStatus.PAID
        assert error.to_state == OrderStatus.DELIVERED
        assert "from paid to delivered" in error.details
        assert "Allowed transitions: preparing, cancelled" in error.details

    def test_transition_from_terminal(self):
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            OrderStateMachine.validate_transition(OrderStatus.CANCELLED, OrderStatus.PENDING)

        assert "is terminal" in exc_info.value.details

    def test_without_exception(self):
        result = OrderStateMachine.validate_transition(
            OrderStatus.DELIVERING, OrderStatus.PAID, raise_exception=False
        )
        assert not result.is_valid
        assert "Cannot change status" in result.error_message

    def test_unknown_target_status(self):
        with pytest.raises(ValidationError) as exc_info:
            OrderStateMachine.validate_transition(OrderStatus.PENDING, "refunded")

        assert not isinstance(exc_info.value, InvalidStateTransitionError)
        assert "Allowed values" in exc_info.value.details


class TestValidateCancellation:
    """Тесты отмены"""

    @pytest.mark.parametrize("state", [OrderStatus.PENDING, OrderStatus.PAID])
    def test_cancellable(self, state):
        assert OrderStateMachine.validate_cancellation(state).is_valid

    @pytest.mark.parametrize(
        "state",
        [
            OrderStatus.PREPARING,
            OrderStatus.DELIVERING,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        ],
    )
    def test_not_cancellable(self, state):
        with pytest.raises(ValidationError, match="Cannot cancel order"):
            OrderStateMachine.validate_cancellation(state)

    def test_cancellation_check_is_independent_of_graph(self, monkeypatch):
        """Тест: даже если граф разрешит отмену из delivered, отдельная проверка её запретит"""
        transitions = dict(OrderStateMachine.TRANSITIONS)
        transitions[OrderStatus.DELIVERED] = frozenset({OrderStatus.CANCELLED})
        monkeypatch.setattr(OrderStateMachine, "TRANSITIONS", transitions)

        assert OrderStateMachine.can_transition(OrderStatus.DELIVERED, OrderStatus.CANCELLED)
        result = OrderStateMachine.validate_cancellation(
            OrderStatus.DELIVERED, raise_exception=False
        )
        assert not result.is_valid

    def test_cancellation_also_checks_graph(self, monkeypatch):
        """Тест: обратное - отмена из paid запрещена, если ребра нет в графе"""
        transitions = dict(OrderStateMachine.TRANSITIONS)
        transitions[OrderStatus.PAID] = frozenset({OrderStatus.PREPARING})
        monkeypatch.setattr(OrderStateMachine, "TRANSITIONS", transitions)

        with pytest.raises(InvalidStateTransitionError):
            OrderStateMachine.validate_cancellation(OrderStatus.PAID)


def test_transition_description():
    assert (
        OrderStateMachine.get_transition_description(OrderStatus.PENDING, OrderStatus.PAID)
        == "Order paid"
    )
    assert (
        OrderStateMachine.get_transition_description(OrderStatus.PAID, OrderStatus.PENDING)
        == "Transition from Paid to Pending"
    )
