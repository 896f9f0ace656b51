"""
Domain layer для бизнес-логики
"""

from app.domain.context import Identity, IdentityResolver, RequestContext, require_identity
from app.domain.order_state_machine import (
    InvalidStateTransitionError,
    OrderStateMachine,
    OrderStateTransitionResult,
)


__all__ = [
    "Identity",
    "IdentityResolver",
    "InvalidStateTransitionError",
    "OrderStateMachine",
    "OrderStateTransitionResult",
    "RequestContext",
    "require_identity",
]
