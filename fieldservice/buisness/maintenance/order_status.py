"""
Service order state machine.

Orders start ``open`` and move to ``closed`` exactly once. ``closed`` is
terminal: no transition leaves it, including closed -> closed.
"""

from enum import Enum

from fieldservice.buisness.errors import AlreadyClosedError, InvalidTransitionError


class OrderStatus(str, Enum):
    OPEN = 'open'
    CLOSED = 'closed'

    def __str__(self):
        return self.value


ALLOWED_TRANSITIONS = {
    OrderStatus.OPEN: frozenset({OrderStatus.CLOSED}),
    OrderStatus.CLOSED: frozenset(),
}


def transition(current: OrderStatus, target: OrderStatus, order_id=None) -> OrderStatus:
    """
    Validate a status change and return the new status.

    Raises:
        AlreadyClosedError: current status is ``closed``
        InvalidTransitionError: any other transition not in ALLOWED_TRANSITIONS
    """
    current = OrderStatus(current)
    target = OrderStatus(target)

    if target in ALLOWED_TRANSITIONS[current]:
        return target
    if current is OrderStatus.CLOSED:
        raise AlreadyClosedError(order_id)
    raise InvalidTransitionError(current.value, target.value)
