"""Order status state machine.

Orders move strictly forward through ``pending -> served -> paid``. There is
no transition out of ``paid`` and no cancelled state.
"""

from __future__ import annotations

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    SERVED = "served"
    PAID = "paid"

    @property
    def rank(self) -> int:
        return _ORDERING.index(self)

    @property
    def is_terminal(self) -> bool:
        return self is OrderStatus.PAID


_ORDERING = (OrderStatus.PENDING, OrderStatus.SERVED, OrderStatus.PAID)

INITIAL_STATUS = OrderStatus.PENDING


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """True only when ``target`` is strictly after ``current``."""
    return OrderStatus(target).rank > OrderStatus(current).rank


def advance(current: OrderStatus, target: OrderStatus) -> OrderStatus:
    """Return the status after attempting ``current -> target``.

    A move that would not go forward leaves the status unchanged.
    """
    current = OrderStatus(current)
    if can_transition(current, target):
        return OrderStatus(target)
    return current
