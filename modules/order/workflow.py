"""
Order Module - Status Workflow
================================
The one transition table for the order lifecycle:

    pending → confirmed → processing → shipped → delivered
       ↘          ↘            ↘                      ↘
        cancelled  cancelled   cancelled              refunded

cancelled and refunded are terminal; delivered only exits to refunded.

The remote API is the authority. This table decides which vendor actions
are offered and blocks illegal requests before they are sent; a rejection
from the server is still surfaced as an error.
"""

from typing import Dict, FrozenSet, List, Union

from modules.order.models import OrderStatus

S = OrderStatus

TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    S.PENDING: frozenset({S.CONFIRMED, S.CANCELLED}),
    S.CONFIRMED: frozenset({S.PROCESSING, S.CANCELLED}),
    S.PROCESSING: frozenset({S.SHIPPED, S.CANCELLED}),
    S.SHIPPED: frozenset({S.DELIVERED}),
    S.DELIVERED: frozenset({S.REFUNDED}),
    S.CANCELLED: frozenset(),
    S.REFUNDED: frozenset(),
}

# Display order for offered actions
_LIFECYCLE = [S.PENDING, S.CONFIRMED, S.PROCESSING, S.SHIPPED, S.DELIVERED, S.CANCELLED, S.REFUNDED]

# Buyers may only stop an order before processing begins
BUYER_CANCELLABLE = frozenset({S.CONFIRMED})


def _as_status(value: Union[str, OrderStatus]) -> OrderStatus:
    return value if isinstance(value, OrderStatus) else OrderStatus(value)


def next_statuses(current: Union[str, OrderStatus]) -> List[OrderStatus]:
    """Statuses a vendor may move an order to, in lifecycle order. Unknown → []."""
    try:
        allowed = TRANSITIONS[_as_status(current)]
    except (KeyError, ValueError):
        return []
    return [s for s in _LIFECYCLE if s in allowed]


def can_transition(current: Union[str, OrderStatus], target: Union[str, OrderStatus]) -> bool:
    try:
        return _as_status(target) in TRANSITIONS[_as_status(current)]
    except (KeyError, ValueError):
        return False


def is_terminal(status: Union[str, OrderStatus]) -> bool:
    return not next_statuses(status)


def buyer_can_cancel(status: Union[str, OrderStatus]) -> bool:
    try:
        return _as_status(status) in BUYER_CANCELLABLE
    except ValueError:
        return False
