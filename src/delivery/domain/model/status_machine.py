"""Order status state machine.

The tables here are the single description of how an order moves. Two
readers use them: the operator board, which offers forward transitions and
cancellation, and the customer tracker, which only renders progress along
the branch that matches the order's delivery type.

    New -> Awaiting payment -> Preparing -> Out for delivery -> Delivered
                                         \\-> Ready for pickup -/

``Cancelled`` is reachable from every non-terminal state. Both fulfillment
branches stay valid statuses for every order; the operator is simply never
offered the branch that does not match the order.
"""

from __future__ import annotations

from dataclasses import dataclass

from delivery.domain.model.order import DeliveryType, Order, OrderStatus

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# Statuses the live "new order" query listens for.
INCOMING_STATUSES = frozenset({OrderStatus.NEW, OrderStatus.AWAITING_PAYMENT})

_BRANCH = {
    DeliveryType.DELIVERY: OrderStatus.OUT_FOR_DELIVERY,
    DeliveryType.PICKUP: OrderStatus.READY_FOR_PICKUP,
}


def fulfillment_path(delivery_type: DeliveryType) -> tuple[OrderStatus, ...]:
    """Forward sequence of statuses for an order of *delivery_type*."""
    return (
        OrderStatus.NEW,
        OrderStatus.AWAITING_PAYMENT,
        OrderStatus.PREPARING,
        _BRANCH[delivery_type],
        OrderStatus.DELIVERED,
    )


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def operator_actions(order: Order) -> list[OrderStatus]:
    """Statuses the operator may move *order* to, in menu order."""
    if is_terminal(order.status):
        return []
    path = fulfillment_path(order.delivery_type)
    if order.status in path:
        forward = list(path[path.index(order.status) + 1:])
    else:
        # Wrong-branch status written by another client: resume after Preparing.
        forward = list(path[path.index(OrderStatus.PREPARING) + 1:])
    return forward + [OrderStatus.CANCELLED]


def can_transition(order: Order, target: OrderStatus) -> bool:
    return target in operator_actions(order)


# ---------------------------------------------------------------------------
# Customer tracker
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrackerStep:
    status: OrderStatus
    label: str


@dataclass(frozen=True)
class TrackerPosition:
    steps: tuple[TrackerStep, ...]
    current_step: int | None
    is_cancelled: bool = False


_STEP_LABELS = {
    OrderStatus.NEW: "Received",
    OrderStatus.PREPARING: "Preparing",
    OrderStatus.OUT_FOR_DELIVERY: "On the way",
    OrderStatus.READY_FOR_PICKUP: "Ready for pickup",
    OrderStatus.DELIVERED: "Delivered",
}


def tracker_steps(delivery_type: DeliveryType) -> tuple[TrackerStep, ...]:
    statuses = (
        OrderStatus.NEW,
        OrderStatus.PREPARING,
        _BRANCH[delivery_type],
        OrderStatus.DELIVERED,
    )
    return tuple(TrackerStep(status, _STEP_LABELS[status]) for status in statuses)


def tracker_position(order: Order) -> TrackerPosition:
    steps = tracker_steps(order.delivery_type)
    if order.status is OrderStatus.CANCELLED:
        return TrackerPosition(steps=steps, current_step=None, is_cancelled=True)

    status = order.status
    if status is OrderStatus.AWAITING_PAYMENT:
        status = OrderStatus.NEW
    elif status in _BRANCH.values() and status is not _BRANCH[order.delivery_type]:
        status = OrderStatus.PREPARING

    index = [step.status for step in steps].index(status)
    return TrackerPosition(steps=steps, current_step=index)


# ---------------------------------------------------------------------------
# Operator board tabs
# ---------------------------------------------------------------------------

BOARD_TABS: dict[str, tuple[OrderStatus, ...]] = {
    "All": tuple(OrderStatus),
    "New": (OrderStatus.NEW, OrderStatus.AWAITING_PAYMENT),
    "Preparing": (OrderStatus.PREPARING,),
    "Ready": (OrderStatus.READY_FOR_PICKUP, OrderStatus.OUT_FOR_DELIVERY),
    "Finished": (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
}
