"""Unit tests for order status transitions and the customer tracker."""

from dataclasses import replace

import pytest

from delivery.domain.model.order import Customer, DeliveryType, Order, OrderLineItem, OrderStatus
from delivery.domain.model.status_machine import (
    BOARD_TABS,
    can_transition,
    fulfillment_path,
    operator_actions,
    tracker_position,
)
from delivery.domain.model.value_objects import Money, Quantity


def _order(delivery_type: DeliveryType, status: OrderStatus = OrderStatus.NEW) -> Order:
    order = Order.create(
        tenant_id="t1",
        customer=Customer(id="c1", name="Alice"),
        delivery_type=delivery_type,
        delivery_address="Rua A, 1 - Centro",
        delivery_fee=Money.zero(),
        payment_method="Cash",
        items=[OrderLineItem("p1", "Burger", Quantity(1), Money.of("20"))],
    )
    return replace(order, id="abc123", status=status)


class TestOperatorActions:

    def test_delivery_order_never_offered_pickup_branch(self):
        for status in fulfillment_path(DeliveryType.DELIVERY):
            actions = operator_actions(_order(DeliveryType.DELIVERY, status))
            assert OrderStatus.READY_FOR_PICKUP not in actions

    def test_pickup_order_never_offered_delivery_branch(self):
        for status in fulfillment_path(DeliveryType.PICKUP):
            actions = operator_actions(_order(DeliveryType.PICKUP, status))
            assert OrderStatus.OUT_FOR_DELIVERY not in actions

    def test_preparing_delivery_moves_forward_or_cancels(self):
        actions = operator_actions(_order(DeliveryType.DELIVERY, OrderStatus.PREPARING))
        assert actions == [
            OrderStatus.OUT_FOR_DELIVERY,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        ]

    @pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_orders_have_no_actions(self, status):
        assert operator_actions(_order(DeliveryType.PICKUP, status)) == []

    def test_wrong_branch_status_resumes_after_preparing(self):
        order = _order(DeliveryType.PICKUP, OrderStatus.OUT_FOR_DELIVERY)
        assert operator_actions(order) == [
            OrderStatus.READY_FOR_PICKUP,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        ]

    def test_cannot_move_backwards(self):
        order = _order(DeliveryType.DELIVERY, OrderStatus.OUT_FOR_DELIVERY)
        assert not can_transition(order, OrderStatus.PREPARING)


class TestTracker:

    @pytest.mark.parametrize("status", list(OrderStatus))
    def test_pickup_never_shows_on_the_way(self, status):
        position = tracker_position(_order(DeliveryType.PICKUP, status))
        assert "On the way" not in [s.label for s in position.steps]

    @pytest.mark.parametrize("status", list(OrderStatus))
    def test_delivery_never_shows_ready_for_pickup(self, status):
        position = tracker_position(_order(DeliveryType.DELIVERY, status))
        assert "Ready for pickup" not in [s.label for s in position.steps]

    def test_awaiting_payment_counts_as_received(self):
        position = tracker_position(_order(DeliveryType.DELIVERY, OrderStatus.AWAITING_PAYMENT))
        assert position.current_step == 0

    def test_branch_step_index(self):
        position = tracker_position(_order(DeliveryType.PICKUP, OrderStatus.READY_FOR_PICKUP))
        assert position.current_step == 2
        assert position.steps[2].label == "Ready for pickup"

    def test_cancelled_has_no_current_step(self):
        position = tracker_position(_order(DeliveryType.DELIVERY, OrderStatus.CANCELLED))
        assert position.is_cancelled
        assert position.current_step is None


class TestBoardTabs:

    def test_every_status_is_on_exactly_one_specific_tab(self):
        specific = [s for tab, statuses in BOARD_TABS.items() if tab != "All" for s in statuses]
        assert sorted(s.value for s in specific) == sorted(s.value for s in OrderStatus)
