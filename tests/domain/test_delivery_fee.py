"""Unit tests for delivery fee resolution."""

from delivery.domain.model.order import DeliveryType
from delivery.domain.model.tenant import DeliveryZone
from delivery.domain.model.value_objects import Money
from delivery.domain.service.delivery_fee import resolve_delivery_fee

ZONES = [
    DeliveryZone("Centro", Money.of("5.00"), 30),
    DeliveryZone("Jardins", Money.of("9.00"), 45, is_active=False),
]


class TestResolveDeliveryFee:

    def test_matching_active_zone(self):
        quote = resolve_delivery_fee(ZONES, DeliveryType.DELIVERY, "Centro")
        assert quote.fee == Money.of("5.00")
        assert quote.estimated_minutes == 30

    def test_inactive_zone_costs_nothing(self):
        quote = resolve_delivery_fee(ZONES, DeliveryType.DELIVERY, "Jardins")
        assert quote.fee.is_zero
        assert quote.estimated_minutes is None

    def test_unknown_neighborhood_costs_nothing(self):
        assert resolve_delivery_fee(ZONES, DeliveryType.DELIVERY, "Moema").fee.is_zero

    def test_pickup_costs_nothing(self):
        assert resolve_delivery_fee(ZONES, DeliveryType.PICKUP, "Centro").fee.is_zero
