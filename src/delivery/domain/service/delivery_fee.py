"""Domain service: delivery fee resolution.

The fee comes from the tenant's active delivery zone whose neighborhood
matches the customer's address. No match, or a pickup order, costs
nothing to deliver.
"""

from __future__ import annotations

from dataclasses import dataclass

from delivery.domain.model.order import DeliveryType
from delivery.domain.model.tenant import DeliveryZone
from delivery.domain.model.value_objects import Money


@dataclass(frozen=True)
class FeeQuote:
    fee: Money
    zone: DeliveryZone | None = None

    @property
    def estimated_minutes(self) -> int | None:
        return self.zone.delivery_time if self.zone else None


def resolve_delivery_fee(
    zones: list[DeliveryZone],
    delivery_type: DeliveryType,
    neighborhood: str,
) -> FeeQuote:
    if delivery_type is not DeliveryType.DELIVERY or not neighborhood.strip():
        return FeeQuote(fee=Money.zero())

    for zone in zones:
        if zone.is_active and zone.matches(neighborhood):
            return FeeQuote(fee=zone.delivery_fee, zone=zone)
    return FeeQuote(fee=Money.zero())
