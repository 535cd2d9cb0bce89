"""Application service: Place Order (checkout) use case.

Validates the checkout form in a fixed order, resolves the delivery fee,
and writes the order as one document. The cart is cleared only after the
store acknowledges the write; a failed write leaves it as it was so the
customer can try again.

Validation order:
1. store is open now
2. customer name
3. customer phone
4. payment method is one the tenant accepts
5. street, number and neighborhood for delivery orders
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

import structlog

from delivery.application.cart_aggregator import CartAggregator
from delivery.application.dto import AddressInput, CheckoutRequest, PlacedOrderDTO
from delivery.application.error_channel import ErrorChannel
from delivery.domain.exceptions import (
    StoreClosedError,
    StoreError,
    StorePermissionError,
    SubmissionError,
    ValidationError,
)
from delivery.domain.model.order import (
    PICKUP_ADDRESS,
    Customer,
    DeliveryType,
    Order,
    OrderLineItem,
)
from delivery.domain.model.tenant import TenantSettings
from delivery.domain.model.value_objects import Money
from delivery.domain.repository.catalog_reader import CatalogReader
from delivery.domain.repository.order_store import OrderStore
from delivery.domain.repository.tenant_settings_reader import TenantSettingsReader
from delivery.domain.service.delivery_fee import resolve_delivery_fee
from delivery.domain.service.messaging import vendor_order_message, whatsapp_link

logger = structlog.get_logger(__name__)

ANONYMOUS_CUSTOMER_ID = "anonymous"


def capitalize_name(name: str) -> str:
    return " ".join(word.capitalize() for word in name.strip().split())


def compose_address(address: AddressInput) -> str:
    text = f"{address.street.strip()}, {address.number.strip()} - {address.neighborhood.strip()}"
    if address.complement.strip():
        text += f" ({address.complement.strip()})"
    return text


class PlaceOrderHandler:

    def __init__(
        self,
        order_store: OrderStore,
        catalog: CatalogReader,
        tenant_settings: TenantSettingsReader,
        cart: CartAggregator,
        errors: ErrorChannel,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._order_store = order_store
        self._catalog = catalog
        self._tenant_settings = tenant_settings
        self._cart = cart
        self._errors = errors
        self._clock = clock

    def handle(self, request: CheckoutRequest) -> PlacedOrderDTO:
        settings = self._tenant_settings.get(request.tenant_id)
        delivery_type = self._validate(request, settings)

        if self._cart.is_empty:
            raise ValidationError("Your cart is empty")

        quote = resolve_delivery_fee(
            self._catalog.list_delivery_zones(request.tenant_id),
            delivery_type,
            request.address.neighborhood,
        )
        address = (
            compose_address(request.address)
            if delivery_type is DeliveryType.DELIVERY
            else PICKUP_ADDRESS
        )
        items = [OrderLineItem.from_cart_item(item) for item in self._cart.items]
        order = Order.create(
            tenant_id=request.tenant_id,
            customer=Customer(
                id=request.customer_id or ANONYMOUS_CUSTOMER_ID,
                name=capitalize_name(request.customer_name),
                phone=request.customer_phone.strip(),
            ),
            delivery_type=delivery_type,
            delivery_address=address,
            delivery_fee=quote.fee,
            payment_method=self._payment_tag(request),
            items=items,
            estimated_minutes=quote.estimated_minutes,
        )

        try:
            order_id = self._order_store.create_order(request.tenant_id, order)
        except StoreError as exc:
            if isinstance(exc, StorePermissionError):
                self._errors.emit(exc)
            logger.warning("checkout.submit_failed", tenant_id=request.tenant_id, error=str(exc))
            raise SubmissionError(
                "Your order could not be sent. Please try again."
            ) from exc

        self._cart.clear()
        placed = self._read_back(request.tenant_id, order_id, order)
        logger.info(
            "checkout.order_placed",
            tenant_id=request.tenant_id,
            order_id=order_id,
            total=str(placed.total_amount),
        )

        message = vendor_order_message(placed)
        return PlacedOrderDTO(
            order_id=order_id,
            short_code=order_id[:6].upper(),
            total=str(placed.total_amount),
            delivery_fee=str(placed.delivery_fee),
            estimated_minutes=placed.estimated_minutes,
            vendor_message=message,
            vendor_link=whatsapp_link(settings.phone, message, settings.whatsapp_country_code),
        )

    def _read_back(self, tenant_id: str, order_id: str, order: Order) -> Order:
        """The stored order, or the submitted one when the re-read fails.

        The write is already acknowledged at this point, so a failing read
        must not turn a placed order into an error.
        """
        try:
            stored = self._order_store.get_order(tenant_id, order_id)
        except StoreError as exc:
            logger.warning(
                "checkout.read_back_failed",
                tenant_id=tenant_id,
                order_id=order_id,
                error=str(exc),
            )
            stored = None
        return stored or replace(order, id=order_id, tenant_id=tenant_id)

    # --- Validation -----------------------------------------------------------

    def _validate(self, request: CheckoutRequest, settings: TenantSettings) -> DeliveryType:
        if not settings.is_open_at(self._clock()):
            raise StoreClosedError(settings.closed_reason())

        if not request.customer_name.strip():
            raise ValidationError("Please enter your name")

        if not request.customer_phone.strip():
            raise ValidationError("Please enter your phone number")

        if request.payment_method not in settings.payment_methods.enabled():
            raise ValidationError("Please select a payment method")

        try:
            delivery_type = DeliveryType(request.delivery_type)
        except ValueError as exc:
            raise ValidationError(
                f"Unknown delivery type '{request.delivery_type}'"
            ) from exc

        if delivery_type is DeliveryType.DELIVERY:
            address = request.address
            if not (address.street.strip() and address.number.strip() and address.neighborhood.strip()):
                raise ValidationError(
                    "Please fill in street, number and neighborhood for delivery"
                )
        return delivery_type

    @staticmethod
    def _payment_tag(request: CheckoutRequest) -> str:
        if request.payment_method == "Cash" and request.cash_change_for:
            change_for = Money.of(request.cash_change_for)
            return f"Cash (change for {change_for})"
        return request.payment_method
