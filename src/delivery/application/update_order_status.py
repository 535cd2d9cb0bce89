"""Application service: operator status change.

Only the transitions on the operator menu are accepted, which keeps the
wrong fulfillment branch out of reach for each order. The store itself
would accept any status; the restriction lives here.
"""

from __future__ import annotations

import structlog

from delivery.application.dto import StatusChangeDTO
from delivery.application.error_channel import ErrorChannel
from delivery.domain.exceptions import EntityNotFoundError, StorePermissionError, ValidationError
from delivery.domain.model.order import OrderStatus
from delivery.domain.model.status_machine import operator_actions
from delivery.domain.repository.order_store import OrderStore
from delivery.domain.repository.tenant_settings_reader import TenantSettingsReader
from delivery.domain.service.messaging import customer_status_message, whatsapp_link

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_store: OrderStore,
        tenant_settings: TenantSettingsReader,
        errors: ErrorChannel,
    ) -> None:
        self._order_store = order_store
        self._tenant_settings = tenant_settings
        self._errors = errors

    def handle(self, tenant_id: str, order_id: str, status: OrderStatus) -> StatusChangeDTO:
        order = self._order_store.get_order(tenant_id, order_id)
        if order is None:
            raise EntityNotFoundError(f"Order '{order_id}' not found")

        allowed = operator_actions(order)
        if status not in allowed:
            raise ValidationError(
                f"Cannot move order {order.short_code} from '{order.status.value}' "
                f"to '{status.value}'"
            )

        try:
            self._order_store.update_order_status(tenant_id, order_id, status)
        except StorePermissionError as exc:
            self._errors.emit(exc)
            raise
        logger.info(
            "order.status_changed",
            tenant_id=tenant_id,
            order_id=order_id,
            previous=order.status.value,
            status=status.value,
        )

        settings = self._tenant_settings.get(tenant_id)
        updated = order.with_status(status)
        message = customer_status_message(updated, settings.message_templates)
        link = None
        if message is not None:
            link = whatsapp_link(updated.customer.phone, message, settings.whatsapp_country_code)
        return StatusChangeDTO(
            order_id=order_id,
            status=status.value,
            customer_message=message,
            customer_link=link,
        )
