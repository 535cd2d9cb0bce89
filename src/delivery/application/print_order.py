"""Application service: print an order's receipt on demand."""

from __future__ import annotations

from delivery.application.ports import PrintSurface
from delivery.domain.exceptions import EntityNotFoundError
from delivery.domain.repository.order_store import OrderStore
from delivery.domain.repository.tenant_settings_reader import TenantSettingsReader
from delivery.domain.service.receipt import generate_receipt


class PrintOrderHandler:

    def __init__(
        self,
        order_store: OrderStore,
        tenant_settings: TenantSettingsReader,
        printer: PrintSurface,
    ) -> None:
        self._order_store = order_store
        self._tenant_settings = tenant_settings
        self._printer = printer

    def handle(self, tenant_id: str, order_id: str) -> str:
        """Send the receipt to the print surface and return the document."""
        order = self._order_store.get_order(tenant_id, order_id)
        if order is None:
            raise EntityNotFoundError(f"Order '{order_id}' not found")
        html = generate_receipt(order, self._tenant_settings.get(tenant_id).display_info)
        self._printer.print_document(html)
        return html
