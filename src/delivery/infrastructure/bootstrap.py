"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import cached_property
from pathlib import Path

from delivery.application.cart_aggregator import CartAggregator
from delivery.application.error_channel import ErrorChannel
from delivery.application.notification_engine import NotificationEngine
from delivery.infrastructure.config import Settings
from delivery.infrastructure.persistence.json_cart_storage import JsonCartStorage
from delivery.infrastructure.persistence.json_catalog_reader import JsonCatalogReader
from delivery.infrastructure.persistence.json_order_store import JsonOrderStore
from delivery.infrastructure.persistence.json_tenant_settings import JsonTenantSettingsReader
from delivery.infrastructure.terminal.adapters import (
    ConsoleAlertSink,
    HtmlPrintSurface,
    TerminalChime,
)


class Container:
    """Lazily built adapters for one CLI invocation against one tenant."""

    def __init__(self, settings: Settings, tenant_id: str) -> None:
        self.settings = settings
        self.tenant_id = tenant_id

    @property
    def _tenants_dir(self) -> Path:
        return self.settings.data_dir / "tenants"

    @cached_property
    def order_store(self) -> JsonOrderStore:
        return JsonOrderStore(self._tenants_dir)

    @cached_property
    def catalog(self) -> JsonCatalogReader:
        return JsonCatalogReader(self._tenants_dir)

    @cached_property
    def tenant_settings(self) -> JsonTenantSettingsReader:
        return JsonTenantSettingsReader(self._tenants_dir)

    @cached_property
    def errors(self) -> ErrorChannel:
        return ErrorChannel()

    @cached_property
    def printer(self) -> HtmlPrintSurface:
        return HtmlPrintSurface(self.settings.data_dir / "print")

    def cart(self) -> CartAggregator:
        storage = JsonCartStorage(self.settings.data_dir / "carts" / f"{self.tenant_id}.json")
        return CartAggregator(storage)

    def notification_engine(self) -> NotificationEngine:
        return NotificationEngine(
            tenant_id=self.tenant_id,
            order_store=self.order_store,
            settings=self.tenant_settings.get(self.tenant_id),
            chime=TerminalChime(),
            alerts=ConsoleAlertSink(),
            printer=self.printer,
            errors=self.errors,
            print_delay=self.settings.print_delay,
            alert_duration=self.settings.alert_seconds,
        )
