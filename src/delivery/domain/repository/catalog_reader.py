"""Read-only access to a tenant's catalog and delivery zones."""

from __future__ import annotations

from abc import ABC, abstractmethod

from delivery.domain.model.product import Product
from delivery.domain.model.tenant import DeliveryZone


class CatalogReader(ABC):

    @abstractmethod
    def get_product(self, tenant_id: str, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_active_products(self, tenant_id: str) -> list[Product]:
        """Return the products currently offered on the menu."""

    @abstractmethod
    def list_delivery_zones(self, tenant_id: str) -> list[DeliveryZone]:
        """Return every delivery zone, active or not."""
