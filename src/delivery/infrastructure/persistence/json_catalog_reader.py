"""JSON-file-backed implementation of CatalogReader.

Reads ``<root>/<tenant id>/products.json`` and ``delivery_zones.json``.
Missing files read as an empty catalog.
"""

from __future__ import annotations

import json
from pathlib import Path

from delivery.domain.exceptions import StoreError, StorePermissionError
from delivery.domain.model.product import Product
from delivery.domain.model.tenant import DeliveryZone
from delivery.domain.repository.catalog_reader import CatalogReader
from delivery.infrastructure.persistence.codec import money_from_raw, product_from_raw


class JsonCatalogReader(CatalogReader):

    def __init__(self, root: Path) -> None:
        self._root = root

    # --- CatalogReader interface ----------------------------------------------

    def get_product(self, tenant_id: str, product_id: str) -> Product | None:
        for product in self._products(tenant_id):
            if product.id == product_id:
                return product
        return None

    def list_active_products(self, tenant_id: str) -> list[Product]:
        return [p for p in self._products(tenant_id) if p.is_active]

    def list_delivery_zones(self, tenant_id: str) -> list[DeliveryZone]:
        return [
            DeliveryZone(
                neighborhood=raw["neighborhood"],
                delivery_fee=money_from_raw(raw["delivery_fee"]),
                delivery_time=int(raw.get("delivery_time", 0)),
                is_active=raw.get("is_active", True),
            )
            for raw in self._read(tenant_id, "delivery_zones.json")
        ]

    # --- Serialization helpers ------------------------------------------------

    def _products(self, tenant_id: str) -> list[Product]:
        return [product_from_raw(raw) for raw in self._read(tenant_id, "products.json")]

    def _read(self, tenant_id: str, name: str) -> list[dict]:
        path = self._root / tenant_id / name
        try:
            if not path.exists():
                return []
            return json.loads(path.read_text(encoding="utf-8"))
        except PermissionError as exc:
            raise StorePermissionError(str(path), "get") from exc
        except (OSError, ValueError) as exc:
            raise StoreError(f"Cannot read {path}: {exc}") from exc
