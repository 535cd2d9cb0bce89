"""Device-local cart snapshot stored as a JSON file.

Only one cart per tenant is kept on a device. A file this version cannot
read yields an empty cart; the old content is overwritten on the next save.
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from delivery.domain.exceptions import DomainException
from delivery.domain.model.cart import CartItem
from delivery.domain.repository.cart_storage import CartStorage
from delivery.infrastructure.persistence.codec import (
    money_from_raw,
    money_to_raw,
    product_from_raw,
    product_to_raw,
    variant_from_raw,
    variant_to_raw,
)

logger = structlog.get_logger(__name__)


class JsonCartStorage(CartStorage):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def load(self) -> list[CartItem]:
        if not self._file_path.exists():
            return []
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
            return [
                CartItem(
                    id=item["id"],
                    product=product_from_raw(item["product"]),
                    quantity=item["quantity"],
                    final_price=money_from_raw(item["final_price"]),
                    notes=item.get("notes", ""),
                    selected_variants=tuple(
                        variant_from_raw(v) for v in item.get("selected_variants", [])
                    ),
                )
                for item in raw
            ]
        except (
            ValueError, ArithmeticError, KeyError, TypeError, AttributeError, DomainException
        ) as exc:
            logger.warning("cart.snapshot_discarded", path=str(self._file_path), error=str(exc))
            return []

    def save(self, items: list[CartItem]) -> None:
        raw = [
            {
                "id": item.id,
                "product": product_to_raw(item.product),
                "quantity": item.quantity,
                "final_price": money_to_raw(item.final_price),
                "notes": item.notes,
                "selected_variants": [variant_to_raw(v) for v in item.selected_variants],
            }
            for item in items
        ]
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(json.dumps(raw, indent=2) + "\n", encoding="utf-8")
