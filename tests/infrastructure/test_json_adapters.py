"""Tests for the JSON catalog, tenant settings and cart adapters."""

import json
from datetime import datetime, timezone

from delivery.domain.model.cart import CartItem
from delivery.domain.model.product import Product, SelectedVariant
from delivery.domain.model.value_objects import Money
from delivery.infrastructure.persistence.json_cart_storage import JsonCartStorage
from delivery.infrastructure.persistence.json_catalog_reader import JsonCatalogReader
from delivery.infrastructure.persistence.json_tenant_settings import JsonTenantSettingsReader


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestJsonCatalogReader:

    def test_products_and_variants(self, tmp_path):
        _write(tmp_path / "t1" / "products.json", [
            {
                "id": "pizza",
                "name": "Pizza",
                "price": "40.00",
                "variants": [
                    {"name": "Size", "min": 1, "max": 1, "items": [
                        {"name": "Large", "price": "10.00"},
                    ]},
                ],
            },
            {"id": "soup", "name": "Soup", "price": "12", "is_active": False},
        ])
        catalog = JsonCatalogReader(tmp_path)
        assert [p.id for p in catalog.list_active_products("t1")] == ["pizza"]
        pizza = catalog.get_product("t1", "pizza")
        assert pizza.find_group("Size").find_item("Large").price == Money.of("10")
        assert catalog.get_product("t1", "soup").is_active is False

    def test_delivery_zones(self, tmp_path):
        _write(tmp_path / "t1" / "delivery_zones.json", [
            {"neighborhood": "Centro", "delivery_fee": "5.00", "delivery_time": 30},
        ])
        zone = JsonCatalogReader(tmp_path).list_delivery_zones("t1")[0]
        assert zone.delivery_fee == Money.of("5.00")
        assert zone.is_active

    def test_missing_files_are_empty(self, tmp_path):
        catalog = JsonCatalogReader(tmp_path)
        assert catalog.list_active_products("t1") == []
        assert catalog.list_delivery_zones("t1") == []


class TestJsonTenantSettingsReader:

    def test_defaults_without_file(self, tmp_path):
        settings = JsonTenantSettingsReader(tmp_path).get("t1")
        assert settings.tenant_id == "t1"
        assert settings.sound_notification_enabled
        assert not settings.auto_print_enabled

    def test_sparse_document(self, tmp_path):
        _write(tmp_path / "t1" / "settings.json", {
            "name": "Casa da Pizza",
            "auto_print_enabled": True,
            "business_hours": {
                "saturday": {"is_open": True, "open_time": "10:00", "close_time": "14:00"},
            },
            "payment_methods": {"debit": True},
        })
        settings = JsonTenantSettingsReader(tmp_path).get("t1")
        assert settings.name == "Casa da Pizza"
        assert settings.auto_print_enabled
        assert settings.business_hours.saturday.is_open
        assert settings.business_hours.monday.open_time == "09:00"
        assert "Debit card" in settings.payment_methods.enabled()


class TestJsonCartStorage:

    def test_round_trip(self, tmp_path):
        product = Product(id="pizza", name="Pizza", price=Money.of("40.00"))
        item = CartItem.create(
            product,
            created_at=datetime(2024, 5, 6, tzinfo=timezone.utc),
            quantity=2,
            notes="half olives",
            variants=(SelectedVariant("Size", "Large", Money.of("10.00")),),
        )
        storage = JsonCartStorage(tmp_path / "carts" / "t1.json")
        storage.save([item])
        assert storage.load() == [item]

    def test_missing_file_is_empty(self, tmp_path):
        assert JsonCartStorage(tmp_path / "cart.json").load() == []

    def test_corrupt_file_is_empty(self, tmp_path):
        path = tmp_path / "cart.json"
        path.write_text("not json at all")
        assert JsonCartStorage(path).load() == []

    def test_incompatible_shape_is_empty(self, tmp_path):
        path = tmp_path / "cart.json"
        path.write_text(json.dumps([{"id": "x", "quantity": "lots"}]))
        assert JsonCartStorage(path).load() == []
