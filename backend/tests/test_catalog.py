"""
Catalog and seed tests.

Verifies:
- Product ids come from the scan code when one is given
- Opening stock goes through the ledger
- Scan code lookup strips input and never matches an empty code
- Bootstrap data is idempotent
"""

from decimal import Decimal

import pytest

from orionpos.errors import DuplicateScanCode, UnknownClient, UnknownProduct, ValidationError
from orionpos.services import memory_services
from orionpos.services.seed_service import DEMO_PRODUCTS, seed_defaults
from conftest import COFFEE_ID, MILK_ID, RICE_ID, config_dict


class TestRegisterProduct:
    def test_scan_code_becomes_id(self, pos):
        product = pos.catalog.register_product(
            " Black Beans ", "8.49", scan_code=" 7896006711117 ", group="Grains", stock_minimum=4, initial_stock=20, actor_id="mgr"
        )

        assert product.id == "7896006711117"
        assert product.scan_code == "7896006711117"
        assert product.name == "Black Beans"
        assert product.unit_price == Decimal("8.49")
        assert product.stock_quantity == 20

        [movement] = pos.ledger.movements_for_product(product.id)
        assert movement.reason == "initial-stock"
        assert movement.kind == "inbound"
        assert movement.quantity == 20
        assert movement.note == "Initial stock"
        assert movement.actor_id == "mgr"

    def test_generated_id_without_scan_code(self, pos):
        product = pos.catalog.register_product("Bread roll", Decimal("0.75"))

        assert len(product.id) == 12
        assert product.scan_code == ""
        assert product.stock_quantity == 0
        assert pos.ledger.movements_for_product(product.id) == []

    def test_duplicate_scan_code(self, pos):
        with pytest.raises(DuplicateScanCode) as exc:
            pos.catalog.register_product("Other milk", "4.00", scan_code=MILK_ID)
        assert exc.value.details["product_id"] == MILK_ID

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"unit_price": "-0.01"},
            {"unit_price": "abc"},
            {"unit_price": "1", "stock_minimum": -1},
            {"unit_price": "1", "initial_stock": -2},
            {"unit_price": "1", "initial_stock": 1.5},
        ],
    )
    def test_invalid_values(self, pos, kwargs):
        with pytest.raises(ValidationError):
            pos.catalog.register_product("Thing", **kwargs)
        assert len(pos.catalog.list_products()) == 3

    def test_name_is_required(self, pos):
        with pytest.raises(ValidationError):
            pos.catalog.register_product("  ", "1.00")

    def test_products_without_scan_code_can_coexist(self, pos):
        pos.catalog.register_product("Loose apples", "3.20")
        pos.catalog.register_product("Loose pears", "4.10")
        assert len(pos.catalog.list_products()) == 5


class TestLookups:
    def test_scan_code_is_stripped(self, pos):
        assert pos.catalog.find_product_by_scan_code(f"\t{COFFEE_ID} ").id == COFFEE_ID

    @pytest.mark.parametrize("code", ["", "   ", None])
    def test_empty_code_never_matches(self, pos, code):
        pos.catalog.register_product("Loose apples", "3.20")
        assert pos.catalog.find_product_by_scan_code(code) is None

    def test_unknown_code(self, pos):
        assert pos.catalog.find_product_by_scan_code("123") is None

    def test_groups_and_filter(self, pos):
        assert pos.catalog.list_groups() == ["Beverages", "Dairy", "Grains"]
        assert [p.id for p in pos.catalog.list_products("Grains")] == [RICE_ID]
        assert len(pos.catalog.list_products()) == 3

    def test_require_product(self, pos):
        assert pos.catalog.require_product(MILK_ID).name == "Whole Milk"
        with pytest.raises(UnknownProduct):
            pos.catalog.require_product("missing")

    def test_update_price(self, pos):
        updated = pos.catalog.update_price(RICE_ID, "24.50")
        assert updated.unit_price == Decimal("24.50")
        assert pos.catalog.get_product(RICE_ID).stock_quantity == 35

    def test_update_price_rejects_negative(self, pos):
        with pytest.raises(ValidationError):
            pos.catalog.update_price(RICE_ID, "-1")


class TestClients:
    def test_register_client(self, pos):
        client = pos.catalog.register_client(" Joao Souza ", phone="(11) 91234-5678")
        assert client.name == "Joao Souza"
        assert pos.catalog.get_client(client.id) == client

    def test_client_name_required(self, pos):
        with pytest.raises(ValidationError):
            pos.catalog.register_client("")

    def test_require_client(self, pos):
        assert pos.catalog.require_client("2").name == "Maria Silva"
        with pytest.raises(UnknownClient):
            pos.catalog.require_client("42")

    def test_ensure_default_client_is_idempotent(self):
        pos = memory_services(config=config_dict())

        first = pos.catalog.ensure_default_client("1")
        second = pos.catalog.ensure_default_client("1")

        assert first.name == "Final Consumer"
        assert second == first
        assert len(pos.catalog.list_clients()) == 1


class TestSeed:
    def test_seed_creates_demo_data_once(self):
        pos = memory_services(config=config_dict())

        created = seed_defaults(pos.catalog, demo=True)
        again = seed_defaults(pos.catalog, demo=True)

        assert created["clients"] == ["1", "2"]
        assert sorted(created["products"]) == sorted(p["scan_code"] for p in DEMO_PRODUCTS)
        assert again == {"clients": [], "products": []}
        assert len(pos.catalog.list_products()) == 3
        assert pos.catalog.get_product(MILK_ID).stock_quantity == 50
        assert len(pos.movements.list_all()) == 3

    def test_seed_without_demo(self):
        pos = memory_services(config=config_dict())

        created = seed_defaults(pos.catalog, default_client_id="walk-in")

        assert created == {"clients": ["walk-in"], "products": []}
        assert pos.catalog.list_products() == []
