"""
Tests for JSON Schema contract validation and Catalog.from_payload

Checks:
1. Bundled schemas load and pass meta-validation
2. Valid / invalid catalog and cart server records
3. Catalog skips rejected records without hiding the rest
"""

import pytest
from jsonschema import ValidationError
from structlog.testing import capture_logs

from cart_engine.core.contracts import (
    CartLineContractValidator,
    ProductContractValidator,
    SchemaLoader,
    VendorContractValidator,
    validate_cart_line,
    validate_product,
    validate_vendor,
)
from cart_engine.core.domain import Catalog


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    """Tests for SchemaLoader"""

    @pytest.mark.parametrize("name", ["product", "vendor", "cart_line"])
    def test_bundled_schemas_load(self, name: str) -> None:
        schema = SchemaLoader().load_schema(name)
        assert schema["$id"] == f"{name}.json"

    def test_unknown_schema(self) -> None:
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("order")

    def test_missing_directory(self, tmp_path) -> None:
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "nope")


# =============================================================================
# RECORD VALIDATION
# =============================================================================


class TestProductContract:
    """Tests for product.json"""

    def test_valid(self) -> None:
        validate_product({"_id": "p-1", "price": 100, "stock": 5, "vendorId": "v-1"})

    def test_valid_with_vendor_object(self) -> None:
        validate_product({"_id": "p-1", "price": 100, "stock": 5, "vendor": {"_id": "v-1"}})

    def test_zero_price(self) -> None:
        assert not ProductContractValidator().is_valid({"_id": "p-1", "price": 0, "stock": 5, "vendorId": "v-1"})

    def test_missing_price(self) -> None:
        with pytest.raises(ValidationError):
            validate_product({"_id": "p-1", "stock": 5, "vendorId": "v-1"})

    def test_missing_vendor(self) -> None:
        assert not ProductContractValidator().is_valid({"_id": "p-1", "price": 100, "stock": 5})

    def test_null_tier_fields_allowed(self) -> None:
        validate_product(
            {
                "_id": "p-1",
                "price": 100,
                "stock": 5,
                "vendorId": "v-1",
                "bulkPrice": None,
                "bulkMinimumUnits": None,
            }
        )


class TestVendorContract:
    """Tests for vendor.json"""

    def test_valid(self) -> None:
        validate_vendor({"_id": "v-1", "address": {"latitude": 0.0, "longitude": 0.0}})

    def test_null_coordinates_allowed(self) -> None:
        validate_vendor({"_id": "v-1", "address": {"latitude": None, "longitude": None}})

    def test_latitude_out_of_range(self) -> None:
        errors = list(VendorContractValidator().iter_errors({"_id": "v-1", "address": {"latitude": 95}}))
        assert len(errors) == 1


class TestCartLineContract:
    """Tests for cart_line.json"""

    def test_valid(self) -> None:
        validate_cart_line({"productId": "p-1", "quantity": 2, "price": 90})
        validate_cart_line({"productId": {"_id": "p-1"}, "quantity": 0})

    def test_negative_quantity(self) -> None:
        assert not CartLineContractValidator().is_valid({"productId": "p-1", "quantity": -1})

    def test_fractional_quantity(self) -> None:
        with pytest.raises(ValidationError):
            validate_cart_line({"productId": "p-1", "quantity": 1.5})


# =============================================================================
# CATALOG
# =============================================================================


class TestCatalogFromPayload:
    """Tests for Catalog.from_payload"""

    def test_skips_invalid_records(self) -> None:
        products = [
            {"_id": "p-1", "price": 100, "stock": 5, "vendorId": "v-1"},
            {"_id": "p-2", "stock": 5, "vendorId": "v-1"},
            {"_id": "p-3", "price": 50, "stock": 1, "vendorId": "v-1", "bulkPrice": 45},
        ]
        vendors = [
            {"_id": "v-1", "isOnline": True, "isApproved": True},
            {"shopName": "no id"},
        ]

        with capture_logs() as logs:
            catalog = Catalog.from_payload(products, vendors)

        assert set(catalog.products) == {"p-1", "p-3"}
        assert set(catalog.vendors) == {"v-1"}
        assert catalog.product("p-3").bulk is None

        events = [log["event"] for log in logs]
        assert events.count("catalog_product_rejected") == 1
        assert events.count("catalog_vendor_rejected") == 1

    def test_zero_price_product_skipped(self) -> None:
        products = [
            {"_id": "free", "price": 0, "stock": 3, "vendorId": "v-1"},
            {"_id": "p-1", "price": 100, "stock": 5, "vendorId": "v-1"},
        ]

        with capture_logs() as logs:
            catalog = Catalog.from_payload(products, [{"_id": "v-1"}])

        assert catalog.product("free") is None
        assert set(catalog.products) == {"p-1"}
        rejected = [log for log in logs if log["event"] == "catalog_product_rejected"]
        assert [log["record_id"] for log in rejected] == ["free"]

    def test_lookups(self) -> None:
        catalog = Catalog.from_payload(
            [{"_id": "p-1", "price": 100, "stock": 5, "vendorId": "v-1"}],
            [{"_id": "v-1"}],
        )
        product = catalog.product("p-1")
        assert catalog.vendor_for(product).vendor_id == "v-1"
        assert catalog.product("missing") is None
        assert catalog.vendor("missing") is None
