"""
Catalog — read-only snapshot of products and vendors

Owned by the catalog service; the cart engine only reads it. Built either
from domain models directly or from raw REST payloads (validated against the
JSON Schema contracts; invalid records are skipped and logged).
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

import structlog

from cart_engine.core.contracts import ProductContractValidator, VendorContractValidator
from cart_engine.core.domain.product import Product
from cart_engine.core.domain.vendor import Vendor

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Catalog:
    """Products and vendors keyed by id."""

    products: Mapping[str, Product] = field(default_factory=dict)
    vendors: Mapping[str, Vendor] = field(default_factory=dict)

    def product(self, product_id: str) -> Optional[Product]:
        return self.products.get(product_id)

    def vendor(self, vendor_id: str) -> Optional[Vendor]:
        return self.vendors.get(vendor_id)

    def vendor_for(self, product: Product) -> Optional[Vendor]:
        return self.vendors.get(product.vendor_id)

    @classmethod
    def of(cls, products: Iterable[Product], vendors: Iterable[Vendor]) -> "Catalog":
        return cls(
            products={p.product_id: p for p in products},
            vendors={v.vendor_id: v for v in vendors},
        )

    @classmethod
    def from_payload(
        cls,
        products: Iterable[Mapping[str, Any]],
        vendors: Iterable[Mapping[str, Any]],
    ) -> "Catalog":
        """
        Build a catalog from raw catalog REST records.

        Records violating the contract, or rejected by the domain models, are
        skipped with a warning; one bad record never hides the rest.
        """
        product_validator = ProductContractValidator()
        vendor_validator = VendorContractValidator()

        parsed_products: dict[str, Product] = {}
        for raw in products:
            errors = [e.message for e in product_validator.iter_errors(raw)]
            if errors:
                logger.warning("catalog_product_rejected", record_id=raw.get("_id"), errors=errors)
                continue
            try:
                product = Product.from_catalog(raw)
            except ValueError as e:
                logger.warning("catalog_product_rejected", record_id=raw.get("_id"), errors=[str(e)])
                continue
            parsed_products[product.product_id] = product

        parsed_vendors: dict[str, Vendor] = {}
        for raw in vendors:
            errors = [e.message for e in vendor_validator.iter_errors(raw)]
            if errors:
                logger.warning("catalog_vendor_rejected", record_id=raw.get("_id"), errors=errors)
                continue
            try:
                vendor = Vendor.from_catalog(raw)
            except ValueError as e:
                logger.warning("catalog_vendor_rejected", record_id=raw.get("_id"), errors=[str(e)])
                continue
            parsed_vendors[vendor.vendor_id] = vendor

        return cls(products=parsed_products, vendors=parsed_vendors)
