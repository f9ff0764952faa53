"""
Domain models and value objects.

Contains the storefront entities consumed by the pricing engine: Product
(with tagged PricingTiers), Vendor, GeoPoint, CartLine, CartSummary, Catalog.
"""

from cart_engine.core.domain.cart import EMPTY_SUMMARY, CartLine, CartSummary
from cart_engine.core.domain.catalog import Catalog
from cart_engine.core.domain.product import (
    DefaultOnly,
    PricingTiers,
    Product,
    TierOffer,
    WithBulk,
    WithBulkAndLarge,
    WithLargeQuantity,
    make_pricing_tiers,
)
from cart_engine.core.domain.vendor import GeoPoint, Vendor

__all__ = [
    # Product model
    "Product",
    "TierOffer",
    "PricingTiers",
    "DefaultOnly",
    "WithBulk",
    "WithLargeQuantity",
    "WithBulkAndLarge",
    "make_pricing_tiers",
    # Vendor model
    "Vendor",
    "GeoPoint",
    # Cart models
    "CartLine",
    "CartSummary",
    "EMPTY_SUMMARY",
    # Catalog
    "Catalog",
]
