"""
Error taxonomy for the cart engine

User-visible, recoverable conditions raised by CartLineController:
- QuantityValidationError: negative / non-integer quantity, rejected before any
  network call
- VendorUnavailable / OutOfDeliveryRange: action blocked, no state mutation
- NetworkFailure: server upsert failed, line rolled back, retry allowed
- UnknownProductError: quantity requested for a product missing from the catalog

Not raised:
- StockExceeded is a notice attached to the result (quantity auto-clamped)
- MalformedProductData is a warning category; offending tier fields are
  dropped and logged, a pricing defect must never crash the cart
"""

from dataclasses import dataclass
from typing import Final

# Log event / warning category for partially specified product pricing data
MALFORMED_PRODUCT_DATA: Final[str] = "malformed_product_data"


class CartEngineError(Exception):
    """Base class for all user-visible cart engine errors."""

    retryable: bool = False


class QuantityValidationError(CartEngineError):
    """Quantity is negative or not an integer."""

    def __init__(self, quantity: object):
        self.quantity = quantity
        super().__init__(f"Quantity must be a non-negative integer, got {quantity!r}")


class UnknownProductError(CartEngineError):
    """Product is not present in the catalog."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id!r} not found in catalog")


class VendorUnavailable(CartEngineError):
    """Vendor is offline or not approved."""

    def __init__(self, vendor_id: str, reason: str):
        self.vendor_id = vendor_id
        self.reason = reason
        super().__init__(f"Vendor {vendor_id!r} is unavailable: {reason}")


class OutOfDeliveryRange(CartEngineError):
    """User location is outside the vendor's delivery range (or cannot be evaluated)."""

    def __init__(self, vendor_id: str, message: str, distance_km: float | None = None):
        self.vendor_id = vendor_id
        self.message = message
        self.distance_km = distance_km
        super().__init__(f"Vendor {vendor_id!r} cannot deliver: {message}")


class NetworkFailure(CartEngineError):
    """Cart server call failed; the line was rolled back to its last committed quantity."""

    retryable = True

    def __init__(self, product_id: str, detail: str):
        self.product_id = product_id
        self.detail = detail
        super().__init__(f"Failed to update cart for {product_id!r}: {detail}")


@dataclass(frozen=True)
class StockExceeded:
    """Notice: requested quantity exceeded stock and was clamped."""

    product_id: str
    requested: int
    available: int

    @property
    def message(self) -> str:
        if self.available <= 0:
            return "This product is out of stock."
        return f"Cannot add more than available stock ({self.available})"
