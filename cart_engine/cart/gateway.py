"""
CartGateway — asynchronous boundary to the cart server

The server persists one line per (cart_id, product_id). The upsert is
idempotent: sending the same request twice leaves the same line. Quantity 0
deletes the line.

Implementations raise NetworkFailure on transport or server errors.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class LineUpsert:
    """Idempotent upsert of one cart line."""

    cart_id: str
    product_id: str
    vendor_id: str
    quantity: int
    unit_price: float

    @property
    def key(self) -> tuple[str, str]:
        return (self.cart_id, self.product_id)

    @property
    def is_removal(self) -> bool:
        return self.quantity == 0

    def to_payload(self) -> dict:
        """Body of POST /cart/items."""
        return {
            "productId": self.product_id,
            "quantity": self.quantity,
            "price": self.unit_price,
            "vendorId": self.vendor_id,
        }


class CartGateway(Protocol):
    """Cart server client used by CartLineController."""

    async def upsert_line(self, request: LineUpsert) -> None:
        ...
