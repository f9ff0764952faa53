"""
CartLine / CartSummary — cart contents and the derived price summary

CartLine is owned by the cart store: created on first add, replaced on
quantity change, removed when quantity reaches 0.

CartSummary is a pure projection recomputed on every read; it is never
persisted or cached independently of its inputs. Values are unrounded;
use `rounded()` or pricing.formatting for display.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from pydantic import BaseModel, Field

from cart_engine.core.math.numerical_safeguards import round_money


class CartLine(BaseModel):
    """One product line in the cart (frozen=True)."""

    product_id: str = Field(..., min_length=1, description="Product in the line")
    vendor_id: str = Field(..., min_length=1, description="Vendor of the product")
    quantity: int = Field(..., ge=0, description="Units in the cart")
    unit_price_snapshot: float = Field(
        ..., ge=0, allow_inf_nan=False, description="Effective unit price at last commit"
    )

    model_config = {"frozen": True}

    @classmethod
    def from_server(cls, payload: Mapping[str, Any]) -> "CartLine":
        """
        Build a line from the cart server payload.

        `productId` may be a plain id or the populated product object.
        """
        product_ref = payload.get("productId")
        vendor_ref = payload.get("vendorId")
        if isinstance(product_ref, Mapping):
            vendor_ref = vendor_ref or product_ref.get("vendorId")
            product_ref = product_ref.get("_id")
        if isinstance(vendor_ref, Mapping):
            vendor_ref = vendor_ref.get("_id")

        return cls(
            product_id=str(product_ref or ""),
            vendor_id=str(vendor_ref or ""),
            quantity=payload.get("quantity", 0),
            unit_price_snapshot=payload.get("price", 0.0),
        )


@dataclass(frozen=True)
class CartSummary:
    """Cart totals derived from lines + catalog + PricingConfig."""

    subtotal: float
    delivery_charge: float
    platform_fee: float
    gst_amount: float
    grand_total: float
    item_count: int

    # Savings against list price
    mrp_subtotal: float = 0.0
    total_savings: float = 0.0

    # Free delivery hint ("Add X more for FREE delivery")
    amount_to_free_delivery: float = 0.0

    # Lines excluded because their product is not in the catalog; their
    # quantities are not counted in item_count either, so a cart holding only
    # such lines is empty (no delivery charge, fee or GST)
    skipped_product_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return self.item_count == 0

    @property
    def has_free_delivery(self) -> bool:
        return not self.is_empty and self.delivery_charge == 0

    def rounded(self) -> "CartSummary":
        """Copy with every monetary value rounded to cents (display only)."""
        return replace(
            self,
            subtotal=round_money(self.subtotal),
            delivery_charge=round_money(self.delivery_charge),
            platform_fee=round_money(self.platform_fee),
            gst_amount=round_money(self.gst_amount),
            grand_total=round_money(self.grand_total),
            mrp_subtotal=round_money(self.mrp_subtotal),
            total_savings=round_money(self.total_savings),
            amount_to_free_delivery=round_money(self.amount_to_free_delivery),
        )


EMPTY_SUMMARY = CartSummary(
    subtotal=0.0,
    delivery_charge=0.0,
    platform_fee=0.0,
    gst_amount=0.0,
    grand_total=0.0,
    item_count=0,
)
