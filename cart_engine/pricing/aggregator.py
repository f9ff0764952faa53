"""
CartPricingAggregator — cart summary from lines, catalog and PricingConfig

FORMULAS:
    subtotal        = Σ effective_price(product, qty) * qty
    delivery_charge = 0 if subtotal >= free_delivery_threshold else delivery_charge
    platform_fee    = subtotal * platform_fee_rate
    gst_amount      = (subtotal + platform_fee) * gst_rate
    grand_total     = subtotal + delivery_charge + platform_fee + gst_amount
    item_count      = Σ qty over lines whose product is in the catalog

CRITICAL INVARIANTS:
1. Pure: same inputs → same summary, no I/O, no cached state
2. No rounding during accumulation (display rounding lives in formatting)
3. An empty cart carries no delivery charge
4. Lines whose product is missing from the catalog are excluded and reported
"""

from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Iterable, Mapping

import structlog

from cart_engine.core.config import DEFAULT_PRICING_CONFIG, PricingConfig
from cart_engine.core.domain.cart import EMPTY_SUMMARY, CartLine, CartSummary
from cart_engine.core.domain.product import Product
from cart_engine.pricing.tiers import effective_price

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PricedLine:
    """Cart line priced at its effective tier price (order payload item)."""

    product_id: str
    vendor_id: str
    name: str
    quantity: int
    unit_price: float
    line_total: float


# =============================================================================
# FUNCTIONS
# =============================================================================


def order_lines(lines: Iterable[CartLine], products: Mapping[str, Product]) -> list[PricedLine]:
    """
    Price every line of the cart with its current effective unit price.

    Lines with quantity 0 or an unknown product are left out.
    """
    priced = []
    for line in lines:
        product = products.get(line.product_id)
        if product is None or line.quantity <= 0:
            continue
        unit_price = effective_price(product, line.quantity)
        priced.append(
            PricedLine(
                product_id=product.product_id,
                vendor_id=product.vendor_id,
                name=product.name,
                quantity=line.quantity,
                unit_price=unit_price,
                line_total=unit_price * line.quantity,
            )
        )
    return priced


def summarize(
    lines: Iterable[CartLine],
    products: Mapping[str, Product],
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> CartSummary:
    """
    Compute the cart summary.

    Args:
        lines: Cart lines (committed state)
        products: Catalog products keyed by id
        config: Pricing constants

    Returns:
        CartSummary with unrounded values
    """
    subtotal = 0.0
    mrp_subtotal = 0.0
    item_count = 0
    skipped = []

    for line in lines:
        if line.quantity <= 0:
            continue
        product = products.get(line.product_id)
        if product is None:
            skipped.append(line.product_id)
            continue

        subtotal += effective_price(product, line.quantity) * line.quantity
        mrp_subtotal += product.base_price * line.quantity
        item_count += line.quantity

    if skipped:
        logger.warning("cart_lines_without_product", product_ids=skipped)

    if item_count == 0:
        return replace(EMPTY_SUMMARY, skipped_product_ids=tuple(skipped))

    if subtotal >= config.free_delivery_threshold:
        delivery_charge = 0.0
        amount_to_free_delivery = 0.0
    else:
        delivery_charge = config.delivery_charge
        amount_to_free_delivery = config.free_delivery_threshold - subtotal

    platform_fee = subtotal * config.platform_fee_rate
    gst_amount = (subtotal + platform_fee) * config.gst_rate
    grand_total = subtotal + delivery_charge + platform_fee + gst_amount

    return CartSummary(
        subtotal=subtotal,
        delivery_charge=delivery_charge,
        platform_fee=platform_fee,
        gst_amount=gst_amount,
        grand_total=grand_total,
        item_count=item_count,
        mrp_subtotal=mrp_subtotal,
        total_savings=max(0.0, mrp_subtotal - subtotal),
        amount_to_free_delivery=amount_to_free_delivery,
        skipped_product_ids=tuple(skipped),
    )


def summarize_by_vendor(
    lines: Iterable[CartLine],
    products: Mapping[str, Product],
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> dict[str, CartSummary]:
    """
    One summary per vendor; orders are placed per vendor, each with its own
    delivery charge, platform fee and GST.

    Lines are grouped by the catalog product's vendor (falling back to the
    line's vendor id for products missing from the catalog).
    """
    groups: dict[str, list[CartLine]] = defaultdict(list)
    for line in lines:
        product = products.get(line.product_id)
        vendor_id = product.vendor_id if product is not None else line.vendor_id
        groups[vendor_id].append(line)

    return {
        vendor_id: summarize(vendor_lines, products, config)
        for vendor_id, vendor_lines in groups.items()
    }


# =============================================================================
# AGGREGATOR
# =============================================================================


class CartPricingAggregator:
    """
    CartPricingAggregator with an injected PricingConfig.

    Stateless apart from the config; every call recomputes from its inputs.
    """

    def __init__(self, config: PricingConfig | None = None):
        """
        Args:
            config: pricing constants (canonical defaults if omitted)
        """
        self.config = config or DEFAULT_PRICING_CONFIG

    def summarize(self, lines: Iterable[CartLine], products: Mapping[str, Product]) -> CartSummary:
        return summarize(lines, products, self.config)

    def summarize_by_vendor(
        self, lines: Iterable[CartLine], products: Mapping[str, Product]
    ) -> dict[str, CartSummary]:
        return summarize_by_vendor(lines, products, self.config)

    def order_lines(self, lines: Iterable[CartLine], products: Mapping[str, Product]) -> list[PricedLine]:
        return order_lines(lines, products)
