"""
Pricing — tier resolution, cart aggregation and display formatting.
"""

from cart_engine.pricing.aggregator import (
    CartPricingAggregator,
    PricedLine,
    order_lines,
    summarize,
    summarize_by_vendor,
)
from cart_engine.pricing.formatting import (
    CURRENCY_SYMBOL,
    format_money,
    format_summary,
    free_delivery_hint,
    gst_label,
)
from cart_engine.pricing.tiers import (
    PriceTier,
    TierKind,
    active_tier,
    build_tiers,
    check_catalog_pricing,
    check_tier_monotonicity,
    effective_price,
    resolve_tiers,
)

__all__ = [
    # Tiers
    "PriceTier",
    "TierKind",
    "active_tier",
    "build_tiers",
    "check_catalog_pricing",
    "check_tier_monotonicity",
    "effective_price",
    "resolve_tiers",
    # Aggregator
    "CartPricingAggregator",
    "PricedLine",
    "order_lines",
    "summarize",
    "summarize_by_vendor",
    # Formatting
    "CURRENCY_SYMBOL",
    "format_money",
    "format_summary",
    "free_delivery_hint",
    "gst_label",
]
