"""
Display formatting of prices and cart summaries

The only place where monetary values are rounded to cents.
"""

from typing import Final, Optional

from cart_engine.core.config import PricingConfig
from cart_engine.core.domain.cart import CartSummary
from cart_engine.core.math.numerical_safeguards import round_money

CURRENCY_SYMBOL: Final[str] = "₹"
FREE_LABEL: Final[str] = "FREE"


def format_money(value: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """
    Examples:
        >>> format_money(269.67000000000002)
        '₹269.67'
        >>> format_money(75)
        '₹75.00'
    """
    return f"{symbol}{round_money(value):.2f}"


def gst_label(config: PricingConfig) -> str:
    """'GST (5%)' for gst_rate=0.05."""
    return f"GST ({round(config.gst_rate * 100)}%)"


def free_delivery_hint(summary: CartSummary, symbol: str = CURRENCY_SYMBOL) -> Optional[str]:
    """'Add ₹70.00 more for FREE delivery!' while a non-empty cart is below the threshold."""
    if summary.is_empty or summary.amount_to_free_delivery <= 0:
        return None
    return f"Add {format_money(summary.amount_to_free_delivery, symbol)} more for FREE delivery!"


def format_summary(
    summary: CartSummary,
    config: PricingConfig,
    symbol: str = CURRENCY_SYMBOL,
) -> dict[str, str]:
    """Row label → display string for the order summary card."""
    rows = {
        "Subtotal": format_money(summary.subtotal, symbol),
        "Delivery": FREE_LABEL if summary.delivery_charge == 0 else format_money(summary.delivery_charge, symbol),
        "Platform fee": format_money(summary.platform_fee, symbol),
        gst_label(config): format_money(summary.gst_amount, symbol),
        "Total Amount": format_money(summary.grand_total, symbol),
    }
    if summary.total_savings > 0:
        rows["You save"] = format_money(summary.total_savings, symbol)
    return rows
