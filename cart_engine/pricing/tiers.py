"""
PriceTierResolver — quantity-based price tiers for one product

Construction rule:
1. bulk_min  = bulk.minimum_units  if bulk tier present  else +inf
   large_min = large.minimum_units if large tier present else +inf
2. DEFAULT: [1, min(bulk_min, large_min) - 1] @ list_price (discounted_price or base_price)
   label "1 - {max|max} pcs"
3. BULK:    [bulk.minimum_units, large_min - 1] @ bulk.price
   label "{min} - {max|max} pcs"
4. LARGE:   [large.minimum_units, +inf] @ large.price
   label ">= {min} pcs"
5. Sort ascending by min_qty, drop tiers with min_qty > max_qty
   (empty default range, bulk minimum >= large minimum, ...)
6. Active tier = the unique tier containing the quantity; quantity 0 or no
   match falls back to list_price (discounted_price or base_price)

CRITICAL INVARIANTS:
1. Tiers are ordered by min_qty and never overlap
2. For any quantity at most one tier is active
3. Resolution never raises: malformed tiers were already dropped when the
   Product was built
4. A higher tier priced above a lower one is a data-integrity warning, not an error
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Final, Mapping, Optional

import structlog

from cart_engine.core.domain.product import Product
from cart_engine.core.math.numerical_safeguards import is_greater

logger = structlog.get_logger(__name__)

# Label placeholder for an unbounded upper limit
UNBOUNDED_LABEL: Final[str] = "max"


# =============================================================================
# TYPES
# =============================================================================


class TierKind(str, Enum):
    """Origin of a price tier"""

    DEFAULT = "default"
    BULK = "bulk"
    LARGE_QUANTITY = "large_quantity"


@dataclass(frozen=True)
class PriceTier:
    """One quantity band of a product's price schedule."""

    kind: TierKind
    min_qty: int
    max_qty: Optional[int]  # None = unbounded
    unit_price: float
    label: str
    is_active: bool = False

    def contains(self, quantity: int) -> bool:
        if quantity < self.min_qty:
            return False
        return self.max_qty is None or quantity <= self.max_qty


# =============================================================================
# CONSTRUCTION
# =============================================================================


def _upper_label(max_qty: float) -> str:
    return UNBOUNDED_LABEL if math.isinf(max_qty) else str(int(max_qty))


def _make_tier(kind: TierKind, min_qty: int, max_qty: float, unit_price: float, label: str) -> PriceTier:
    return PriceTier(
        kind=kind,
        min_qty=min_qty,
        max_qty=None if math.isinf(max_qty) else int(max_qty),
        unit_price=unit_price,
        label=label,
    )


def build_tiers(product: Product) -> list[PriceTier]:
    """
    Ordered, non-overlapping tiers of a product (all inactive).

    Args:
        product: Catalog product

    Returns:
        Tiers sorted by min_qty; empty ranges removed
    """
    bulk = product.bulk
    large = product.large

    bulk_min: float = bulk.minimum_units if bulk is not None else math.inf
    large_min: float = large.minimum_units if large is not None else math.inf

    default_max = min(bulk_min, large_min) - 1
    candidates = [
        (
            default_max,
            _make_tier(
                TierKind.DEFAULT,
                1,
                default_max,
                product.list_price,
                f"1 - {_upper_label(default_max)} pcs",
            ),
        )
    ]

    if bulk is not None:
        bulk_max = large_min - 1
        candidates.append(
            (
                bulk_max,
                _make_tier(
                    TierKind.BULK,
                    bulk.minimum_units,
                    bulk_max,
                    bulk.price,
                    f"{bulk.minimum_units} - {_upper_label(bulk_max)} pcs",
                ),
            )
        )

    if large is not None:
        candidates.append(
            (
                math.inf,
                _make_tier(
                    TierKind.LARGE_QUANTITY,
                    large.minimum_units,
                    math.inf,
                    large.price,
                    f">= {large.minimum_units} pcs",
                ),
            )
        )

    candidates.sort(key=lambda item: item[1].min_qty)

    tiers = []
    for upper, tier in candidates:
        if tier.min_qty > upper:
            logger.debug(
                "tier_dropped",
                product_id=product.product_id,
                tier=tier.kind.value,
                min_qty=tier.min_qty,
                max_qty=upper,
            )
            continue
        tiers.append(tier)
    return tiers


# =============================================================================
# RESOLUTION
# =============================================================================


def resolve_tiers(product: Product, quantity: int = 0) -> list[PriceTier]:
    """
    Tiers of a product with the `is_active` flag set for `quantity`.

    Args:
        product: Catalog product
        quantity: Quantity currently selected (0 = none active)

    Returns:
        Ordered tiers, at most one of them active
    """
    return [replace(tier, is_active=tier.contains(quantity)) for tier in build_tiers(product)]


def active_tier(product: Product, quantity: int) -> Optional[PriceTier]:
    """The tier containing `quantity`, or None (quantity 0, below 1, ...)."""
    for tier in build_tiers(product):
        if tier.contains(quantity):
            return replace(tier, is_active=True)
    return None


def effective_price(product: Product, quantity: int) -> float:
    """
    Effective unit price for `quantity` units.

    Examples:
        product: base 100, discounted 90, bulk 80 @ 10, large 70 @ 50
        >>> effective_price(product, 25)
        80.0
        >>> effective_price(product, 0)
        90.0
    """
    tier = active_tier(product, quantity)
    if tier is None:
        return product.list_price
    return tier.unit_price


# =============================================================================
# DATA INTEGRITY
# =============================================================================


def check_tier_monotonicity(product: Product) -> list[str]:
    """
    Detect tiers priced above a lower tier.

    Volume tiers must not cost more per unit than the tiers below them.
    Violations are logged as warnings and returned; pricing still uses the
    configured prices.

    Returns:
        Human-readable violation descriptions (empty if consistent)
    """
    tiers = build_tiers(product)
    violations = []
    for lower, higher in zip(tiers, tiers[1:]):
        if is_greater(higher.unit_price, lower.unit_price):
            violations.append(
                f"{higher.kind.value} tier '{higher.label}' @ {higher.unit_price} "
                f"is above {lower.kind.value} tier '{lower.label}' @ {lower.unit_price}"
            )

    if violations:
        logger.warning(
            "tier_price_not_monotonic",
            product_id=product.product_id,
            violations=violations,
        )
    return violations


def check_catalog_pricing(products: Mapping[str, Product]) -> dict[str, list[str]]:
    """Run check_tier_monotonicity over a catalog; returns only offending products."""
    report = {}
    for product_id, product in products.items():
        violations = check_tier_monotonicity(product)
        if violations:
            report[product_id] = violations
    return report
