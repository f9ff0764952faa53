"""
Numerical Safeguards — Safe Math Primitives for pricing and geometry

Module guarantees that pricing and distance math never crashes the cart:
- NaN/Inf sanitization so invalid values do not propagate into totals
- Epsilon comparison for float prices
- Clamping for trigonometric arguments and quantities
- Money rounding (display time only, never during accumulation)

CRITICAL INVARIANTS:
1. NaN/Inf never propagate (replaced by fallback)
2. Float comparisons always account for machine precision
3. Rounding to cents happens once, at formatting time
4. All operations are deterministic and reproducible
"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Final

# =============================================================================
# EPSILON PARAMETERS
# =============================================================================

# Epsilon for prices (currency units)
# Used when comparing tier prices for monotonicity
EPS_PRICE: Final[float] = 1e-9

# Quantum for money rounding (2 decimal places)
MONEY_QUANTUM: Final[Decimal] = Decimal("0.01")


# =============================================================================
# NaN/Inf SANITIZATION
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Check that a float is finite (not NaN, not Inf).

    Args:
        value: Value to check

    Returns:
        True if the value is finite
    """
    return math.isfinite(value)


def sanitize_float(value: float, fallback: float = 0.0) -> float:
    """
    Replace NaN/Inf with a fallback value.

    Args:
        value: Source value
        fallback: Replacement for NaN/Inf (default: 0.0)

    Returns:
        value if finite, otherwise fallback

    Examples:
        >>> sanitize_float(10.0)
        10.0
        >>> sanitize_float(float('nan'))
        0.0
        >>> sanitize_float(float('-inf'), fallback=-1.0)
        -1.0
    """
    if is_valid_float(value):
        return value
    return fallback


# =============================================================================
# EPSILON COMPARISONS
# =============================================================================


def is_greater(a: float, b: float, tol: float = EPS_PRICE) -> bool:
    """True if a exceeds b by more than tol."""
    return a - b > tol


# =============================================================================
# CLAMPING
# =============================================================================


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Limit a value to the given range.

    Args:
        value: Source value
        min_value: Lower bound (optional)
        max_value: Upper bound (optional)

    Returns:
        Value limited to [min_value, max_value]

    Examples:
        >>> clamp(1.0000000000000002, 0.0, 1.0)
        1.0
        >>> clamp(-1e-17, 0.0, 1.0)
        0.0
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


# =============================================================================
# MONEY ROUNDING
# =============================================================================


def round_money(value: float) -> float:
    """
    Round a monetary value to 2 decimal places, half away from zero.

    Goes through the shortest repr of the float so that values such as
    9.270000000000001 or 2.675 round the way a shopper reads them.
    Only for display: accumulation always uses unrounded floats.

    Args:
        value: Amount in currency units

    Returns:
        Amount rounded to cents (0.0 for NaN/Inf)

    Examples:
        >>> round_money(9.270000000000001)
        9.27
        >>> round_money(2.675)
        2.68
    """
    clean = sanitize_float(value, fallback=0.0)
    try:
        quantized = Decimal(repr(clean)).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return 0.0
    return float(quantized)
