"""
Core math modules for cart_engine

Numerical primitives with stability guarantees: safeguards and geometry.
"""

# Numerical Safeguards
from cart_engine.core.math.numerical_safeguards import (
    EPS_PRICE,
    MONEY_QUANTUM,
    clamp,
    is_greater,
    is_valid_float,
    round_money,
    sanitize_float,
)

# GeoDistance
from cart_engine.core.math.geo import EARTH_RADIUS_KM, distance_km

__all__ = [
    # Numerical Safeguards: Epsilon constants
    "EPS_PRICE",
    "MONEY_QUANTUM",
    # Numerical Safeguards: Functions
    "clamp",
    "is_greater",
    "is_valid_float",
    "round_money",
    "sanitize_float",
    # GeoDistance
    "EARTH_RADIUS_KM",
    "distance_km",
]
