"""
GeoDistance — great-circle distance between two coordinates

Haversine formula on a spherical Earth (R = 6371 km):

    a = sin²(Δφ/2) + cos φ1 · cos φ2 · sin²(Δλ/2)
    c = 2 · atan2(√a, √(1 − a))
    d = R · c

CRITICAL INVARIANTS:
1. distance_km(a, a) == 0
2. distance_km(a, b) == distance_km(b, a)
3. Result is always >= 0; non-finite input yields math.inf (fails closed in
   every range comparison)
4. `a` is clamped to [0, 1] before sqrt/atan2, so floating-point overshoot
   near antipodal points never raises a domain error
"""

import math
from typing import Final

import structlog

from cart_engine.core.math.numerical_safeguards import clamp, is_valid_float

logger = structlog.get_logger(__name__)

# Mean Earth radius (km)
EARTH_RADIUS_KM: Final[float] = 6371.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance in kilometres.

    Args:
        lat1: Latitude of the first point (degrees)
        lon1: Longitude of the first point (degrees)
        lat2: Latitude of the second point (degrees)
        lon2: Longitude of the second point (degrees)

    Returns:
        Distance in km (>= 0); math.inf if any coordinate is NaN/Inf

    Examples:
        >>> distance_km(0.0, 0.0, 0.0, 0.0)
        0.0
        >>> round(distance_km(0.0, 0.0, 0.0, 0.1), 2)
        11.12
    """
    if not all(is_valid_float(v) for v in (lat1, lon1, lat2, lon2)):
        logger.warning(
            "geo_invalid_coordinates",
            lat1=lat1,
            lon1=lon1,
            lat2=lat2,
            lon2=lon2,
        )
        return math.inf

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2.0) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    )
    a = clamp(a, 0.0, 1.0)

    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_KM * c
