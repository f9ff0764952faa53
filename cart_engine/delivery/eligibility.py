"""
DeliveryEligibility — can a vendor serve the user's location?

Eligible only if ALL hold:
- user location is known
- vendor has both coordinates
- vendor delivery range is set and >= 0
- vendor is online
- vendor is approved
- distance_km(user, vendor) <= delivery range

Order of checks (first failure wins, reported in block_reason):
1. User location missing
2. Vendor location missing
3. Delivery range missing
4. Vendor offline
5. Vendor not approved
6. Distance > range

Missing data fails closed. The distance message is for display only and
never feeds the eligibility boolean.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterable, Mapping, Optional

from cart_engine.core.domain.product import Product
from cart_engine.core.domain.vendor import GeoPoint, Vendor
from cart_engine.core.math.geo import distance_km

# Display messages
MSG_WITHIN_RANGE: Final[str] = "Within delivery range"
MSG_LOCATION_MISSING: Final[str] = "Location data missing"
MSG_NEED_CLOSER: Final[str] = "Need to be at least {km} km closer"


class EligibilityBlock(str, Enum):
    """Why a vendor is not eligible"""

    NONE = "none"
    USER_LOCATION_MISSING = "user_location_missing"
    VENDOR_LOCATION_MISSING = "vendor_location_missing"
    DELIVERY_RANGE_MISSING = "delivery_range_missing"
    VENDOR_OFFLINE = "vendor_offline"
    VENDOR_NOT_APPROVED = "vendor_not_approved"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class EligibilityResult:
    """Eligibility of one vendor for one user location."""

    vendor_id: str
    is_eligible: bool
    block_reason: EligibilityBlock

    # None when distance could not be computed
    distance_km: Optional[float]

    # Display status ("Within delivery range" / "Need to be at least N km closer")
    message: str

    @property
    def is_availability_block(self) -> bool:
        """Blocked because the vendor is offline or unapproved (not by geometry)."""
        return self.block_reason in (
            EligibilityBlock.VENDOR_OFFLINE,
            EligibilityBlock.VENDOR_NOT_APPROVED,
        )


def _vendor_distance(vendor: Vendor, user_location: Optional[GeoPoint]) -> Optional[float]:
    if user_location is None or vendor.latitude is None or vendor.longitude is None:
        return None
    return distance_km(
        user_location.latitude,
        user_location.longitude,
        vendor.latitude,
        vendor.longitude,
    )


def _message_for(vendor: Vendor, distance: Optional[float]) -> str:
    if distance is None or vendor.delivery_range_km is None or math.isinf(distance):
        return MSG_LOCATION_MISSING
    if distance <= vendor.delivery_range_km:
        return MSG_WITHIN_RANGE
    return MSG_NEED_CLOSER.format(km=math.ceil(distance - vendor.delivery_range_km))


def evaluate(vendor: Vendor, user_location: Optional[GeoPoint]) -> EligibilityResult:
    """
    Full eligibility evaluation of a vendor.

    Args:
        vendor: Catalog vendor
        user_location: User position (None when not yet known)

    Returns:
        EligibilityResult with flag, block reason, distance and message
    """
    distance = _vendor_distance(vendor, user_location)
    message = _message_for(vendor, distance)

    def result(block: EligibilityBlock) -> EligibilityResult:
        return EligibilityResult(
            vendor_id=vendor.vendor_id,
            is_eligible=block is EligibilityBlock.NONE,
            block_reason=block,
            distance_km=distance,
            message=message,
        )

    # 1-3. Data availability
    if user_location is None:
        return result(EligibilityBlock.USER_LOCATION_MISSING)
    if vendor.latitude is None or vendor.longitude is None:
        return result(EligibilityBlock.VENDOR_LOCATION_MISSING)
    if vendor.delivery_range_km is None or vendor.delivery_range_km < 0:
        return result(EligibilityBlock.DELIVERY_RANGE_MISSING)

    # 4-5. Vendor status
    if not vendor.is_online:
        return result(EligibilityBlock.VENDOR_OFFLINE)
    if not vendor.is_approved:
        return result(EligibilityBlock.VENDOR_NOT_APPROVED)

    # 6. Distance (inf for corrupt coordinates → out of range)
    if distance is None or not distance <= vendor.delivery_range_km:
        return result(EligibilityBlock.OUT_OF_RANGE)

    return result(EligibilityBlock.NONE)


def is_eligible(vendor: Vendor, user_location: Optional[GeoPoint]) -> bool:
    """True if the vendor can deliver to the user location."""
    return evaluate(vendor, user_location).is_eligible


def distance_message(vendor: Vendor, user_location: Optional[GeoPoint]) -> str:
    """
    Display status of the delivery range, independent of online/approval.

    Examples:
        vendor at (0, 0), range 10 km, user at (0, 0.1) → 11.12 km
        >>> distance_message(vendor, user)
        'Need to be at least 2 km closer'
    """
    return _message_for(vendor, _vendor_distance(vendor, user_location))


def vendors_in_range(
    vendors: Iterable[Vendor],
    user_location: Optional[GeoPoint],
) -> list[EligibilityResult]:
    """Eligible vendors, nearest first."""
    eligible = [r for r in (evaluate(v, user_location) for v in vendors) if r.is_eligible]
    eligible.sort(key=lambda r: r.distance_km if r.distance_km is not None else math.inf)
    return eligible


def products_in_range(
    products: Iterable[Product],
    vendors: Mapping[str, Vendor],
    user_location: Optional[GeoPoint],
) -> list[Product]:
    """Products whose vendor is eligible for the user location."""
    verdicts: dict[str, bool] = {}
    selected = []
    for product in products:
        if product.vendor_id not in verdicts:
            vendor = vendors.get(product.vendor_id)
            verdicts[product.vendor_id] = vendor is not None and is_eligible(vendor, user_location)
        if verdicts[product.vendor_id]:
            selected.append(product)
    return selected


class DeliveryEligibility:
    """
    DeliveryEligibility bound to one user location.

    The location is replaced when the device reports a new position; vendor
    data always comes from the current catalog.
    """

    def __init__(self, user_location: Optional[GeoPoint] = None):
        self.user_location = user_location

    def evaluate(self, vendor: Vendor) -> EligibilityResult:
        return evaluate(vendor, self.user_location)

    def is_eligible(self, vendor: Vendor) -> bool:
        return is_eligible(vendor, self.user_location)

    def distance_message(self, vendor: Vendor) -> str:
        return distance_message(vendor, self.user_location)

    def vendors_in_range(self, vendors: Iterable[Vendor]) -> list[EligibilityResult]:
        return vendors_in_range(vendors, self.user_location)

    def products_in_range(self, products: Iterable[Product], vendors: Mapping[str, Vendor]) -> list[Product]:
        return products_in_range(products, vendors, self.user_location)
