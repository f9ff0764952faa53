"""
Vendor — Shop that fulfils orders, with a location and a delivery radius

Immutable Pydantic model. Missing coordinates or delivery range are kept as
None: such a vendor cannot be evaluated for eligibility and is never eligible.
"""

import math
from typing import Any, Mapping, Optional

import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger(__name__)


class GeoPoint(BaseModel):
    """Latitude/longitude pair in degrees (user location)."""

    latitude: float = Field(..., ge=-90, le=90, description="Latitude (degrees)")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude (degrees)")

    model_config = {"frozen": True}


class Vendor(BaseModel):
    """
    Vendor reference data owned by the catalog service (frozen=True).
    """

    vendor_id: str = Field(..., min_length=1, description="Catalog id (_id)")
    shop_name: str = Field("", description="Display name of the shop")

    # Location
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Shop latitude")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Shop longitude")
    delivery_range_km: Optional[float] = Field(
        None, ge=0, allow_inf_nan=False, description="Delivery radius (km)"
    )

    # Status
    is_online: bool = Field(False, description="Shop currently accepting orders")
    is_approved: bool = Field(False, description="Shop approved by the marketplace")

    model_config = {"frozen": True}

    @property
    def location(self) -> Optional[GeoPoint]:
        """Shop location, or None when either coordinate is missing."""
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)

    @classmethod
    def from_catalog(cls, payload: Mapping[str, Any]) -> "Vendor":
        """
        Build a Vendor from the catalog REST payload.

        Coordinates live under `address`; a negative or non-numeric
        `deliveryRange` is treated as missing.

        Raises:
            ValueError: If the vendor id is missing or coordinates are out of range
        """
        vendor_id = str(payload.get("_id") or "")
        address = payload.get("address") or {}

        delivery_range = _as_number(payload.get("deliveryRange"))
        if delivery_range is not None and delivery_range < 0:
            logger.warning(
                "vendor_delivery_range_invalid",
                vendor_id=vendor_id,
                delivery_range=delivery_range,
            )
            delivery_range = None

        return cls(
            vendor_id=vendor_id,
            shop_name=str(payload.get("shopName") or payload.get("name") or ""),
            latitude=_as_number(address.get("latitude")),
            longitude=_as_number(address.get("longitude")),
            delivery_range_km=delivery_range,
            is_online=bool(payload.get("isOnline", False)),
            is_approved=bool(payload.get("isApproved", False)),
        )


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number
