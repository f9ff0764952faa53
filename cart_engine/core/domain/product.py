"""
Product — Catalog product with quantity-tiered pricing

Immutable Pydantic model. The optional tier fields of the catalog payload
(bulkPrice/bulkMinimumUnits, largeQuantityPrice/largeQuantityMinimumUnits)
are parsed once into a tagged PricingTiers value, so a tier is either fully
present or absent and downstream code never checks paired optional fields.

MALFORMED DATA:
- Tier with only one of price/minimum set → tier dropped (logged, never raised)
- Non-positive price, minimum < 1 or fractional minimum → tier dropped
- discountedPrice not strictly below price → discount dropped
- Missing or non-positive price → ValueError (product rejected, never sold for free)
"""

import math
from typing import Annotated, Any, Literal, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, Field, field_validator

from cart_engine.core.errors import MALFORMED_PRODUCT_DATA

logger = structlog.get_logger(__name__)


# =============================================================================
# TIER OFFERS
# =============================================================================


class TierOffer(BaseModel):
    """Price applied from a minimum number of units."""

    price: float = Field(..., gt=0, allow_inf_nan=False, description="Unit price in this tier")
    minimum_units: int = Field(..., ge=1, description="Smallest quantity that unlocks the tier")

    model_config = {"frozen": True}


# =============================================================================
# PRICING TIERS (tagged union)
# =============================================================================


class DefaultOnly(BaseModel):
    """No volume pricing: discounted/base price for every quantity."""

    kind: Literal["default_only"] = "default_only"

    model_config = {"frozen": True}

    @property
    def bulk(self) -> Optional[TierOffer]:
        return None

    @property
    def large(self) -> Optional[TierOffer]:
        return None


class WithBulk(BaseModel):
    """Bulk tier only."""

    kind: Literal["with_bulk"] = "with_bulk"
    bulk: TierOffer

    model_config = {"frozen": True}

    @property
    def large(self) -> Optional[TierOffer]:
        return None


class WithLargeQuantity(BaseModel):
    """Large-quantity tier only."""

    kind: Literal["with_large_quantity"] = "with_large_quantity"
    large: TierOffer

    model_config = {"frozen": True}

    @property
    def bulk(self) -> Optional[TierOffer]:
        return None


class WithBulkAndLarge(BaseModel):
    """Bulk and large-quantity tiers."""

    kind: Literal["with_bulk_and_large"] = "with_bulk_and_large"
    bulk: TierOffer
    large: TierOffer

    model_config = {"frozen": True}


PricingTiers = Annotated[
    Union[DefaultOnly, WithBulk, WithLargeQuantity, WithBulkAndLarge],
    Field(discriminator="kind"),
]


def make_pricing_tiers(
    bulk: Optional[TierOffer] = None,
    large: Optional[TierOffer] = None,
) -> Union[DefaultOnly, WithBulk, WithLargeQuantity, WithBulkAndLarge]:
    """Pick the tagged variant for the given offers."""
    if bulk is not None and large is not None:
        return WithBulkAndLarge(bulk=bulk, large=large)
    if bulk is not None:
        return WithBulk(bulk=bulk)
    if large is not None:
        return WithLargeQuantity(large=large)
    return DefaultOnly()


# =============================================================================
# PRODUCT MODEL
# =============================================================================


class Product(BaseModel):
    """
    Catalog product.

    Read-only reference data owned by the catalog service (frozen=True).
    """

    # Identification
    product_id: str = Field(..., min_length=1, description="Catalog id (_id)")
    vendor_id: str = Field(..., min_length=1, description="Owning vendor id")
    name: str = Field("", description="Display name")

    # Prices
    base_price: float = Field(..., gt=0, allow_inf_nan=False, description="List price (MRP)")
    discounted_price: Optional[float] = Field(
        None, gt=0, allow_inf_nan=False, description="Discounted price, strictly below base_price"
    )
    tiers: PricingTiers = Field(default_factory=DefaultOnly, description="Volume pricing")

    # Availability
    stock: int = Field(..., ge=0, description="Units in stock")
    is_available: bool = Field(True, description="Vendor-controlled availability flag")

    model_config = {"frozen": True}

    @field_validator("discounted_price")
    @classmethod
    def validate_discount_below_base(cls, v: Optional[float], info) -> Optional[float]:
        """discounted_price must be strictly below base_price."""
        if v is not None and "base_price" in info.data:
            base = info.data["base_price"]
            if v >= base:
                raise ValueError(f"discounted_price {v} must be < base_price {base}")
        return v

    @property
    def list_price(self) -> float:
        """Default-tier unit price: discounted_price if set, else base_price."""
        if self.discounted_price is not None:
            return self.discounted_price
        return self.base_price

    @property
    def bulk(self) -> Optional[TierOffer]:
        return self.tiers.bulk

    @property
    def large(self) -> Optional[TierOffer]:
        return self.tiers.large

    @property
    def available_stock(self) -> int:
        """Units that can be put in a cart (0 when the product is switched off)."""
        return self.stock if self.is_available else 0

    @classmethod
    def from_catalog(cls, payload: Mapping[str, Any]) -> "Product":
        """
        Build a Product from the catalog REST payload.

        Accepts `vendorId` as a plain id or a populated vendor object, or a
        `vendor` object with `_id`. Partial or invalid tier data degrades to
        "tier absent".

        Raises:
            ValueError: If the product or vendor id is missing or the price is
                not a positive number (pydantic.ValidationError is a ValueError)
        """
        product_id = str(payload.get("_id") or "")
        log = logger.bind(product_id=product_id)

        base_price = _as_price(payload.get("price"))
        if base_price is None:
            raise ValueError(f"price must be a positive number, got {payload.get('price')!r}")

        discounted_price = _as_price(payload.get("discountedPrice"))
        if discounted_price is not None and discounted_price >= base_price:
            log.warning(
                MALFORMED_PRODUCT_DATA,
                field="discountedPrice",
                value=discounted_price,
                base_price=base_price,
            )
            discounted_price = None

        bulk = _tier_offer(
            log, "bulk", payload.get("bulkPrice"), payload.get("bulkMinimumUnits")
        )
        large = _tier_offer(
            log,
            "largeQuantity",
            payload.get("largeQuantityPrice"),
            payload.get("largeQuantityMinimumUnits"),
        )

        stock = _as_units(payload.get("stock"), minimum=0)
        if stock is None:
            log.warning(MALFORMED_PRODUCT_DATA, field="stock", value=payload.get("stock"))
            stock = 0

        return cls(
            product_id=product_id,
            vendor_id=_vendor_id_of(payload),
            name=str(payload.get("name") or ""),
            base_price=base_price,
            discounted_price=discounted_price,
            tiers=make_pricing_tiers(bulk, large),
            stock=stock,
            is_available=bool(payload.get("isAvailable", True)),
        )


# =============================================================================
# PAYLOAD HELPERS
# =============================================================================


def _as_price(value: Any) -> Optional[float]:
    """Positive finite number or None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    price = float(value)
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def _as_units(value: Any, minimum: int = 1) -> Optional[int]:
    """Integral number >= minimum or None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        return None
    units = int(value)
    if units < minimum:
        return None
    return units


def _tier_offer(log, tier: str, raw_price: Any, raw_minimum: Any) -> Optional[TierOffer]:
    if raw_price is None and raw_minimum is None:
        return None

    price = _as_price(raw_price)
    minimum_units = _as_units(raw_minimum)
    if price is None or minimum_units is None:
        # 0/"" were falsy "not configured" markers in the catalog UI
        if not raw_price and not raw_minimum:
            return None
        log.warning(
            MALFORMED_PRODUCT_DATA,
            tier=tier,
            price=raw_price,
            minimum_units=raw_minimum,
            action="tier_dropped",
        )
        return None

    return TierOffer(price=price, minimum_units=minimum_units)


def _vendor_id_of(payload: Mapping[str, Any]) -> str:
    vendor_ref = payload.get("vendorId")
    if isinstance(vendor_ref, Mapping):
        vendor_ref = vendor_ref.get("_id")
    if not vendor_ref:
        vendor = payload.get("vendor")
        if isinstance(vendor, Mapping):
            vendor_ref = vendor.get("_id")
    return str(vendor_ref or "")
