"""
PricingConfig — single canonical configuration for cart pricing

The storefront screens used to re-declare their own literals (free delivery at
200 vs 250, platform fee 3% vs 19%). One immutable config object is built here
and injected into CartPricingAggregator / CartStore instead.
"""

from typing import Any, Final, Mapping

from pydantic import BaseModel, Field

# Canonical defaults (cart checkout screen)
DEFAULT_DELIVERY_CHARGE: Final[float] = 75.0
DEFAULT_FREE_DELIVERY_THRESHOLD: Final[float] = 250.0
DEFAULT_PLATFORM_FEE_RATE: Final[float] = 0.03
DEFAULT_GST_RATE: Final[float] = 0.05

_CAMEL_TO_SNAKE: Final[dict[str, str]] = {
    "deliveryCharge": "delivery_charge",
    "freeDeliveryThreshold": "free_delivery_threshold",
    "platformFeeRate": "platform_fee_rate",
    "gstRate": "gst_rate",
}


class PricingConfig(BaseModel):
    """
    Cart pricing constants.

    Rates are fractions (0.05 == 5%). Immutable (frozen=True).
    """

    delivery_charge: float = Field(
        DEFAULT_DELIVERY_CHARGE, ge=0, allow_inf_nan=False, description="Flat delivery fee"
    )
    free_delivery_threshold: float = Field(
        DEFAULT_FREE_DELIVERY_THRESHOLD,
        ge=0,
        allow_inf_nan=False,
        description="Subtotal from which delivery is free",
    )
    platform_fee_rate: float = Field(
        DEFAULT_PLATFORM_FEE_RATE, ge=0, lt=1, description="Platform fee as a fraction of subtotal"
    )
    gst_rate: float = Field(
        DEFAULT_GST_RATE, ge=0, lt=1, description="Flat GST rate applied to subtotal + platform fee"
    )

    model_config = {"frozen": True}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PricingConfig":
        """
        Build config from a mapping with camelCase (API) or snake_case keys.

        Missing keys fall back to the canonical defaults.

        Raises:
            pydantic.ValidationError: If a value is out of range
        """
        normalized = {_CAMEL_TO_SNAKE.get(key, key): value for key, value in data.items()}
        return cls.model_validate(normalized)


# Canonical instance
DEFAULT_PRICING_CONFIG: Final[PricingConfig] = PricingConfig()
