"""
Delivery — vendor delivery-eligibility filtering.
"""

from .eligibility import (
    DeliveryEligibility,
    EligibilityBlock,
    EligibilityResult,
    distance_message,
    evaluate,
    is_eligible,
    products_in_range,
    vendors_in_range,
)

__all__ = [
    "DeliveryEligibility",
    "EligibilityBlock",
    "EligibilityResult",
    "distance_message",
    "evaluate",
    "is_eligible",
    "products_in_range",
    "vendors_in_range",
]
