"""
Contract Validation Module

Validation of raw catalog and cart server JSON records.
"""

from .validators import (
    CartLineContractValidator,
    ContractValidator,
    ProductContractValidator,
    SchemaLoader,
    VendorContractValidator,
    validate_cart_line,
    validate_product,
    validate_vendor,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ProductContractValidator",
    "VendorContractValidator",
    "CartLineContractValidator",
    # Functions
    "validate_product",
    "validate_vendor",
    "validate_cart_line",
]
