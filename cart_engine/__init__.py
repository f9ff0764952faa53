"""
cart_engine — quantity-tiered pricing, delivery eligibility and cart totals
for the storefront mobile app.

Pure computation over catalog data; the only asynchronous boundary is the
cart server gateway used by CartLineController.
"""

__version__ = "0.1.0"
