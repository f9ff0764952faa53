"""
Core domain models, numerical primitives, configuration and contracts.

This package is independent of external systems (cart server, catalog API,
UI state).
"""
