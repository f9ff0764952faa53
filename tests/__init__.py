"""
Test suite for cart_engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
