"""
Cart — owned cart store and the CartLineController quantity workflow.
"""

from .controller import CartLineController, parse_quantity_input
from .gateway import CartGateway, LineUpsert
from .state import ChangeOutcome, LineState, LineStatus, QuantityChange
from .store import CartStore

__all__ = [
    "CartGateway",
    "CartLineController",
    "CartStore",
    "ChangeOutcome",
    "LineState",
    "LineStatus",
    "LineUpsert",
    "QuantityChange",
    "parse_quantity_input",
]
