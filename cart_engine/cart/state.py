"""
Cart line states and quantity-change results

Per-product line state machine:

    IDLE ──request──▶ PENDING(q) ──ok──▶ COMMITTED(q)
                         │   ▲
                         │   └── newer request (supersede: cancel-and-replace)
                         └──fail──▶ ROLLED_BACK (last committed quantity kept)

COMMITTED / ROLLED_BACK accept new requests like IDLE.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cart_engine.core.domain.cart import CartLine
from cart_engine.core.errors import CartEngineError, StockExceeded


class LineState(str, Enum):
    """State of one product row in the cart."""

    IDLE = "IDLE"
    PENDING = "PENDING"
    COMMITTED = "COMMITTED"
    ROLLED_BACK = "ROLLED_BACK"


@dataclass(frozen=True)
class LineStatus:
    """Row-scoped status used by the UI (busy indicator, displayed quantity, error)."""

    product_id: str
    state: LineState
    committed_quantity: int

    # Quantity in flight (PENDING) or the quantity that failed (ROLLED_BACK)
    requested_quantity: Optional[int] = None

    # Retryable error after a rollback
    error: Optional[CartEngineError] = None

    @property
    def is_busy(self) -> bool:
        return self.state == LineState.PENDING

    @property
    def displayed_quantity(self) -> int:
        """Optimistic quantity while pending, committed quantity otherwise."""
        if self.state == LineState.PENDING and self.requested_quantity is not None:
            return self.requested_quantity
        return self.committed_quantity


class ChangeOutcome(str, Enum):
    """How a quantity request ended (failures raise NetworkFailure instead)."""

    COMMITTED = "COMMITTED"
    REMOVED = "REMOVED"
    NOOP = "NOOP"
    SUPERSEDED = "SUPERSEDED"


@dataclass(frozen=True)
class QuantityChange:
    """Result of CartLineController.request_quantity."""

    product_id: str
    outcome: ChangeOutcome

    # Quantity asked for by the UI and the quantity actually sent (after clamp)
    requested_quantity: int
    quantity: int

    # Line after commit (None when removed / not committed by this request)
    line: Optional[CartLine] = None

    # Correctable notices (stock clamp)
    notices: tuple[StockExceeded, ...] = ()

    @property
    def stock_exceeded(self) -> Optional[StockExceeded]:
        for notice in self.notices:
            if isinstance(notice, StockExceeded):
                return notice
        return None
