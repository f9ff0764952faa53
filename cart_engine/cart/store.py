"""
CartStore — single owner of the cart line list

Replaces component-local cart state: the committed lines live here, are
mutated only by CartLineController (mark_pending / commit / rollback) or by a
full server refresh (hydrate), and every summary read goes through
CartPricingAggregator. Nothing derived is cached.

ORDERING:
- Listeners are notified after commit, rollback, hydrate and catalog change,
  never when a request merely becomes pending
- summary() reads committed lines only, so an in-flight quantity never leaks
  into totals
"""

from typing import Any, Callable, Iterable, Mapping, Optional

import structlog

from cart_engine.cart.state import LineState, LineStatus
from cart_engine.core.config import PricingConfig
from cart_engine.core.contracts import CartLineContractValidator
from cart_engine.core.domain.cart import CartLine, CartSummary
from cart_engine.core.domain.catalog import Catalog
from cart_engine.core.errors import CartEngineError
from cart_engine.pricing.aggregator import CartPricingAggregator, PricedLine
from cart_engine.pricing.tiers import check_catalog_pricing

logger = structlog.get_logger(__name__)

SummaryListener = Callable[[CartSummary], None]


class CartStore:
    """Committed cart lines, per-row status and the catalog they are priced against."""

    def __init__(
        self,
        cart_id: str,
        catalog: Optional[Catalog] = None,
        config: Optional[PricingConfig] = None,
    ):
        """
        Args:
            cart_id: server-side cart id (one cart per user session)
            catalog: products/vendors snapshot (empty if omitted)
            config: pricing constants (canonical defaults if omitted)
        """
        self.cart_id = cart_id
        self._catalog = catalog or Catalog()
        self._aggregator = CartPricingAggregator(config)

        self._lines: dict[str, CartLine] = {}
        self._status: dict[str, LineStatus] = {}
        self._listeners: list[SummaryListener] = []

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def config(self) -> PricingConfig:
        return self._aggregator.config

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines.values())

    def line(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def committed_quantity(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line is not None else 0

    def status(self, product_id: str) -> LineStatus:
        status = self._status.get(product_id)
        if status is None:
            return LineStatus(
                product_id=product_id,
                state=LineState.IDLE,
                committed_quantity=self.committed_quantity(product_id),
            )
        return status

    def is_busy(self, product_id: str) -> bool:
        return self.status(product_id).is_busy

    @property
    def busy_product_ids(self) -> frozenset[str]:
        return frozenset(pid for pid, status in self._status.items() if status.is_busy)

    def summary(self) -> CartSummary:
        """Recomputed from committed lines and the current catalog on every call."""
        return self._aggregator.summarize(self._lines.values(), self._catalog.products)

    def summary_by_vendor(self) -> dict[str, CartSummary]:
        return self._aggregator.summarize_by_vendor(self._lines.values(), self._catalog.products)

    def order_lines(self) -> list[PricedLine]:
        return self._aggregator.order_lines(self._lines.values(), self._catalog.products)

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, listener: SummaryListener) -> Callable[[], None]:
        """
        Register a summary listener.

        Returns:
            Function removing the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        summary = self.summary()
        for listener in list(self._listeners):
            listener(summary)

    # -------------------------------------------------------------------------
    # Catalog / server refresh
    # -------------------------------------------------------------------------

    def set_catalog(self, catalog: Catalog) -> dict[str, list[str]]:
        """
        Replace the catalog snapshot and recompute.

        Returns:
            Tier price integrity violations per product (also logged)
        """
        self._catalog = catalog
        violations = check_catalog_pricing(catalog.products)
        self._notify()
        return violations

    def hydrate(self, lines: Iterable[CartLine]) -> None:
        """Replace committed lines with the server's cart (fetch after login / refresh)."""
        self._lines = {line.product_id: line for line in lines if line.quantity > 0}
        self._status = {
            pid: status for pid, status in self._status.items() if status.is_busy
        }
        logger.info("cart_hydrated", cart_id=self.cart_id, line_count=len(self._lines))
        self._notify()

    def hydrate_from_server(self, payload: Iterable[Mapping[str, Any]]) -> None:
        """Hydrate from raw cart server items; records violating the contract are skipped."""
        validator = CartLineContractValidator()
        lines = []
        for raw in payload:
            errors = [e.message for e in validator.iter_errors(raw)]
            if errors:
                logger.warning("cart_line_rejected", cart_id=self.cart_id, errors=errors)
                continue
            try:
                lines.append(CartLine.from_server(raw))
            except ValueError as e:
                logger.warning("cart_line_rejected", cart_id=self.cart_id, errors=[str(e)])
        self.hydrate(lines)

    # -------------------------------------------------------------------------
    # Mutations (CartLineController only)
    # -------------------------------------------------------------------------

    def mark_pending(self, product_id: str, quantity: int) -> None:
        self._status[product_id] = LineStatus(
            product_id=product_id,
            state=LineState.PENDING,
            committed_quantity=self.committed_quantity(product_id),
            requested_quantity=quantity,
        )

    def commit(self, line: CartLine) -> Optional[CartLine]:
        """
        Store the committed line; quantity 0 removes it.

        Returns:
            The stored line, or None if the line was removed
        """
        if line.quantity == 0:
            self._lines.pop(line.product_id, None)
            stored = None
        else:
            self._lines[line.product_id] = line
            stored = line

        self._status[line.product_id] = LineStatus(
            product_id=line.product_id,
            state=LineState.COMMITTED,
            committed_quantity=line.quantity,
        )
        self._notify()
        return stored

    def rollback(self, product_id: str, error: Optional[CartEngineError]) -> None:
        """Revert the row to its last committed quantity."""
        previous = self._status.get(product_id)
        self._status[product_id] = LineStatus(
            product_id=product_id,
            state=LineState.ROLLED_BACK,
            committed_quantity=self.committed_quantity(product_id),
            requested_quantity=previous.requested_quantity if previous is not None else None,
            error=error,
        )
        self._notify()
