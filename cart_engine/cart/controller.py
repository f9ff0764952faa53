"""
CartLineController — interactive add/update/remove quantity workflow

request_quantity(product_id, new_quantity):
1. Reject non-integer / negative quantity (QuantityValidationError), before
   any network call
2. Unknown product → UnknownProductError
3. Clamp to available stock, attach StockExceeded notice
4. Additions only: vendor eligibility (VendorUnavailable / OutOfDeliveryRange),
   no state change on rejection; removals are never blocked
5. Same as committed with nothing in flight → NOOP
6. PENDING + one idempotent upsert keyed by (cart_id, product_id)
7. Success → COMMITTED, unit_price_snapshot refreshed from the tier resolver;
   quantity 0 removes the line
8. Failure → ROLLED_BACK to the last committed quantity, NetworkFailure raised

CONCURRENCY:
- At most one mutation in flight per product id. A newer request cancels the
  older call (cancel-and-replace); the older caller gets SUPERSEDED and its
  result is discarded even if it already resolved (sequence token guard)
- Rows are independent: a pending row never blocks another row or the summary
"""

import asyncio
from typing import Final, Optional

import structlog

from cart_engine.cart.gateway import CartGateway, LineUpsert
from cart_engine.cart.state import ChangeOutcome, LineState, QuantityChange
from cart_engine.cart.store import CartStore
from cart_engine.core.domain.cart import CartLine
from cart_engine.core.domain.product import Product
from cart_engine.core.errors import (
    NetworkFailure,
    OutOfDeliveryRange,
    QuantityValidationError,
    StockExceeded,
    UnknownProductError,
    VendorUnavailable,
)
from cart_engine.delivery.eligibility import DeliveryEligibility, EligibilityBlock
from cart_engine.pricing.tiers import effective_price

logger = structlog.get_logger(__name__)

# Upper bound for typed quantities ("99999999" in the quantity box)
MAX_INPUT_DIGITS: Final[int] = 9


def parse_quantity_input(text: str) -> int:
    """
    Parse the quantity text box.

    Empty input means 0; leading zeros are accepted ("007" → 7).

    Raises:
        QuantityValidationError: If the text is not a non-negative integer
    """
    stripped = text.strip()
    if stripped == "":
        return 0
    if not stripped.isdigit() or not stripped.isascii() or len(stripped.lstrip("0")) > MAX_INPUT_DIGITS:
        raise QuantityValidationError(text)
    return int(stripped)


class CartLineController:
    """Owns the quantity workflow of every cart row."""

    def __init__(
        self,
        store: CartStore,
        gateway: CartGateway,
        eligibility: Optional[DeliveryEligibility] = None,
    ):
        """
        Args:
            store: cart store (committed lines + catalog)
            gateway: cart server client
            eligibility: delivery eligibility bound to the user location
        """
        self.store = store
        self.gateway = gateway
        self.eligibility = eligibility or DeliveryEligibility()

        # Per-product sequence tokens and in-flight calls
        self._tokens: dict[str, int] = {}
        self._inflight: dict[str, asyncio.Task] = {}

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def request_quantity(self, product_id: str, new_quantity: int) -> QuantityChange:
        """
        Set the quantity of a product in the cart.

        Args:
            product_id: catalog product id
            new_quantity: desired quantity (0 removes the line)

        Returns:
            QuantityChange (COMMITTED / REMOVED / NOOP / SUPERSEDED)

        Raises:
            QuantityValidationError: negative or non-integer quantity
            UnknownProductError: product not in the catalog
            VendorUnavailable: vendor offline or not approved
            OutOfDeliveryRange: vendor cannot deliver to the user location
            NetworkFailure: server call failed, row rolled back (retryable)
        """
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int) or new_quantity < 0:
            raise QuantityValidationError(new_quantity)

        product = self.store.catalog.product(product_id)
        if product is None:
            raise UnknownProductError(product_id)

        log = logger.bind(cart_id=self.store.cart_id, product_id=product_id)

        # Stock clamp
        quantity = new_quantity
        notices: tuple[StockExceeded, ...] = ()
        available = product.available_stock
        if quantity > available:
            notices = (StockExceeded(product_id=product_id, requested=new_quantity, available=available),)
            quantity = available
            log.info("cart_quantity_clamped", requested=new_quantity, available=available)

        if quantity > 0:
            self._check_vendor(product)

        committed = self.store.committed_quantity(product_id)
        if quantity == committed and not self.store.is_busy(product_id):
            return QuantityChange(
                product_id=product_id,
                outcome=ChangeOutcome.NOOP,
                requested_quantity=new_quantity,
                quantity=committed,
                line=self.store.line(product_id),
                notices=notices,
            )

        return await self._submit(product, new_quantity, quantity, notices, log)

    async def increment(self, product_id: str) -> QuantityChange:
        """+1 on the stepper (clamped to stock)."""
        current = self.store.status(product_id).displayed_quantity
        return await self.request_quantity(product_id, current + 1)

    async def decrement(self, product_id: str) -> QuantityChange:
        """-1 on the stepper (never below 0; 0 removes the line)."""
        current = self.store.status(product_id).displayed_quantity
        return await self.request_quantity(product_id, max(0, current - 1))

    async def retry(self, product_id: str) -> QuantityChange:
        """
        Re-send the quantity of a rolled-back row.

        Raises:
            ValueError: If the row is not in ROLLED_BACK state
        """
        status = self.store.status(product_id)
        if status.state != LineState.ROLLED_BACK or status.requested_quantity is None:
            raise ValueError(f"No failed request to retry for {product_id!r}")
        return await self.request_quantity(product_id, status.requested_quantity)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _check_vendor(self, product: Product) -> None:
        vendor = self.store.catalog.vendor_for(product)
        if vendor is None:
            raise VendorUnavailable(product.vendor_id, "vendor not found in catalog")

        verdict = self.eligibility.evaluate(vendor)
        if verdict.is_eligible:
            return
        if verdict.block_reason == EligibilityBlock.VENDOR_OFFLINE:
            raise VendorUnavailable(vendor.vendor_id, "Vendor is offline.")
        if verdict.block_reason == EligibilityBlock.VENDOR_NOT_APPROVED:
            raise VendorUnavailable(vendor.vendor_id, "Vendor is not approved.")
        raise OutOfDeliveryRange(vendor.vendor_id, verdict.message, verdict.distance_km)

    def _next_token(self, product_id: str) -> int:
        token = self._tokens.get(product_id, 0) + 1
        self._tokens[product_id] = token
        return token

    def _is_current(self, product_id: str, token: int) -> bool:
        return self._tokens.get(product_id) == token

    async def _submit(
        self,
        product: Product,
        requested: int,
        quantity: int,
        notices: tuple[StockExceeded, ...],
        log,
    ) -> QuantityChange:
        product_id = product.product_id
        token = self._next_token(product_id)

        previous = self._inflight.pop(product_id, None)
        if previous is not None and not previous.done():
            previous.cancel()
            log.info("cart_request_superseded", token=token)

        request = LineUpsert(
            cart_id=self.store.cart_id,
            product_id=product_id,
            vendor_id=product.vendor_id,
            quantity=quantity,
            unit_price=effective_price(product, quantity),
        )
        self.store.mark_pending(product_id, quantity)
        task = asyncio.ensure_future(self.gateway.upsert_line(request))
        self._inflight[product_id] = task

        failure: Optional[NetworkFailure] = None
        try:
            await task
        except asyncio.CancelledError:
            if self._is_current(product_id, token):
                # Caller cancelled, not superseded
                self._inflight.pop(product_id, None)
                self.store.rollback(product_id, None)
                raise
            return self._superseded(product_id, requested, quantity, notices)
        except NetworkFailure as e:
            failure = e
        except Exception as e:
            # Transport, timeout and client errors of any gateway
            failure = NetworkFailure(product_id, str(e) or type(e).__name__)

        if not self._is_current(product_id, token):
            log.info("cart_response_discarded", token=token)
            return self._superseded(product_id, requested, quantity, notices)

        self._inflight.pop(product_id, None)

        if failure is not None:
            self.store.rollback(product_id, failure)
            log.warning(
                "cart_line_rolled_back",
                requested=quantity,
                committed=self.store.committed_quantity(product_id),
                error=failure.detail,
            )
            raise failure

        # Catalog may have been refreshed while the call was in flight
        current = self.store.catalog.product(product_id) or product
        line = self.store.commit(
            CartLine(
                product_id=product_id,
                vendor_id=current.vendor_id,
                quantity=quantity,
                unit_price_snapshot=effective_price(current, quantity),
            )
        )
        log.info("cart_line_committed", quantity=quantity)

        return QuantityChange(
            product_id=product_id,
            outcome=ChangeOutcome.REMOVED if quantity == 0 else ChangeOutcome.COMMITTED,
            requested_quantity=requested,
            quantity=quantity,
            line=line,
            notices=notices,
        )

    def _superseded(
        self,
        product_id: str,
        requested: int,
        quantity: int,
        notices: tuple[StockExceeded, ...],
    ) -> QuantityChange:
        return QuantityChange(
            product_id=product_id,
            outcome=ChangeOutcome.SUPERSEDED,
            requested_quantity=requested,
            quantity=quantity,
            notices=notices,
        )
