"""
Tests for PriceTierResolver

Checks:
1. Tier construction from the tagged PricingTiers variants
2. Ordering and non-overlap of tiers
3. Single active tier for any quantity
4. Effective price fallback (quantity 0)
5. Degenerate configurations (bulk minimum 1, bulk above large minimum)
6. Monotonicity warnings
"""

import pytest
from structlog.testing import capture_logs

from cart_engine.core.domain import Product, TierOffer, make_pricing_tiers
from cart_engine.pricing.tiers import (
    TierKind,
    active_tier,
    build_tiers,
    check_catalog_pricing,
    check_tier_monotonicity,
    effective_price,
    resolve_tiers,
)

# =============================================================================
# FIXTURES
# =============================================================================


def make_product(
    bulk: tuple[float, int] | None = None,
    large: tuple[float, int] | None = None,
    base_price: float = 100.0,
    discounted_price: float | None = 90.0,
    product_id: str = "p-1",
) -> Product:
    """Helper: product with optional (price, minimum_units) tiers"""
    return Product(
        product_id=product_id,
        vendor_id="v-1",
        base_price=base_price,
        discounted_price=discounted_price,
        tiers=make_pricing_tiers(
            TierOffer(price=bulk[0], minimum_units=bulk[1]) if bulk else None,
            TierOffer(price=large[0], minimum_units=large[1]) if large else None,
        ),
        stock=1000,
    )


@pytest.fixture
def tiered_product() -> Product:
    """base 100, discounted 90, bulk 80 @ 10, large 70 @ 50"""
    return make_product(bulk=(80.0, 10), large=(70.0, 50))


# =============================================================================
# CONSTRUCTION
# =============================================================================


class TestBuildTiers:
    """Tests for build_tiers"""

    def test_three_tiers(self, tiered_product: Product) -> None:
        """[1-9 @90], [10-49 @80], [>=50 @70]"""
        tiers = build_tiers(tiered_product)

        assert [t.kind for t in tiers] == [TierKind.DEFAULT, TierKind.BULK, TierKind.LARGE_QUANTITY]
        assert [(t.min_qty, t.max_qty, t.unit_price) for t in tiers] == [
            (1, 9, 90.0),
            (10, 49, 80.0),
            (50, None, 70.0),
        ]
        assert [t.label for t in tiers] == ["1 - 9 pcs", "10 - 49 pcs", ">= 50 pcs"]
        assert not any(t.is_active for t in tiers)

    def test_default_only(self) -> None:
        tiers = build_tiers(make_product())

        assert len(tiers) == 1
        assert tiers[0].kind == TierKind.DEFAULT
        assert tiers[0].max_qty is None
        assert tiers[0].label == "1 - max pcs"
        assert tiers[0].unit_price == 90.0

    def test_default_uses_base_without_discount(self) -> None:
        tiers = build_tiers(make_product(discounted_price=None))
        assert tiers[0].unit_price == 100.0

    def test_bulk_only_unbounded(self) -> None:
        tiers = build_tiers(make_product(bulk=(80.0, 10)))
        assert [t.label for t in tiers] == ["1 - 9 pcs", "10 - max pcs"]
        assert tiers[-1].max_qty is None

    def test_large_only(self) -> None:
        tiers = build_tiers(make_product(large=(70.0, 50)))
        assert [(t.kind, t.min_qty, t.max_qty) for t in tiers] == [
            (TierKind.DEFAULT, 1, 49),
            (TierKind.LARGE_QUANTITY, 50, None),
        ]

    def test_bulk_minimum_one_drops_default(self) -> None:
        """Bulk from 1 unit: the default range is empty, bulk price applies to 1"""
        product = make_product(bulk=(80.0, 1), large=(70.0, 50))
        tiers = build_tiers(product)

        assert [t.kind for t in tiers] == [TierKind.BULK, TierKind.LARGE_QUANTITY]
        assert effective_price(product, 1) == 80.0

    def test_bulk_minimum_above_large_dropped(self) -> None:
        """Bulk minimum >= large minimum: bulk range is empty"""
        product = make_product(bulk=(80.0, 50), large=(70.0, 20))
        tiers = build_tiers(product)

        assert [(t.kind, t.min_qty, t.max_qty) for t in tiers] == [
            (TierKind.DEFAULT, 1, 19),
            (TierKind.LARGE_QUANTITY, 20, None),
        ]

    def test_equal_minimums_large_wins(self) -> None:
        product = make_product(bulk=(80.0, 20), large=(70.0, 20))
        assert [t.kind for t in build_tiers(product)] == [TierKind.DEFAULT, TierKind.LARGE_QUANTITY]
        assert effective_price(product, 20) == 70.0


# =============================================================================
# RESOLUTION
# =============================================================================


class TestResolution:
    """Tests for resolve_tiers / active_tier / effective_price"""

    @pytest.mark.parametrize(
        "quantity, expected",
        [(0, 90.0), (1, 90.0), (9, 90.0), (10, 80.0), (25, 80.0), (49, 80.0), (50, 70.0), (5000, 70.0)],
    )
    def test_effective_price(self, tiered_product: Product, quantity: int, expected: float) -> None:
        assert effective_price(tiered_product, quantity) == expected

    def test_quantity_zero_no_active_tier(self, tiered_product: Product) -> None:
        assert active_tier(tiered_product, 0) is None
        assert not any(t.is_active for t in resolve_tiers(tiered_product, 0))

    def test_active_flag(self, tiered_product: Product) -> None:
        tiers = resolve_tiers(tiered_product, 25)
        assert [t.is_active for t in tiers] == [False, True, False]
        assert active_tier(tiered_product, 25).kind == TierKind.BULK

    @pytest.mark.parametrize(
        "bulk, large",
        [
            ((80.0, 10), (70.0, 50)),
            ((80.0, 1), (70.0, 5)),
            ((80.0, 50), (70.0, 20)),
            ((80.0, 30), None),
            (None, (70.0, 2)),
            (None, None),
        ],
    )
    def test_ordered_non_overlapping_single_active(self, bulk, large) -> None:
        product = make_product(bulk=bulk, large=large)
        tiers = build_tiers(product)

        for lower, higher in zip(tiers, tiers[1:]):
            assert lower.max_qty is not None
            assert lower.max_qty < higher.min_qty

        for quantity in range(0, 120):
            active = [t for t in resolve_tiers(product, quantity) if t.is_active]
            assert len(active) <= 1
            if quantity >= 1:
                assert len(active) == 1


# =============================================================================
# DATA INTEGRITY
# =============================================================================


class TestMonotonicity:
    """Tests for check_tier_monotonicity / check_catalog_pricing"""

    def test_consistent_product(self, tiered_product: Product) -> None:
        with capture_logs() as logs:
            assert check_tier_monotonicity(tiered_product) == []
        assert not any(log["event"] == "tier_price_not_monotonic" for log in logs)

    def test_bulk_above_default_warns(self) -> None:
        """Misconfigured bulk price is reported, not rejected"""
        product = make_product(bulk=(95.0, 10))

        with capture_logs() as logs:
            violations = check_tier_monotonicity(product)

        assert len(violations) == 1
        assert "bulk" in violations[0]
        warning = next(log for log in logs if log["event"] == "tier_price_not_monotonic")
        assert warning["log_level"] == "warning"
        assert warning["product_id"] == "p-1"
        # pricing still uses configured price
        assert effective_price(product, 10) == 95.0

    def test_catalog_report(self, tiered_product: Product) -> None:
        bad = make_product(large=(120.0, 5), product_id="p-bad")
        report = check_catalog_pricing({"p-1": tiered_product, "p-bad": bad})
        assert list(report) == ["p-bad"]
