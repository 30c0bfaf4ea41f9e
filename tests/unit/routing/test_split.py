"""Tests for the split optimizer."""

import pytest

from dexrouter.config import RouterConfig
from dexrouter.errors import NoLiquidityError
from dexrouter.routing.split import SplitOptimizer, round_half_up_div
from dexrouter.routing.types import ExecutionPlan, PlanLeg
from tests.helpers import make_quote

# Large enough (in 18-decimal units) to never count as a small trade
LARGE_AMOUNT = 1000 * 10**18


class TestShouldSplit:
    """Tests for the profitability gate."""

    def test_gate_is_strict(self) -> None:
        optimizer = SplitOptimizer()
        # 1001 is exactly 0.1% above 1000: not enough
        assert not optimizer.should_split(1001, 1000)
        assert optimizer.should_split(1002, 1000)

    def test_gate_scales_with_threshold(self) -> None:
        optimizer = SplitOptimizer(RouterConfig(split_improvement_bps=100))
        assert not optimizer.should_split(101_000, 100_000)
        assert optimizer.should_split(101_001, 100_000)

    def test_split_never_taken_when_worse(self) -> None:
        optimizer = SplitOptimizer()
        assert not optimizer.should_split(999, 1000)
        assert not optimizer.should_split(1000, 1000)


class TestAllocate:
    """Tests for basis-point allocation."""

    def test_proportional_shares(self) -> None:
        optimizer = SplitOptimizer()
        allocation = optimizer.allocate([make_quote(3000), make_quote(1000)])
        assert [bps for _, bps in allocation] == [7500, 2500]

    def test_shares_sum_to_whole(self) -> None:
        optimizer = SplitOptimizer()
        allocation = optimizer.allocate([make_quote(100), make_quote(100), make_quote(100)])

        shares = [bps for _, bps in allocation]
        assert sum(shares) == 10_000
        # Residual basis point goes to the best leg
        assert shares == [3334, 3333, 3333]

    def test_small_legs_dropped_and_renormalized(self) -> None:
        optimizer = SplitOptimizer()
        big, medium, tiny = make_quote(1000), make_quote(500), make_quote(20)

        allocation = optimizer.allocate([big, medium, tiny])

        assert [quote for quote, _ in allocation] == [big, medium]
        assert [bps for _, bps in allocation] == [6667, 3333]

    def test_every_leg_meets_minimum(self) -> None:
        optimizer = SplitOptimizer()
        allocation = optimizer.allocate(
            [make_quote(1000), make_quote(900), make_quote(60), make_quote(50)]
        )
        assert all(bps >= 500 for _, bps in allocation)
        assert sum(bps for _, bps in allocation) == 10_000

    def test_at_most_max_splits_legs(self) -> None:
        optimizer = SplitOptimizer(RouterConfig(max_splits=2))
        allocation = optimizer.allocate([make_quote(100), make_quote(100), make_quote(100)])
        assert len(allocation) == 2

    def test_single_survivor_takes_everything(self) -> None:
        optimizer = SplitOptimizer()
        best = make_quote(1000)
        assert optimizer.allocate([best, make_quote(10)]) == [(best, 10_000)]


class TestOptimize:
    """Tests for SplitOptimizer.optimize."""

    def test_no_quotes_raises(self) -> None:
        with pytest.raises(NoLiquidityError):
            SplitOptimizer().optimize([], LARGE_AMOUNT)

    def test_single_quote(self) -> None:
        quote = make_quote(5000, estimated_gas=150_000, price_impact=0.5)

        plan = SplitOptimizer().optimize([quote], LARGE_AMOUNT)

        assert not plan.is_split
        assert len(plan.legs) == 1
        assert plan.legs[0].percentage_bps == 10_000
        assert plan.legs[0].amount_in == LARGE_AMOUNT
        assert plan.total_output == 5000
        assert plan.total_gas == 150_000
        assert plan.price_impact == 0.5

    def test_best_single_chosen_over_marginal_split(self) -> None:
        weaker = make_quote(1000, venue_id="sushiswap")
        stronger = make_quote(1010, venue_id="uniswap_v2")

        plan = SplitOptimizer().optimize([weaker, stronger], LARGE_AMOUNT)

        assert not plan.is_split
        assert plan.best_quote is stronger
        assert plan.total_output == 1010

    def test_small_trade_never_split(self) -> None:
        quotes = [make_quote(100), make_quote(100), make_quote(100)]
        plan = SplitOptimizer().optimize(quotes, 10**18)
        assert not plan.is_split
        assert plan.total_output == 100

    def test_small_trade_threshold_uses_decimals(self) -> None:
        optimizer = SplitOptimizer()
        assert optimizer.is_small_trade(99 * 10**6, decimals_in=6)
        assert not optimizer.is_small_trade(100 * 10**6, decimals_in=6)

    def test_plan_total_never_below_best_quote(self) -> None:
        quotes = [make_quote(700), make_quote(1000), make_quote(950)]
        plan = SplitOptimizer().optimize(quotes, LARGE_AMOUNT)
        assert plan.total_output >= 1000


class TestSplitPlan:
    """Tests for building split plans from an allocation."""

    def test_leg_inputs_sum_to_amount(self) -> None:
        optimizer = SplitOptimizer()
        allocation = optimizer.allocate([make_quote(100), make_quote(100), make_quote(100)])

        plan = optimizer.split_plan(allocation, 1001)

        assert plan.is_split
        assert sum(leg.amount_in for leg in plan.legs) == 1001
        assert sum(leg.percentage_bps for leg in plan.legs) == 10_000

    def test_outputs_scaled_by_share(self) -> None:
        optimizer = SplitOptimizer()
        first = make_quote(3000, estimated_gas=150_000, price_impact=0.5)
        second = make_quote(1000, estimated_gas=120_000, price_impact=0.3)

        plan = optimizer.split_plan([(first, 7500), (second, 2500)], LARGE_AMOUNT)

        assert [leg.amount_out for leg in plan.legs] == [2250, 250]
        assert plan.total_output == 2500
        assert plan.total_gas == 270_000
        assert plan.price_impact == pytest.approx(0.45)
        assert plan.legs[0].percentage == 75.0


class TestExecutionPlan:
    """Tests for ExecutionPlan construction."""

    def test_legs_must_cover_whole_amount(self) -> None:
        leg = PlanLeg(quote=make_quote(100), percentage_bps=9_000, amount_in=90, amount_out=90)
        with pytest.raises(ValueError):
            ExecutionPlan(legs=(leg,), amount_in=100, total_output=90, total_gas=0, price_impact=0.0)


class TestRoundHalfUp:
    """Tests for round_half_up_div."""

    def test_rounding(self) -> None:
        assert round_half_up_div(5, 2) == 3
        assert round_half_up_div(4, 3) == 1
        assert round_half_up_div(5, 3) == 2
        assert round_half_up_div(6, 3) == 2
