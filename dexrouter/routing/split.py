"""Split allocation: single best quote vs. a percentage split across quotes.

All share arithmetic is done in integer basis points (1 bp = 0.01%) and
amounts in smallest units, so legs always sum exactly. Each leg's output is
the full-amount quote scaled by its share; smaller legs are not re-quoted.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from dexrouter.constants import BPS_DENOMINATOR
from dexrouter.errors import NoLiquidityError
from dexrouter.routing.types import ExecutionPlan, PlanLeg, Quote

logger = structlog.get_logger()


def round_half_up_div(numerator: int, denominator: int) -> int:
    """Integer division rounding halves up (non-negative operands)."""
    return (2 * numerator + denominator) // (2 * denominator)


class SplitOptimizer:
    """Turns ranked quotes into an execution plan.

    The same profitability gate applies whether the quotes come from
    discovered routes or from direct venue quoting.
    """

    def __init__(self, config: RouterConfig = DEFAULT_ROUTER_CONFIG) -> None:
        self.config = config

    def should_split(self, split_output: int, single_output: int) -> bool:
        """True iff the split beats the single quote by more than the threshold.

        split > single * (1 + improvement), evaluated in integers.
        """
        improvement = BPS_DENOMINATOR + self.config.split_improvement_bps
        return split_output * BPS_DENOMINATOR > single_output * improvement

    def is_small_trade(self, amount_in: int, decimals_in: int) -> bool:
        return amount_in < self.config.small_trade_units * 10**decimals_in

    def allocate(self, quotes: Sequence[Quote]) -> list[tuple[Quote, int]]:
        """Basis-point allocation over the top quotes (sorted best first).

        Shares are proportional to each quote's output. Quotes whose raw share
        is below the minimum are dropped, the survivors renormalized with
        round-half-up, and any residual given to the best leg.

        Returns:
            (quote, bps) pairs summing to 10_000; a single pair means no split
        """
        top = list(quotes[: self.config.max_splits])
        total = sum(quote.amount_out for quote in top)
        if len(top) <= 1 or total <= 0:
            return [(top[0], BPS_DENOMINATOR)] if top else []

        min_percent = self.config.min_split_percent
        survivors = [quote for quote in top if quote.amount_out * 100 >= min_percent * total]
        if len(survivors) <= 1:
            return [(top[0], BPS_DENOMINATOR)]

        surviving_total = sum(quote.amount_out for quote in survivors)
        shares = [
            round_half_up_div(quote.amount_out * BPS_DENOMINATOR, surviving_total)
            for quote in survivors
        ]
        shares[0] += BPS_DENOMINATOR - sum(shares)
        return list(zip(survivors, shares, strict=True))

    def single_plan(self, quote: Quote, amount_in: int) -> ExecutionPlan:
        leg = PlanLeg(
            quote=quote,
            percentage_bps=BPS_DENOMINATOR,
            amount_in=amount_in,
            amount_out=quote.amount_out,
        )
        return ExecutionPlan(
            legs=(leg,),
            amount_in=amount_in,
            total_output=quote.amount_out,
            total_gas=quote.estimated_gas,
            price_impact=quote.price_impact,
            is_split=False,
        )

    def split_plan(self, allocation: Sequence[tuple[Quote, int]], amount_in: int) -> ExecutionPlan:
        """Plan over an allocation; leg inputs are scaled and sum to amount_in."""
        leg_inputs = [amount_in * bps // BPS_DENOMINATOR for _, bps in allocation]
        leg_inputs[0] += amount_in - sum(leg_inputs)

        legs = tuple(
            PlanLeg(
                quote=quote,
                percentage_bps=bps,
                amount_in=leg_in,
                amount_out=quote.amount_out * bps // BPS_DENOMINATOR,
            )
            for (quote, bps), leg_in in zip(allocation, leg_inputs, strict=True)
        )
        return ExecutionPlan(
            legs=legs,
            amount_in=amount_in,
            total_output=sum(leg.amount_out for leg in legs),
            total_gas=sum(leg.estimated_gas for leg in legs),
            price_impact=sum(quote.price_impact * bps for quote, bps in allocation) / BPS_DENOMINATOR,
            is_split=len(legs) > 1,
        )

    def optimize(self, quotes: Sequence[Quote], amount_in: int, decimals_in: int = 18) -> ExecutionPlan:
        """Choose between the best single quote and a split.

        Args:
            quotes: Candidate quotes, in any order
            amount_in: Input amount in smallest units
            decimals_in: Input token decimals (for the small-trade threshold)

        Returns:
            ExecutionPlan over amount_in

        Raises:
            NoLiquidityError: If there are no quotes
        """
        if not quotes:
            raise NoLiquidityError(amount=amount_in)

        ranked = sorted(quotes, key=lambda quote: quote.amount_out, reverse=True)
        best = ranked[0]
        single = self.single_plan(best, amount_in)

        if len(ranked) == 1 or self.is_small_trade(amount_in, decimals_in):
            return single

        allocation = self.allocate(ranked)
        if len(allocation) <= 1:
            return single

        split = self.split_plan(allocation, amount_in)
        chosen = split if self.should_split(split.total_output, single.total_output) else single

        logger.info(
            "split_evaluated",
            candidates=len(ranked),
            legs=len(allocation),
            single_output=single.total_output,
            split_output=split.total_output,
            is_split=chosen.is_split,
        )
        return chosen


__all__ = ["SplitOptimizer", "round_half_up_div"]
