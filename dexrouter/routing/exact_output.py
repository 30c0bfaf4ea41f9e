"""Exact-output solving by inverting exact-input quoting.

A small sample quote estimates the exchange rate and gives an initial input
guess. Bisection over [guess / 2, guess * 2] then narrows the input until the
exact-input pipeline returns an output within tolerance of the target, or the
iteration budget runs out. The closest plan seen is returned.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Awaitable, Callable

import structlog

from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from dexrouter.constants import BPS_DENOMINATOR
from dexrouter.errors import NoLiquidityError
from dexrouter.routing.types import ExecutionPlan

logger = structlog.get_logger()

# Exact-input pipeline: amount_in -> plan (None or NoLiquidityError when nothing quotes)
ExactInputQuote = Callable[[int], Awaitable["ExecutionPlan | None"]]


class ExactOutputSolver:
    """Finds the input amount that yields a desired output."""

    def __init__(self, config: RouterConfig = DEFAULT_ROUTER_CONFIG) -> None:
        self.config = config

    def within_tolerance(self, output: int, target: int) -> bool:
        return abs(output - target) * BPS_DENOMINATOR <= target * self.config.exact_output_tolerance_bps

    def sample_amount(self, decimals_in: int) -> int:
        return max(10**decimals_in // self.config.exact_output_sample_divisor, 1)

    async def solve(
        self,
        quote: ExactInputQuote,
        desired_output: int,
        decimals_in: int = 18,
        decimals_out: int = 18,
    ) -> ExecutionPlan:
        """Solve for the input amount producing desired_output.

        Args:
            quote: Exact-input pipeline to invert
            desired_output: Target output in smallest units
            decimals_in: Input token decimals
            decimals_out: Output token decimals

        Returns:
            Closest plan found; its amount_in is the inferred input and
            converged is False when the output missed the tolerance band

        Raises:
            NoLiquidityError: If no trial amount produced a plan
        """
        if desired_output <= 0:
            raise ValueError(f"Desired output must be positive, got {desired_output}")

        sample_in = self.sample_amount(decimals_in)
        sample_plan = await self._try(quote, sample_in)
        if sample_plan is not None and sample_plan.total_output > 0:
            guess = desired_output * sample_in // sample_plan.total_output
        else:
            # No rate available: assume parity in whole tokens
            guess = desired_output * 10**decimals_in // 10**decimals_out
        guess = max(guess, 1)

        low, high = guess // 2, guess * 2
        best: ExecutionPlan | None = None
        best_error: int | None = None

        for iteration in range(self.config.exact_output_max_iterations):
            mid = max((low + high) // 2, 1)
            plan = await self._try(quote, mid)

            if plan is None:
                # Move the bound on the guess side of the failed midpoint
                if mid < guess:
                    low = mid
                else:
                    high = mid
                continue

            error = abs(plan.total_output - desired_output)
            if best_error is None or error < best_error:
                best, best_error = plan, error

            if self.within_tolerance(plan.total_output, desired_output):
                logger.debug("exact_output_converged", iterations=iteration + 1, amount_in=mid)
                break

            if plan.total_output < desired_output:
                low = mid
            else:
                high = mid

        if best is None:
            raise NoLiquidityError(
                amount=desired_output, message=f"No liquidity for requested output {desired_output}"
            )

        converged = self.within_tolerance(best.total_output, desired_output)
        logger.info(
            "exact_output_solved",
            desired_output=desired_output,
            amount_in=best.amount_in,
            output=best.total_output,
            converged=converged,
        )
        return dataclasses.replace(best, desired_output=desired_output, converged=converged)

    @staticmethod
    async def _try(quote: ExactInputQuote, amount_in: int) -> ExecutionPlan | None:
        try:
            return await quote(amount_in)
        except NoLiquidityError:
            return None


__all__ = ["ExactOutputSolver", "ExactInputQuote"]
