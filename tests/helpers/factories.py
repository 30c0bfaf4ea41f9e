"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_pool, make_quote
    # or
    from tests.helpers.factories import make_pool, make_quote

    pool = make_pool(TOKEN_A, TOKEN_B, venue_id="uniswap_v3", fee=3000)
"""

from collections.abc import Awaitable, Callable

from dexrouter.models.pool import Pool, VenueFamily
from dexrouter.routing.split import SplitOptimizer
from dexrouter.routing.types import ExecutionPlan, VenueQuote
from tests.helpers.constants import TOKEN_A, TOKEN_B

# Global counter for unique pool addresses
_pool_counter = 0


def make_pool(
    token0: str = TOKEN_A,
    token1: str = TOKEN_B,
    venue_id: str = "uniswap_v2",
    fee: int | None = None,
    liquidity: int = 1000 * 10**18,
    address: str | None = None,
) -> Pool:
    """Create a pool record with a unique address unless one is given."""
    global _pool_counter
    if address is None:
        _pool_counter += 1
        address = f"0x{_pool_counter:040x}"

    return Pool(
        venue_id=venue_id,
        pool_address=address,
        token0=token0,
        token1=token1,
        fee=fee,
        liquidity=liquidity,
    )


def make_quote(
    amount_out: int,
    venue_id: str = "uniswap_v2",
    amount_in: int = 10**18,
    estimated_gas: int = 120_000,
    price_impact: float = 0.3,
    fee_tier: int | None = None,
) -> VenueQuote:
    """Create a direct venue quote (the simplest Quote implementation)."""
    family = VenueFamily.CONCENTRATED if fee_tier is not None else VenueFamily.CONSTANT_PRODUCT
    return VenueQuote(
        venue_id=venue_id,
        venue_name=venue_id,
        family=family,
        amount_in=amount_in,
        amount_out=amount_out,
        estimated_gas=estimated_gas,
        price_impact=price_impact,
        path=(TOKEN_A, TOKEN_B),
        fee_tier=fee_tier,
    )


def linear_pipeline(
    numerator: int, denominator: int, calls: list[int] | None = None
) -> Callable[[int], Awaitable[ExecutionPlan]]:
    """Exact-input pipeline with a constant rate: out = in * num // denom.

    Args:
        numerator: Rate numerator
        denominator: Rate denominator
        calls: Optional list that records every amount quoted
    """
    optimizer = SplitOptimizer()

    async def quote(amount_in: int) -> ExecutionPlan:
        if calls is not None:
            calls.append(amount_in)
        return optimizer.single_plan(
            make_quote(amount_in * numerator // denominator, amount_in=amount_in), amount_in
        )

    return quote


__all__ = ["make_pool", "make_quote", "linear_pipeline"]
