"""Quote service: the router's public operations.

Exact input runs discovery, route search, route quoting and the split
optimizer, falling back to direct venue quoting when no discovered route
quotes. Exact output inverts that pipeline with the bisection solver.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from enum import Enum

import structlog
from pydantic import BaseModel, Field, model_validator

from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from dexrouter.errors import NoLiquidityError
from dexrouter.models.pool import PoolSnapshotProvider
from dexrouter.models.types import Address, Uint, normalize_address
from dexrouter.quoting.caller import VenueCaller
from dexrouter.quoting.direct import DirectQuoter
from dexrouter.quoting.oracle import QuoteOracle
from dexrouter.routing.discovery import PoolDiscovery, bridge_tokens, discover_pairs, pairs_to_discover
from dexrouter.routing.exact_output import ExactOutputSolver
from dexrouter.routing.graph import GraphCache
from dexrouter.routing.pathfinding import find_routes, format_route
from dexrouter.routing.split import SplitOptimizer
from dexrouter.routing.types import DiscoveredRoute, ExecutionPlan, Quote, RouteQuote

logger = structlog.get_logger()


class TradeMode(str, Enum):
    """Which side of the trade is fixed."""

    EXACT_INPUT = "exact_input"
    EXACT_OUTPUT = "exact_output"


class QuoteRequest(BaseModel):
    """A quote request for one pair on one chain."""

    chain_id: int = Field(alias="chainId", gt=0)
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    # Input amount for exact input, desired output for exact output
    amount: Uint
    mode: TradeMode = TradeMode.EXACT_INPUT
    decimals_in: int = Field(default=18, alias="decimalsIn", ge=0, le=77)
    decimals_out: int = Field(default=18, alias="decimalsOut", ge=0, le=77)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _check_request(self) -> QuoteRequest:
        if self.token_in == self.token_out:
            raise ValueError("token_in and token_out must differ")
        if self.amount <= 0:
            raise ValueError("amount must be positive")
        return self


class QuoteService:
    """Orchestrates discovery, search, quoting and allocation.

    Usage:
        service = QuoteService(snapshots, caller, discovery)
        plan = await service.quote_exact_input(1, weth, usdc, 10**18)
    """

    def __init__(
        self,
        snapshots: PoolSnapshotProvider,
        caller: VenueCaller,
        discovery: PoolDiscovery | None = None,
        config: RouterConfig = DEFAULT_ROUTER_CONFIG,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.discovery = discovery
        self.graph_cache = GraphCache(snapshots, ttl_seconds=config.graph_ttl_seconds, clock=clock)
        self.oracle = QuoteOracle(caller, config)
        self.direct = DirectQuoter(caller, config)
        self.optimizer = SplitOptimizer(config)
        self.solver = ExactOutputSolver(config)

    async def find_routes(self, chain_id: int, token_in: str, token_out: str) -> list[DiscoveredRoute]:
        """Discover pools for the pair, rebuild the graph and search it."""
        token_in = normalize_address(token_in)
        token_out = normalize_address(token_out)

        if self.discovery is not None:
            await self._discover(self.discovery, chain_id, token_in, token_out)
            self.graph_cache.invalidate(chain_id)

        graph = await self.graph_cache.get_graph(chain_id)
        for token in (token_in, token_out):
            if not graph.has_token(token):
                logger.warning("token_not_in_graph", chain_id=chain_id, token=token)
                return []

        routes = find_routes(
            graph,
            token_in,
            token_out,
            max_hops=self.config.max_hops,
            max_routes=self.config.max_routes,
        )
        logger.info(
            "routes_discovered",
            chain_id=chain_id,
            token_in=token_in,
            token_out=token_out,
            routes=len(routes),
            best=format_route(routes[0]) if routes else None,
        )
        return routes

    async def _discover(
        self, discovery: PoolDiscovery, chain_id: int, token_in: str, token_out: str
    ) -> None:
        graph = await self.graph_cache.get_graph(chain_id)
        bridges = bridge_tokens(
            chain_id,
            token_in,
            token_out,
            known_tokens=graph.adjacency.keys(),
            max_bridges=self.config.max_bridge_tokens,
        )
        pairs = pairs_to_discover(token_in, token_out, bridges)
        await discover_pairs(discovery, chain_id, pairs)

    async def get_quotes_for_routes(
        self,
        chain_id: int,
        routes: Sequence[DiscoveredRoute],
        amount_in: int,
        decimals_in: int = 18,
    ) -> list[RouteQuote]:
        return await self.oracle.get_quotes_for_routes(chain_id, routes, amount_in, decimals_in)

    def optimize_split(
        self, quotes: Sequence[Quote], amount_in: int, decimals_in: int = 18
    ) -> ExecutionPlan:
        return self.optimizer.optimize(quotes, amount_in, decimals_in)

    async def quote_exact_input(
        self,
        chain_id: int,
        token_in: str,
        token_out: str,
        amount_in: int,
        decimals_in: int = 18,
    ) -> ExecutionPlan:
        """Best plan for selling amount_in of token_in.

        Raises:
            NoLiquidityError: If neither routes nor direct venues quote the pair
        """
        token_in = normalize_address(token_in)
        token_out = normalize_address(token_out)
        routes = await self.find_routes(chain_id, token_in, token_out)
        return await self._quote_amount(chain_id, token_in, token_out, amount_in, decimals_in, routes)

    async def _quote_amount(
        self,
        chain_id: int,
        token_in: str,
        token_out: str,
        amount_in: int,
        decimals_in: int,
        routes: Sequence[DiscoveredRoute],
    ) -> ExecutionPlan:
        quotes: Sequence[Quote] = []
        if routes:
            quotes = await self.oracle.get_quotes_for_routes(chain_id, routes, amount_in, decimals_in)
        if quotes:
            return self.optimizer.optimize(quotes, amount_in, decimals_in)

        logger.warning(
            "route_quotes_empty_using_direct_venues",
            chain_id=chain_id,
            token_in=token_in,
            token_out=token_out,
            routes=len(routes),
        )
        venue_quotes = await self.direct.fetch_all_quotes(chain_id, token_in, token_out, amount_in)
        if venue_quotes:
            return self.optimizer.optimize(venue_quotes, amount_in, decimals_in)

        raise NoLiquidityError(chain_id, token_in, token_out, amount_in)

    async def solve_exact_output(
        self,
        chain_id: int,
        token_in: str,
        token_out: str,
        desired_output: int,
        decimals_in: int = 18,
        decimals_out: int = 18,
    ) -> ExecutionPlan:
        """Plan buying desired_output of token_out; amount_in is inferred.

        Routes are discovered once and re-quoted at every trial amount.

        Raises:
            NoLiquidityError: If no trial amount could be quoted
        """
        token_in = normalize_address(token_in)
        token_out = normalize_address(token_out)
        routes = await self.find_routes(chain_id, token_in, token_out)

        async def _quote(amount_in: int) -> ExecutionPlan:
            return await self._quote_amount(chain_id, token_in, token_out, amount_in, decimals_in, routes)

        try:
            return await self.solver.solve(_quote, desired_output, decimals_in, decimals_out)
        except NoLiquidityError as err:
            raise NoLiquidityError(
                chain_id,
                token_in,
                token_out,
                desired_output,
                message=f"No liquidity for requested output {desired_output} of {token_out} "
                f"from {token_in} (chain={chain_id})",
            ) from err

    async def quote(self, request: QuoteRequest) -> ExecutionPlan:
        """Dispatch a validated request on its trade mode."""
        if request.mode is TradeMode.EXACT_OUTPUT:
            return await self.solve_exact_output(
                request.chain_id,
                request.token_in,
                request.token_out,
                request.amount,
                request.decimals_in,
                request.decimals_out,
            )
        return await self.quote_exact_input(
            request.chain_id,
            request.token_in,
            request.token_out,
            request.amount,
            request.decimals_in,
        )


__all__ = ["TradeMode", "QuoteRequest", "QuoteService"]
