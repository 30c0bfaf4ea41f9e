"""Route quoting against venue pricing functions.

Each hop of a route is priced in order, feeding the previous hop's output
into the next. Concentrated-liquidity hops try every configured fee tier
concurrently and keep the best one. Any failing attempt is absorbed: a hop
fails only when all of its attempts fail, and a failed hop makes the whole
route return None instead of raising.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence

import structlog

from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from dexrouter.constants import (
    ADDITIONAL_HOP_PRICE_IMPACT,
    AMOUNT_PRICE_IMPACT_FACTOR,
    MAX_AMOUNT_PRICE_IMPACT,
    V2_PRICE_IMPACT,
    V3_PRICE_IMPACT,
)
from dexrouter.models.pool import VenueFamily
from dexrouter.quoting.caller import VenueCaller, call_or_none
from dexrouter.routing.types import DiscoveredRoute, HopQuote, RouteHop, RouteQuote
from dexrouter.venues import VENUES, get_venue_contracts

logger = structlog.get_logger()


def estimate_price_impact(
    family: VenueFamily, hops: int, amount_in: int, decimals_in: int = 18
) -> float:
    """Rough price impact in percent.

    A single hop uses the family baseline. Multi-hop routes add a per-hop
    increment and a small amount-dependent term, capped at 1%.
    """
    baseline = V3_PRICE_IMPACT if family is VenueFamily.CONCENTRATED else V2_PRICE_IMPACT
    if hops <= 1:
        return baseline
    amount_units = amount_in / 10**decimals_in
    amount_impact = min(amount_units * AMOUNT_PRICE_IMPACT_FACTOR, MAX_AMOUNT_PRICE_IMPACT)
    return baseline + ADDITIONAL_HOP_PRICE_IMPACT * (hops - 1) + amount_impact


def pick_best_tier(results: Sequence[tuple[int, int | None]], default_tier: int) -> tuple[int, int] | None:
    """Best (tier, amount_out) among tier attempts.

    Highest output wins; on equal output the default tier is preferred, then
    the earliest attempt. Missing or non-positive outputs are ignored.
    """
    best: tuple[int, int] | None = None
    for tier, amount_out in results:
        if amount_out is None or amount_out <= 0:
            continue
        if best is None or amount_out > best[1] or (amount_out == best[1] and tier == default_tier):
            best = (tier, amount_out)
    return best


def hop_pricing_key(hop: RouteHop) -> tuple[str, ...]:
    """What a hop's quote depends on.

    Concentrated hops are priced by venue, pair and fee tier rather than by
    pool, so parallel tier pools of one venue share a key.
    """
    if hop.family is VenueFamily.CONCENTRATED:
        return (hop.venue_id, hop.token_in, hop.token_out)
    return (hop.pool_address,)


def dedupe_tier_routes(routes: Sequence[DiscoveredRoute]) -> list[DiscoveredRoute]:
    """Drop routes that would price identically to an earlier route.

    Two routes collide when they differ only in which same-venue, same-pair
    concentrated pool a hop goes through. The first route is kept.
    """
    seen: set[tuple[tuple[str, ...], ...]] = set()
    unique: list[DiscoveredRoute] = []
    for route in routes:
        key = tuple(hop_pricing_key(hop) for hop in route.hops)
        if key in seen:
            continue
        seen.add(key)
        unique.append(route)
    return unique


def collect_tier_pools(routes: Sequence[DiscoveredRoute]) -> dict[tuple[str, ...], dict[int, str]]:
    """Snapshot pool address per fee tier for each concentrated venue pair."""
    tier_pools: dict[tuple[str, ...], dict[int, str]] = {}
    for route in routes:
        for hop in route.hops:
            tier = hop.edge.fee_tier
            if hop.family is VenueFamily.CONCENTRATED and tier is not None:
                tier_pools.setdefault(hop_pricing_key(hop), {}).setdefault(tier, hop.pool_address)
    return tier_pools


class QuoteOracle:
    """Prices discovered routes hop by hop.

    Usage:
        oracle = QuoteOracle(caller)
        quotes = await oracle.get_quotes_for_routes(chain_id, routes, amount_in)
    """

    def __init__(self, caller: VenueCaller, config: RouterConfig = DEFAULT_ROUTER_CONFIG) -> None:
        self.caller = caller
        self.config = config

    async def get_quotes_for_routes(
        self,
        chain_id: int,
        routes: Sequence[DiscoveredRoute],
        amount_in: int,
        decimals_in: int = 18,
    ) -> list[RouteQuote]:
        """Quote all routes concurrently.

        Routes that differ only in which parallel tier pool they use are
        quoted once, and each concentrated hop reports the snapshot pool that
        matches its winning tier.

        Returns:
            Successful quotes sorted by output descending (stable)
        """
        unique = dedupe_tier_routes(routes)
        tier_pools = collect_tier_pools(routes)
        results = await asyncio.gather(
            *(
                self.quote_route(chain_id, route, amount_in, decimals_in, tier_pools)
                for route in unique
            )
        )
        quotes = [quote for quote in results if quote is not None]
        quotes.sort(key=lambda quote: quote.amount_out, reverse=True)

        logger.info(
            "route_quotes_collected",
            chain_id=chain_id,
            routes=len(routes),
            unique_routes=len(unique),
            quoted=len(quotes),
            best_output=quotes[0].amount_out if quotes else None,
        )
        return quotes

    async def quote_route(
        self,
        chain_id: int,
        route: DiscoveredRoute,
        amount_in: int,
        decimals_in: int = 18,
        tier_pools: Mapping[tuple[str, ...], Mapping[int, str]] | None = None,
    ) -> RouteQuote | None:
        """Quote a route, or None if any hop produces no quote."""
        hop_quotes: list[HopQuote] = []
        current_amount = amount_in

        # Hops are sequential: each consumes the previous hop's output
        for hop in route.hops:
            hop_quote = await self.quote_hop(chain_id, hop, current_amount, tier_pools)
            if hop_quote is None:
                logger.debug(
                    "route_hop_failed",
                    chain_id=chain_id,
                    token_in=hop.token_in,
                    token_out=hop.token_out,
                    venue=hop.venue_id,
                )
                return None
            hop_quotes.append(hop_quote)
            current_amount = hop_quote.amount_out

        return RouteQuote(
            route=route,
            amount_in=amount_in,
            amount_out=current_amount,
            price_impact=estimate_price_impact(
                route.hops[0].family, route.total_hops, amount_in, decimals_in
            ),
            estimated_gas=route.estimated_gas,
            hops=tuple(hop_quotes),
        )

    async def quote_hop(
        self,
        chain_id: int,
        hop: RouteHop,
        amount_in: int,
        tier_pools: Mapping[tuple[str, ...], Mapping[int, str]] | None = None,
    ) -> HopQuote | None:
        """Quote a single hop with its venue's pricing convention.

        Args:
            tier_pools: Known pool address per fee tier for concentrated venue
                pairs; the winning tier's pool replaces the hop's own when present
        """
        # Unregistered venues have no known pricing convention
        if hop.venue_id not in VENUES:
            return None
        contracts = get_venue_contracts(chain_id, hop.venue_id)
        if contracts is None:
            return None

        family = hop.family
        if family is VenueFamily.CONCENTRATED:
            if contracts.quoter is None:
                return None
            best = await self._best_v3_tier(contracts.quoter, hop, amount_in)
            if best is None:
                return None
            tier, amount_out = best
            if hop.edge.fee_tier == tier:
                pool_address = hop.pool_address
            else:
                known = (tier_pools or {}).get(hop_pricing_key(hop), {})
                pool_address = known.get(tier, hop.pool_address)
            return HopQuote(
                pool_address=pool_address,
                venue_id=hop.venue_id,
                family=family,
                token_in=hop.token_in,
                token_out=hop.token_out,
                amount_in=amount_in,
                amount_out=amount_out,
                fee_tier=tier,
            )

        amount_out = await call_or_none(
            self.caller.get_amounts_out(contracts.router, amount_in, [hop.token_in, hop.token_out]),
            "hop_attempt_failed",
            venue=hop.venue_id,
            token_in=hop.token_in,
            token_out=hop.token_out,
        )
        if amount_out is None or amount_out <= 0:
            return None
        return HopQuote(
            pool_address=hop.pool_address,
            venue_id=hop.venue_id,
            family=family,
            token_in=hop.token_in,
            token_out=hop.token_out,
            amount_in=amount_in,
            amount_out=amount_out,
        )

    def _tiers_for(self, hop: RouteHop) -> list[int]:
        tiers = list(self.config.fee_tiers)
        pool_tier = hop.edge.fee_tier
        if pool_tier is not None and pool_tier not in tiers:
            tiers.append(pool_tier)
        return tiers

    async def _best_v3_tier(
        self, quoter: str, hop: RouteHop, amount_in: int
    ) -> tuple[int, int] | None:
        tiers = self._tiers_for(hop)

        async def _try_tier(tier: int) -> tuple[int, int | None]:
            amount_out = await call_or_none(
                self.caller.quote_exact_input_single(
                    quoter, hop.token_in, hop.token_out, tier, amount_in
                ),
                "hop_attempt_failed",
                venue=hop.venue_id,
                token_in=hop.token_in,
                token_out=hop.token_out,
                fee=tier,
            )
            return tier, amount_out

        results = await asyncio.gather(*(_try_tier(tier) for tier in tiers))
        return pick_best_tier(results, self.config.default_fee_tier)


def best_quote(quotes: Sequence[RouteQuote]) -> RouteQuote | None:
    """Highest-output quote; quotes are expected sorted best first."""
    return quotes[0] if quotes else None


def top_quotes(quotes: Sequence[RouteQuote], count: int = 5) -> list[RouteQuote]:
    """The count highest-output quotes, best first (stable)."""
    return sorted(quotes, key=lambda quote: quote.amount_out, reverse=True)[:count]


__all__ = [
    "QuoteOracle",
    "estimate_price_impact",
    "pick_best_tier",
    "hop_pricing_key",
    "dedupe_tier_routes",
    "collect_tier_pools",
    "best_quote",
    "top_quotes",
]
