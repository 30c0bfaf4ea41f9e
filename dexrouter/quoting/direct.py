"""Direct venue quoting, used when graph routes yield nothing.

Every venue deployed on the chain is asked for the pair directly and through
each bridge token, using the venue's own pricing function. This needs no pool
snapshot, so it still works for pairs the indexer has not seen yet.
"""

from __future__ import annotations

import asyncio
import itertools

import structlog

from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from dexrouter.constants import (
    QUOTE_BRIDGE_SYMBOLS,
    V2_MULTI_HOP_GAS,
    V2_MULTI_HOP_PRICE_IMPACT,
    V2_PRICE_IMPACT,
    V2_SINGLE_HOP_GAS,
    V3_MULTI_HOP_GAS,
    V3_MULTI_HOP_PRICE_IMPACT,
    V3_PRICE_IMPACT,
    V3_SINGLE_HOP_GAS,
    resolve_symbols,
)
from dexrouter.models.pool import VenueFamily
from dexrouter.models.types import normalize_address
from dexrouter.quoting.caller import VenueCaller, call_or_none
from dexrouter.quoting.encoding import encode_v3_path
from dexrouter.quoting.oracle import pick_best_tier
from dexrouter.routing.types import VenueQuote
from dexrouter.venues import VENUES, VenueContracts, get_venue_contracts, venues_for_chain

logger = structlog.get_logger()


def quote_bridges(chain_id: int, token_in: str, token_out: str) -> list[str]:
    """Bridge tokens for direct quoting, excluding the pair itself."""
    pair = {normalize_address(token_in), normalize_address(token_out)}
    symbols = QUOTE_BRIDGE_SYMBOLS.get(chain_id, ())
    return [token for token in resolve_symbols(chain_id, symbols) if token not in pair]


def _better(candidate: VenueQuote | None, best: VenueQuote | None) -> VenueQuote | None:
    # Earlier candidates win ties
    if candidate is None:
        return best
    if best is None or candidate.amount_out > best.amount_out:
        return candidate
    return best


class DirectQuoter:
    """Quotes a pair on every venue of a chain.

    Usage:
        quoter = DirectQuoter(caller)
        quotes = await quoter.fetch_all_quotes(chain_id, token_in, token_out, amount_in)
    """

    def __init__(self, caller: VenueCaller, config: RouterConfig = DEFAULT_ROUTER_CONFIG) -> None:
        self.caller = caller
        self.config = config

    async def fetch_all_quotes(
        self, chain_id: int, token_in: str, token_out: str, amount_in: int
    ) -> list[VenueQuote]:
        """Best quote per venue, in venue registry order; venues without one are omitted."""
        token_in = normalize_address(token_in)
        token_out = normalize_address(token_out)
        venue_ids = venues_for_chain(chain_id)
        if not venue_ids:
            logger.warning("no_venues_for_chain", chain_id=chain_id)
            return []

        results = await asyncio.gather(
            *(self.quote_venue(chain_id, venue_id, token_in, token_out, amount_in) for venue_id in venue_ids)
        )
        quotes = [quote for quote in results if quote is not None]
        logger.info(
            "venue_quotes_collected",
            chain_id=chain_id,
            venues=len(venue_ids),
            quoted=len(quotes),
        )
        return quotes

    async def quote_venue(
        self, chain_id: int, venue_id: str, token_in: str, token_out: str, amount_in: int
    ) -> VenueQuote | None:
        """Best of the direct and bridged quotes on one venue."""
        info = VENUES.get(venue_id)
        contracts = get_venue_contracts(chain_id, venue_id)
        if info is None or contracts is None:
            return None

        bridges = quote_bridges(chain_id, token_in, token_out)
        if info.family is VenueFamily.CONCENTRATED:
            if contracts.quoter is None:
                return None
            single, multi = await asyncio.gather(
                self._v3_single(venue_id, contracts.quoter, token_in, token_out, amount_in),
                self._v3_multi(venue_id, contracts.quoter, token_in, token_out, amount_in, bridges),
            )
        else:
            single, multi = await asyncio.gather(
                self._v2_quote(venue_id, contracts, [token_in, token_out], amount_in),
                self._v2_multi(venue_id, contracts, token_in, token_out, amount_in, bridges),
            )

        logger.debug(
            "venue_quote",
            venue=venue_id,
            single=single.amount_out if single else None,
            multi=multi.amount_out if multi else None,
        )
        return _better(multi, single) if single is not None else multi

    async def _v3_single(
        self, venue_id: str, quoter: str, token_in: str, token_out: str, amount_in: int
    ) -> VenueQuote | None:
        async def _try_tier(tier: int) -> tuple[int, int | None]:
            return tier, await call_or_none(
                self.caller.quote_exact_input_single(quoter, token_in, token_out, tier, amount_in),
                "venue_attempt_failed",
                venue=venue_id,
                fee=tier,
            )

        results = await asyncio.gather(*(_try_tier(tier) for tier in self.config.fee_tiers))
        best = pick_best_tier(results, self.config.default_fee_tier)
        if best is None:
            return None
        tier, amount_out = best
        return VenueQuote(
            venue_id=venue_id,
            venue_name=VENUES[venue_id].name,
            family=VenueFamily.CONCENTRATED,
            amount_in=amount_in,
            amount_out=amount_out,
            estimated_gas=V3_SINGLE_HOP_GAS,
            price_impact=V3_PRICE_IMPACT,
            path=(token_in, token_out),
            fee_tier=tier,
        )

    async def _v3_multi(
        self,
        venue_id: str,
        quoter: str,
        token_in: str,
        token_out: str,
        amount_in: int,
        bridges: list[str],
    ) -> VenueQuote | None:
        candidates = [
            (bridge, fee1, fee2)
            for bridge in bridges
            for fee1, fee2 in itertools.product(self.config.fee_tiers, repeat=2)
        ]

        async def _try_path(bridge: str, fee1: int, fee2: int) -> VenueQuote | None:
            path = (token_in, bridge, token_out)
            encoded = encode_v3_path(list(path), [fee1, fee2])
            amount_out = await call_or_none(
                self.caller.quote_exact_input(quoter, encoded, amount_in),
                venue=venue_id,
                bridge=bridge,
                fees=(fee1, fee2),
            )
            if amount_out is None or amount_out <= 0:
                return None
            return VenueQuote(
                venue_id=venue_id,
                venue_name=VENUES[venue_id].name,
                family=VenueFamily.CONCENTRATED,
                amount_in=amount_in,
                amount_out=amount_out,
                estimated_gas=V3_MULTI_HOP_GAS,
                price_impact=V3_MULTI_HOP_PRICE_IMPACT,
                path=path,
                fee_tiers=(fee1, fee2),
                path_encoded=encoded,
            )

        results = await asyncio.gather(*(_try_path(*candidate) for candidate in candidates))
        best: VenueQuote | None = None
        for result in results:
            best = _better(result, best)
        return best

    async def _v2_quote(
        self, venue_id: str, contracts: VenueContracts, path: list[str], amount_in: int
    ) -> VenueQuote | None:
        amount_out = await call_or_none(
            self.caller.get_amounts_out(contracts.router, amount_in, path),
            venue=venue_id,
            path=path,
        )
        if amount_out is None or amount_out <= 0:
            return None
        multihop = len(path) > 2
        return VenueQuote(
            venue_id=venue_id,
            venue_name=VENUES[venue_id].name,
            family=VenueFamily.CONSTANT_PRODUCT,
            amount_in=amount_in,
            amount_out=amount_out,
            estimated_gas=V2_MULTI_HOP_GAS if multihop else V2_SINGLE_HOP_GAS,
            price_impact=V2_MULTI_HOP_PRICE_IMPACT if multihop else V2_PRICE_IMPACT,
            path=tuple(path),
        )

    async def _v2_multi(
        self,
        venue_id: str,
        contracts: VenueContracts,
        token_in: str,
        token_out: str,
        amount_in: int,
        bridges: list[str],
    ) -> VenueQuote | None:
        results = await asyncio.gather(
            *(
                self._v2_quote(venue_id, contracts, [token_in, bridge, token_out], amount_in)
                for bridge in bridges
            )
        )
        best: VenueQuote | None = None
        for result in results:
            best = _better(result, best)
        return best


__all__ = ["DirectQuoter", "quote_bridges"]
