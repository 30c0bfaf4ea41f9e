"""Tests for direct venue quoting."""

import asyncio

from dexrouter.models.pool import VenueFamily
from dexrouter.quoting.caller import MockVenueCaller
from dexrouter.quoting.direct import DirectQuoter, quote_bridges
from dexrouter.quoting.encoding import encode_v3_path
from tests.helpers import (
    DAI,
    MAINNET,
    SUSHISWAP_ROUTER,
    TOKEN_A,
    TOKEN_B,
    UNISWAP_V2_ROUTER,
    UNISWAP_V3_QUOTER,
    USDC,
    USDT,
    WBTC,
    WETH,
)


class TestQuoteBridges:
    """Tests for quote_bridges."""

    def test_mainnet_bridges(self) -> None:
        assert quote_bridges(MAINNET, TOKEN_A, TOKEN_B) == [WETH, USDC, USDT, DAI, WBTC]

    def test_pair_excluded(self) -> None:
        assert quote_bridges(MAINNET, WETH, USDC) == [USDT, DAI, WBTC]

    def test_unknown_chain_has_none(self) -> None:
        assert quote_bridges(999, TOKEN_A, TOKEN_B) == []


class TestFetchAllQuotes:
    """Tests for DirectQuoter.fetch_all_quotes."""

    def test_only_quoting_venues_returned(self) -> None:
        caller = MockVenueCaller()
        caller.set_amounts_out(UNISWAP_V2_ROUTER, [TOKEN_A, TOKEN_B], 1000)

        quotes = asyncio.run(DirectQuoter(caller).fetch_all_quotes(MAINNET, TOKEN_A, TOKEN_B, 10**18))

        assert len(quotes) == 1
        quote = quotes[0]
        assert quote.venue_id == "uniswap_v2"
        assert quote.venue_name == "Uniswap V2"
        assert quote.family is VenueFamily.CONSTANT_PRODUCT
        assert quote.path == (TOKEN_A, TOKEN_B)
        assert quote.amount_out == 1000
        assert quote.estimated_gas == 120_000
        assert quote.price_impact == 0.3
        assert not quote.is_multihop

    def test_every_venue_quoted_in_registry_order(self) -> None:
        caller = MockVenueCaller(default_rate=(1, 1))

        quotes = asyncio.run(DirectQuoter(caller).fetch_all_quotes(MAINNET, TOKEN_A, TOKEN_B, 1000))

        assert [quote.venue_id for quote in quotes] == [
            "uniswap_v3",
            "uniswap_v2",
            "sushiswap",
            "sushiswap_v3",
        ]

    def test_unknown_chain_returns_empty(self) -> None:
        caller = MockVenueCaller(default_rate=(1, 1))
        assert asyncio.run(DirectQuoter(caller).fetch_all_quotes(999, TOKEN_A, TOKEN_B, 1000)) == []
        assert caller.calls == []


class TestQuoteVenue:
    """Tests for DirectQuoter.quote_venue."""

    def test_bridge_route_wins_when_better(self) -> None:
        caller = MockVenueCaller()
        caller.set_amounts_out(SUSHISWAP_ROUTER, [TOKEN_A, TOKEN_B], 1000)
        caller.set_amounts_out(SUSHISWAP_ROUTER, [TOKEN_A, WETH, TOKEN_B], 1200)
        caller.set_amounts_out(SUSHISWAP_ROUTER, [TOKEN_A, USDC, TOKEN_B], 1100)

        quote = asyncio.run(DirectQuoter(caller).quote_venue(MAINNET, "sushiswap", TOKEN_A, TOKEN_B, 10**18))

        assert quote is not None
        assert quote.path == (TOKEN_A, WETH, TOKEN_B)
        assert quote.amount_out == 1200
        assert quote.is_multihop
        assert quote.estimated_gas == 180_000
        assert quote.price_impact == 0.5

    def test_direct_kept_on_tie(self) -> None:
        caller = MockVenueCaller()
        caller.set_amounts_out(SUSHISWAP_ROUTER, [TOKEN_A, TOKEN_B], 1000)
        caller.set_amounts_out(SUSHISWAP_ROUTER, [TOKEN_A, WETH, TOKEN_B], 1000)

        quote = asyncio.run(DirectQuoter(caller).quote_venue(MAINNET, "sushiswap", TOKEN_A, TOKEN_B, 10**18))

        assert quote is not None
        assert quote.path == (TOKEN_A, TOKEN_B)

    def test_bridge_only(self) -> None:
        caller = MockVenueCaller()
        caller.set_amounts_out(SUSHISWAP_ROUTER, [TOKEN_A, DAI, TOKEN_B], 400)

        quote = asyncio.run(DirectQuoter(caller).quote_venue(MAINNET, "sushiswap", TOKEN_A, TOKEN_B, 10**18))

        assert quote is not None
        assert quote.path == (TOKEN_A, DAI, TOKEN_B)

    def test_concentrated_single_picks_tier(self) -> None:
        caller = MockVenueCaller()
        caller.set_exact_input_single(UNISWAP_V3_QUOTER, TOKEN_A, TOKEN_B, 500, 1500)
        caller.set_exact_input_single(UNISWAP_V3_QUOTER, TOKEN_A, TOKEN_B, 3000, 1400)

        quote = asyncio.run(DirectQuoter(caller).quote_venue(MAINNET, "uniswap_v3", TOKEN_A, TOKEN_B, 10**18))

        assert quote is not None
        assert quote.fee_tier == 500
        assert quote.amount_out == 1500
        assert quote.estimated_gas == 150_000
        assert quote.path_encoded is None

    def test_concentrated_multihop_carries_packed_path(self) -> None:
        caller = MockVenueCaller()
        caller.set_exact_input_single(UNISWAP_V3_QUOTER, TOKEN_A, TOKEN_B, 3000, 4000)
        path = encode_v3_path([TOKEN_A, WETH, TOKEN_B], [500, 3000])
        caller.set_exact_input(UNISWAP_V3_QUOTER, path, 5000)

        quote = asyncio.run(DirectQuoter(caller).quote_venue(MAINNET, "uniswap_v3", TOKEN_A, TOKEN_B, 10**18))

        assert quote is not None
        assert quote.amount_out == 5000
        assert quote.path == (TOKEN_A, WETH, TOKEN_B)
        assert quote.fee_tiers == (500, 3000)
        assert quote.path_encoded == path
        assert quote.estimated_gas == 250_000
        assert quote.price_impact == 0.8

    def test_all_bridge_and_tier_combinations_tried(self) -> None:
        caller = MockVenueCaller()

        asyncio.run(DirectQuoter(caller).quote_venue(MAINNET, "uniswap_v3", TOKEN_A, TOKEN_B, 10**18))

        # 3 single-pool tiers, and 5 bridges x 9 tier pairs
        assert len(caller.calls_to("quote_exact_input_single")) == 3
        assert len(caller.calls_to("quote_exact_input")) == 45

    def test_reverting_attempts_absorbed(self) -> None:
        caller = MockVenueCaller()
        caller.set_amounts_out(SUSHISWAP_ROUTER, [TOKEN_A, TOKEN_B], RuntimeError("execution reverted"))
        caller.set_amounts_out(SUSHISWAP_ROUTER, [TOKEN_A, USDT, TOKEN_B], 900)

        quote = asyncio.run(DirectQuoter(caller).quote_venue(MAINNET, "sushiswap", TOKEN_A, TOKEN_B, 10**18))

        assert quote is not None
        assert quote.amount_out == 900

    def test_venue_not_deployed(self) -> None:
        caller = MockVenueCaller(default_rate=(1, 1))
        quote = asyncio.run(DirectQuoter(caller).quote_venue(MAINNET, "biswap", TOKEN_A, TOKEN_B, 1000))
        assert quote is None
