"""Tests for the venue registry, token constants and errors."""

from dexrouter.constants import (
    TOKEN_ADDRESSES,
    resolve_symbols,
    symbol_for_address,
)
from dexrouter.errors import NoLiquidityError
from dexrouter.models.pool import VenueFamily
from dexrouter.models.types import is_valid_address
from dexrouter.venues import (
    VENUE_CONTRACTS,
    VENUES,
    get_venue_contracts,
    venue_family,
    venue_name,
    venues_for_chain,
)
from tests.helpers import MAINNET, TOKEN_A, TOKEN_B, UNISWAP_V3_QUOTER, USDC, WETH


class TestVenueRegistry:
    """Tests for venue lookups."""

    def test_family(self) -> None:
        assert venue_family("uniswap_v3") is VenueFamily.CONCENTRATED
        assert venue_family("sushiswap") is VenueFamily.CONSTANT_PRODUCT
        assert venue_family("unknown_V3_fork") is VenueFamily.CONCENTRATED

    def test_name(self) -> None:
        assert venue_name("pancakeswap_v3") == "PancakeSwap V3"
        assert venue_name("unknown") == "unknown"

    def test_contracts(self) -> None:
        contracts = get_venue_contracts(MAINNET, "uniswap_v3")
        assert contracts is not None
        assert contracts.quoter == UNISWAP_V3_QUOTER
        assert get_venue_contracts(MAINNET, "pancakeswap_v3") is None
        assert get_venue_contracts(999, "uniswap_v3") is None

    def test_venues_for_chain(self) -> None:
        assert venues_for_chain(56) == ["pancakeswap_v3", "pancakeswap_v2", "biswap"]
        assert venues_for_chain(999) == []

    def test_concentrated_deployments_have_quoters(self) -> None:
        for chain_venues in VENUE_CONTRACTS.values():
            for venue_id, contracts in chain_venues.items():
                assert venue_id in VENUES
                assert is_valid_address(contracts.router)
                if VENUES[venue_id].family is VenueFamily.CONCENTRATED:
                    assert contracts.quoter is not None


class TestTokenConstants:
    """Tests for well-known token lookups."""

    def test_addresses_lowercase_and_valid(self) -> None:
        for tokens in TOKEN_ADDRESSES.values():
            for address in tokens.values():
                assert address == address.lower()
                assert is_valid_address(address)

    def test_resolve_symbols_skips_unknown(self) -> None:
        assert resolve_symbols(MAINNET, ("WETH", "NOPE", "USDC")) == [WETH, USDC]
        assert resolve_symbols(999, ("WETH",)) == []

    def test_symbol_for_address(self) -> None:
        assert symbol_for_address(MAINNET, WETH.upper().replace("0X", "0x")) == "WETH"
        assert symbol_for_address(MAINNET, TOKEN_A) is None


class TestNoLiquidityError:
    """Tests for NoLiquidityError messages."""

    def test_message_names_pair(self) -> None:
        err = NoLiquidityError(MAINNET, TOKEN_A, TOKEN_B, 100)
        assert TOKEN_A in str(err)
        assert TOKEN_B in str(err)
        assert "amount=100" in str(err)

    def test_default_message(self) -> None:
        assert str(NoLiquidityError()) == "No liquidity found"

    def test_custom_message(self) -> None:
        assert str(NoLiquidityError(message="nothing")) == "nothing"
