"""Tests for bridge selection and pool discovery requests."""

import asyncio

from dexrouter.constants import NATIVE_TOKEN_PLACEHOLDER
from dexrouter.routing.discovery import bridge_tokens, discover_pairs, pairs_to_discover
from tests.helpers import (
    DAI,
    MAINNET,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    USDC,
    USDT,
    WBTC,
    WETH,
    make_pool,
)
from tests.helpers.mocks import MockPoolDiscovery


class TestBridgeTokens:
    """Tests for bridge_tokens."""

    def test_priority_bridges_for_mainnet(self) -> None:
        assert bridge_tokens(MAINNET, TOKEN_A, TOKEN_B) == [WETH, USDC, USDT, DAI, WBTC]

    def test_pair_never_a_bridge(self) -> None:
        bridges = bridge_tokens(MAINNET, WETH, USDC)
        assert WETH not in bridges
        assert USDC not in bridges
        assert bridges == [USDT, DAI, WBTC]

    def test_snapshot_tokens_appended(self) -> None:
        bridges = bridge_tokens(MAINNET, TOKEN_A, TOKEN_B, known_tokens=[TOKEN_C, WETH, TOKEN_D])
        # WETH is already a priority bridge and is not repeated
        assert bridges == [WETH, USDC, USDT, DAI, WBTC, TOKEN_C, TOKEN_D]

    def test_capped(self) -> None:
        bridges = bridge_tokens(MAINNET, TOKEN_A, TOKEN_B, known_tokens=[TOKEN_C, TOKEN_D], max_bridges=3)
        assert bridges == [WETH, USDC, USDT]

    def test_native_placeholder_excluded(self) -> None:
        bridges = bridge_tokens(MAINNET, TOKEN_A, TOKEN_B, known_tokens=[NATIVE_TOKEN_PLACEHOLDER])
        assert NATIVE_TOKEN_PLACEHOLDER not in bridges

    def test_at_most_five_snapshot_tokens(self) -> None:
        known = [f"0x{i:040x}" for i in range(1, 10)]
        bridges = bridge_tokens(999, TOKEN_A, TOKEN_B, known_tokens=known, max_bridges=20)
        # Unknown chain: no priority symbols resolve, only snapshot tokens
        assert bridges == known[:5]

    def test_input_case_normalized(self) -> None:
        bridges = bridge_tokens(MAINNET, WETH.upper().replace("0X", "0x"), TOKEN_B)
        assert WETH not in bridges


class TestPairsToDiscover:
    """Tests for pairs_to_discover."""

    def test_direct_pair_only(self) -> None:
        assert pairs_to_discover(TOKEN_A, TOKEN_B, []) == [(TOKEN_A, TOKEN_B)]

    def test_bridge_legs(self) -> None:
        pairs = pairs_to_discover(TOKEN_A, TOKEN_B, [WETH])
        assert pairs == [(TOKEN_A, TOKEN_B), (TOKEN_A, WETH), (WETH, TOKEN_B)]

    def test_bridge_pairs_among_top_three(self) -> None:
        pairs = pairs_to_discover(TOKEN_A, TOKEN_B, [WETH, USDC, USDT, DAI])

        assert len(pairs) == 1 + 2 * 4 + 3
        assert (WETH, USDC) in pairs
        assert (WETH, USDT) in pairs
        assert (USDC, USDT) in pairs
        assert (USDT, DAI) not in pairs


class TestDiscoverPairs:
    """Tests for discover_pairs."""

    def test_counts_pools_found(self) -> None:
        discovery = MockPoolDiscovery(
            pools={
                (TOKEN_A, TOKEN_B): [make_pool(TOKEN_A, TOKEN_B), make_pool(TOKEN_A, TOKEN_B)],
                (TOKEN_A, WETH): [make_pool(TOKEN_A, WETH)],
            }
        )
        pairs = pairs_to_discover(TOKEN_A, TOKEN_B, [WETH])

        total = asyncio.run(discover_pairs(discovery, MAINNET, pairs))

        assert total == 3
        assert [call[1:] for call in discovery.calls] == pairs

    def test_failure_does_not_abort_siblings(self) -> None:
        discovery = MockPoolDiscovery(
            pools={(WETH, TOKEN_B): [make_pool(WETH, TOKEN_B)]},
            failures={(TOKEN_A, TOKEN_B)},
        )
        pairs = pairs_to_discover(TOKEN_A, TOKEN_B, [WETH])

        total = asyncio.run(discover_pairs(discovery, MAINNET, pairs))

        assert total == 1
        assert len(discovery.calls) == 3
