"""Pool discovery requests issued before a route search.

The router does not talk to on-chain factories itself. It asks a discovery
collaborator to index pools for the requested pair and for pairs through
bridge tokens, then rebuilds its graph to pick up whatever was found.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Iterable
from typing import Protocol

import structlog

from dexrouter.constants import (
    CHAIN_MAINNET,
    DISCOVERY_BRIDGE_SYMBOLS,
    NATIVE_TOKEN_PLACEHOLDER,
    resolve_symbols,
)
from dexrouter.models.types import normalize_address

logger = structlog.get_logger()

# Tokens taken from the current snapshot in addition to the priority list
MAX_SNAPSHOT_BRIDGES = 5
# Bridges paired with each other for three-hop routes
TOP_BRIDGE_PAIRS = 3


class PoolDiscovery(Protocol):
    """Collaborator that indexes pools for a token pair."""

    async def discover_pools_for_pair(self, chain_id: int, token_a: str, token_b: str) -> list[str]:
        """Discover and store pools trading token_a against token_b.

        Returns:
            Addresses of the pools found
        """
        ...


def bridge_tokens(
    chain_id: int,
    token_in: str,
    token_out: str,
    known_tokens: Iterable[str] = (),
    max_bridges: int = 8,
) -> list[str]:
    """Bridge candidates for a pair, most liquid first.

    Priority symbols for the chain (mainnet's list for unknown chains) come
    first, then up to five tokens already present in the snapshot. The pair
    itself and the native-asset placeholder are never bridges.
    """
    token_in = normalize_address(token_in)
    token_out = normalize_address(token_out)
    excluded = {token_in, token_out, NATIVE_TOKEN_PLACEHOLDER}

    symbols = DISCOVERY_BRIDGE_SYMBOLS.get(chain_id, DISCOVERY_BRIDGE_SYMBOLS[CHAIN_MAINNET])
    bridges: list[str] = []
    for address in resolve_symbols(chain_id, symbols):
        if address not in excluded and address not in bridges:
            bridges.append(address)

    for token in itertools.islice(known_tokens, MAX_SNAPSHOT_BRIDGES):
        token = normalize_address(token)
        if token not in excluded and token not in bridges:
            bridges.append(token)

    return bridges[:max_bridges]


def pairs_to_discover(token_in: str, token_out: str, bridges: list[str]) -> list[tuple[str, str]]:
    """Token pairs to index before searching.

    The direct pair, token_in/bridge and bridge/token_out for every bridge,
    and bridge/bridge among the top three bridges (for three-hop routes).
    """
    token_in = normalize_address(token_in)
    token_out = normalize_address(token_out)
    pairs = [(token_in, token_out)]

    for bridge in bridges:
        if bridge in (token_in, token_out):
            continue
        pairs.append((token_in, bridge))
        pairs.append((bridge, token_out))

    top = bridges[:TOP_BRIDGE_PAIRS]
    for i, first in enumerate(top):
        for second in top[i + 1 :]:
            pairs.append((first, second))

    return pairs


async def discover_pairs(
    discovery: PoolDiscovery, chain_id: int, pairs: list[tuple[str, str]]
) -> int:
    """Run discovery for every pair concurrently.

    A failing pair is logged and skipped; the others still complete.

    Returns:
        Total number of pools reported by the collaborator
    """

    async def _discover(token_a: str, token_b: str) -> int:
        try:
            found = await discovery.discover_pools_for_pair(chain_id, token_a, token_b)
        except Exception as err:
            logger.warning(
                "pool_discovery_failed",
                chain_id=chain_id,
                token_a=token_a,
                token_b=token_b,
                error=str(err),
            )
            return 0
        return len(found)

    counts = await asyncio.gather(*(_discover(a, b) for a, b in pairs))
    total = sum(counts)
    logger.info("pool_discovery_complete", chain_id=chain_id, pairs=len(pairs), pools=total)
    return total


__all__ = [
    "MAX_SNAPSHOT_BRIDGES",
    "PoolDiscovery",
    "bridge_tokens",
    "pairs_to_discover",
    "discover_pairs",
]
