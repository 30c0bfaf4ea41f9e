"""Liquidity graph built from a pool snapshot.

Each pool contributes two directed edges, one per trade direction. The graph
is immutable once built: a refresh builds a new graph and swaps the cached
value, so readers holding the old graph are never affected by a rebuild.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from dexrouter.constants import DEFAULT_V2_FEE, FEE_TIER_DENOMINATOR
from dexrouter.models.pool import Pool, PoolSnapshotProvider, VenueFamily
from dexrouter.models.types import normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class GraphEdge:
    """A directed trade through one pool."""

    pool: Pool
    token_in: str
    token_out: str
    venue_id: str
    # Fee as a decimal fraction (0.003 = 0.3%)
    fee: float
    liquidity: int
    sqrt_price_x96: int | None = None
    tick: int | None = None

    @property
    def pool_address(self) -> str:
        return self.pool.pool_address

    @property
    def family(self) -> VenueFamily:
        return self.pool.family

    @property
    def fee_tier(self) -> int | None:
        """Integer fee tier of a concentrated pool, None for constant product."""
        return self.pool.fee


@dataclass(frozen=True)
class LiquidityGraph:
    """Adjacency view over a pool snapshot.

    Attributes:
        adjacency: Read-only mapping of token -> outgoing edges, in pool order
        tokens: Every token that appears in at least one pool
        pool_count: Number of pools the graph was built from
        edge_count: Number of directed edges (always 2 * pool_count)
    """

    adjacency: Mapping[str, tuple[GraphEdge, ...]]
    tokens: frozenset[str]
    pool_count: int
    edge_count: int
    built_at: float = field(default=0.0, compare=False)

    def edges_from(self, token: str) -> tuple[GraphEdge, ...]:
        """Outgoing edges of a token; empty if the token is unknown."""
        return self.adjacency.get(normalize_address(token), ())

    def direct_edges(self, token_in: str, token_out: str) -> tuple[GraphEdge, ...]:
        """Edges trading token_in directly into token_out."""
        target = normalize_address(token_out)
        return tuple(edge for edge in self.edges_from(token_in) if edge.token_out == target)

    def has_token(self, token: str) -> bool:
        return normalize_address(token) in self.tokens

    @property
    def token_count(self) -> int:
        return len(self.tokens)


def edge_fee(pool: Pool) -> float:
    """Fee decimal of a pool: tier / 1e6, or 0.3% when the pool has no fee."""
    if pool.fee is None:
        return DEFAULT_V2_FEE
    return pool.fee / FEE_TIER_DENOMINATOR


def build_graph(pools: Iterable[Pool], built_at: float = 0.0) -> LiquidityGraph:
    """Build a liquidity graph from pool records.

    Pure function of its input: the same pools in the same order always yield
    the same adjacency order.

    Args:
        pools: Pool snapshot (addresses already lowercase)
        built_at: Timestamp recorded on the graph

    Returns:
        LiquidityGraph with two directed edges per pool
    """
    adjacency: dict[str, list[GraphEdge]] = {}
    pool_count = 0

    for pool in pools:
        pool_count += 1
        fee = edge_fee(pool)
        for token_in, token_out in ((pool.token0, pool.token1), (pool.token1, pool.token0)):
            edge = GraphEdge(
                pool=pool,
                token_in=token_in,
                token_out=token_out,
                venue_id=pool.venue_id,
                fee=fee,
                liquidity=pool.liquidity,
                sqrt_price_x96=pool.sqrt_price_x96,
                tick=pool.tick,
            )
            adjacency.setdefault(token_in, []).append(edge)

    frozen = {token: tuple(edges) for token, edges in adjacency.items()}
    return LiquidityGraph(
        adjacency=MappingProxyType(frozen),
        tokens=frozenset(frozen),
        pool_count=pool_count,
        edge_count=2 * pool_count,
        built_at=built_at,
    )


class GraphCache:
    """Per-chain cache of liquidity graphs with a time-to-live.

    Entries are replaced by assignment, never mutated, so a reader that
    already holds a graph keeps a consistent view during a rebuild. Each chain
    carries a generation number bumped on invalidation; a rebuild that started
    under an older generation returns its graph without caching it.
    """

    def __init__(
        self,
        provider: PoolSnapshotProvider,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._provider = provider
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[int, LiquidityGraph] = {}
        self._generations: dict[int, int] = {}

    async def get_graph(self, chain_id: int) -> LiquidityGraph:
        """Return the cached graph for a chain, rebuilding it when stale."""
        now = self._clock()
        cached = self._entries.get(chain_id)
        if cached is not None and now - cached.built_at < self._ttl:
            return cached

        generation = self._generations.setdefault(chain_id, 0)
        pools = await self._provider.get_pools(chain_id)
        graph = build_graph(pools, built_at=now)

        if self._generations.get(chain_id, 0) != generation:
            logger.debug("liquidity_graph_superseded", chain_id=chain_id)
            return graph

        self._entries[chain_id] = graph
        logger.info(
            "liquidity_graph_built",
            chain_id=chain_id,
            pools=graph.pool_count,
            tokens=graph.token_count,
            edges=graph.edge_count,
        )
        return graph

    def invalidate(self, chain_id: int) -> None:
        """Drop the cached graph so the next lookup rebuilds it."""
        self._generations[chain_id] = self._generations.get(chain_id, 0) + 1
        if self._entries.pop(chain_id, None) is not None:
            logger.debug("liquidity_graph_invalidated", chain_id=chain_id)

    def clear(self) -> None:
        for chain_id in set(self._generations) | set(self._entries):
            self._generations[chain_id] = self._generations.get(chain_id, 0) + 1
        self._entries = {}

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self._entries


__all__ = ["GraphEdge", "LiquidityGraph", "GraphCache", "build_graph", "edge_fee"]
