"""Pydantic models for pool snapshot records.

A pool snapshot is the read-only list of active pools for one chain, as
produced by the pool indexer. The router consumes it; it never owns it.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, Field, model_validator

from dexrouter.models.types import Address, Uint


class VenueFamily(str, Enum):
    """Pricing family of a liquidity venue."""

    CONSTANT_PRODUCT = "amm_v2"
    CONCENTRATED = "amm_v3"


class Pool(BaseModel):
    """A single liquidity pool as seen in the snapshot."""

    venue_id: str = Field(alias="venueId", min_length=1)
    pool_address: Address = Field(alias="poolAddress")
    token0: Address
    token1: Address
    # Concentrated pools carry their fee tier (e.g. 3000 = 0.3%)
    fee: int | None = Field(default=None, ge=0, lt=1_000_000)
    liquidity: Uint = 0
    reserve0: Uint | None = None
    reserve1: Uint | None = None
    sqrt_price_x96: Uint | None = Field(default=None, alias="sqrtPriceX96")
    tick: int | None = None

    model_config = {"populate_by_name": True, "frozen": True}

    @model_validator(mode="after")
    def _check_distinct_tokens(self) -> "Pool":
        if self.token0 == self.token1:
            raise ValueError(f"Pool {self.pool_address} has identical tokens {self.token0}")
        return self

    @property
    def family(self) -> VenueFamily:
        """Venue family, looked up in the venue registry."""
        from dexrouter.venues import venue_family

        return venue_family(self.venue_id)

    def other_token(self, token: str) -> str:
        return self.token1 if token == self.token0 else self.token0


class PoolSnapshotProvider(Protocol):
    """Source of active pools per chain (e.g. an indexer database)."""

    async def get_pools(self, chain_id: int) -> Sequence[Pool]:
        """Return the active pools for a chain.

        Args:
            chain_id: EVM chain id

        Returns:
            Pool records, already filtered to active pools
        """
        ...


class StaticPoolProvider:
    """In-memory snapshot provider, keyed by chain id.

    Used by the offline CLI and by tests.
    """

    def __init__(self, pools: dict[int, Sequence[Pool]] | None = None) -> None:
        self.pools: dict[int, list[Pool]] = {
            chain_id: list(chain_pools) for chain_id, chain_pools in (pools or {}).items()
        }
        self.calls: list[int] = []

    async def get_pools(self, chain_id: int) -> Sequence[Pool]:
        self.calls.append(chain_id)
        return tuple(self.pools.get(chain_id, ()))

    def add_pool(self, chain_id: int, pool: Pool) -> None:
        self.pools.setdefault(chain_id, []).append(pool)


__all__ = ["VenueFamily", "Pool", "PoolSnapshotProvider", "StaticPoolProvider"]
