"""Mock collaborators for dependency injection.

Usage:
    from tests.helpers.mocks import BlockingPoolProvider, FakeClock, MockPoolDiscovery
"""

import asyncio

from dexrouter.models.pool import Pool, StaticPoolProvider


class MockPoolDiscovery:
    """Mock pool discovery collaborator.

    Usage:
        # Report nothing for every pair
        discovery = MockPoolDiscovery()

        # Add pools to a provider when a pair is discovered
        discovery = MockPoolDiscovery(provider, {(a, b): [pool]})

        # Fail for one pair
        discovery = MockPoolDiscovery(failures={(a, b)})
    """

    def __init__(
        self,
        provider: StaticPoolProvider | None = None,
        pools: dict[tuple[str, str], list[Pool]] | None = None,
        failures: set[tuple[str, str]] | None = None,
    ) -> None:
        self.provider = provider
        self.pools = pools or {}
        self.failures = failures or set()
        self.calls: list[tuple[int, str, str]] = []  # Track calls for assertions

    async def discover_pools_for_pair(self, chain_id: int, token_a: str, token_b: str) -> list[str]:
        self.calls.append((chain_id, token_a, token_b))
        if (token_a, token_b) in self.failures:
            raise RuntimeError(f"factory call failed for {token_a}/{token_b}")

        found = self.pools.get((token_a, token_b), [])
        if self.provider is not None:
            for pool in found:
                self.provider.add_pool(chain_id, pool)
        return [pool.pool_address for pool in found]


class BlockingPoolProvider(StaticPoolProvider):
    """Snapshot provider that takes its snapshot, then waits for a release.

    The first ``blocked_calls`` lookups wait on ``release``; later ones return
    immediately.
    """

    def __init__(self, pools: dict[int, list[Pool]] | None = None, blocked_calls: int = 1) -> None:
        super().__init__(pools)
        self.blocked_calls = blocked_calls
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def get_pools(self, chain_id: int) -> tuple[Pool, ...]:
        snapshot = await super().get_pools(chain_id)
        if self.blocked_calls > 0:
            self.blocked_calls -= 1
            self.started.set()
            await self.release.wait()
        return snapshot


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


__all__ = ["MockPoolDiscovery", "BlockingPoolProvider", "FakeClock"]
