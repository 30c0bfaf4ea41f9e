"""Pytest configuration and fixtures."""

import pytest

from dexrouter.models.pool import Pool, StaticPoolProvider
from dexrouter.quoting.caller import MockVenueCaller
from tests.helpers import MAINNET, TOKEN_A, TOKEN_B, TOKEN_C, make_pool
from tests.helpers.mocks import FakeClock


@pytest.fixture
def mock_caller() -> MockVenueCaller:
    """A venue caller with no rules: every call returns None."""
    return MockVenueCaller()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def line_pools() -> list[Pool]:
    """Constant-product pools A-B and B-C (a line graph)."""
    return [
        make_pool(TOKEN_A, TOKEN_B, venue_id="uniswap_v2"),
        make_pool(TOKEN_B, TOKEN_C, venue_id="uniswap_v2"),
    ]


@pytest.fixture
def line_provider(line_pools: list[Pool]) -> StaticPoolProvider:
    """Snapshot provider serving the line graph on mainnet."""
    return StaticPoolProvider({MAINNET: line_pools})
