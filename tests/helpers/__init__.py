"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token and venue contract addresses
- factories: Pool, quote and pipeline factory functions
"""

from tests.helpers.constants import (
    DAI,
    MAINNET,
    SUSHISWAP_ROUTER,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    UNISWAP_V2_ROUTER,
    UNISWAP_V3_QUOTER,
    USDC,
    USDT,
    WBTC,
    WETH,
)
from tests.helpers.factories import linear_pipeline, make_pool, make_quote

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "USDT",
    "WBTC",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TOKEN_D",
    "UNISWAP_V3_QUOTER",
    "UNISWAP_V2_ROUTER",
    "SUSHISWAP_ROUTER",
    "MAINNET",
    # Factories
    "make_pool",
    "make_quote",
    "linear_pipeline",
]
