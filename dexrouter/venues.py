"""Venue registry: pricing family and contract addresses per chain.

Each venue id maps to a family (constant-product or concentrated liquidity)
and, per chain, the router/quoter/factory contracts used to price swaps.
"""

from __future__ import annotations

from dataclasses import dataclass

from dexrouter.constants import (
    CHAIN_ARBITRUM,
    CHAIN_BSC,
    CHAIN_MAINNET,
    CHAIN_POLYGON,
    CHAIN_SEPOLIA,
)
from dexrouter.models.pool import VenueFamily


@dataclass(frozen=True)
class VenueInfo:
    """Static description of a venue."""

    venue_id: str
    name: str
    family: VenueFamily


@dataclass(frozen=True)
class VenueContracts:
    """Contracts of one venue deployment on one chain.

    Concentrated venues quote through `quoter`; constant-product venues
    quote through the router's getAmountsOut.
    """

    router: str
    quoter: str | None = None
    factory: str | None = None


VENUES: dict[str, VenueInfo] = {
    info.venue_id: info
    for info in (
        VenueInfo("uniswap_v3", "Uniswap V3", VenueFamily.CONCENTRATED),
        VenueInfo("pancakeswap_v3", "PancakeSwap V3", VenueFamily.CONCENTRATED),
        VenueInfo("sushiswap_v3", "SushiSwap V3", VenueFamily.CONCENTRATED),
        VenueInfo("quickswap_v3", "QuickSwap V3", VenueFamily.CONCENTRATED),
        VenueInfo("uniswap_v2", "Uniswap V2", VenueFamily.CONSTANT_PRODUCT),
        VenueInfo("sushiswap", "SushiSwap", VenueFamily.CONSTANT_PRODUCT),
        VenueInfo("pancakeswap_v2", "PancakeSwap V2", VenueFamily.CONSTANT_PRODUCT),
        VenueInfo("quickswap", "QuickSwap", VenueFamily.CONSTANT_PRODUCT),
        VenueInfo("camelot", "Camelot", VenueFamily.CONSTANT_PRODUCT),
        VenueInfo("traderjoe", "Trader Joe", VenueFamily.CONSTANT_PRODUCT),
        VenueInfo("biswap", "Biswap", VenueFamily.CONSTANT_PRODUCT),
        VenueInfo("apeswap", "ApeSwap", VenueFamily.CONSTANT_PRODUCT),
        VenueInfo("spookyswap", "SpookySwap", VenueFamily.CONSTANT_PRODUCT),
        VenueInfo("pangolin", "Pangolin", VenueFamily.CONSTANT_PRODUCT),
    )
}

# Uniswap V3 shares its deployment addresses on mainnet, Arbitrum and Polygon
_UNISWAP_V3 = VenueContracts(
    router="0xe592427a0aece92de3edee1f18e0157c05861564",
    quoter="0x61ffe014ba17989e743c5f6cb21bf9697530b21e",
    factory="0x1f98431c8ad98523631ae4a59f267346ea31f984",
)
_SUSHISWAP_V2_L2 = VenueContracts(router="0x1b02da8cb0d097eb8d57a175b88c7d8b47997506")

VENUE_CONTRACTS: dict[int, dict[str, VenueContracts]] = {
    CHAIN_MAINNET: {
        "uniswap_v3": _UNISWAP_V3,
        "uniswap_v2": VenueContracts(
            router="0x7a250d5630b4cf539739df2c5dacb4c659f2488d",
            factory="0x5c69bee701ef814a2b6a3edd4b1652cb9cc5aa6f",
        ),
        "sushiswap": VenueContracts(
            router="0xd9e1ce17f2641f24ae83637ab66a2cca9c378b9f",
            factory="0xc0aee478e3658e2610c5f7a4a2e1777ce9e4f2ac",
        ),
        "sushiswap_v3": VenueContracts(
            router="0x2e6cd2d30aa43f40aa81619ff4b6e0a41479b13f",
            quoter="0x64e8802fe490fa7cc61d3463958199161bb608a7",
        ),
    },
    CHAIN_ARBITRUM: {
        "uniswap_v3": _UNISWAP_V3,
        "sushiswap": _SUSHISWAP_V2_L2,
        "sushiswap_v3": VenueContracts(
            router="0x8a21f6768c1f8075791d08546dadf6daa0be820c",
            quoter="0x0524e833ccd057e4d7a296e3aaab9f7675964ce1",
        ),
        "camelot": VenueContracts(router="0xc873fecbd354f5a56e00e710b90ef4201db2448d"),
    },
    CHAIN_POLYGON: {
        "uniswap_v3": _UNISWAP_V3,
        "quickswap": VenueContracts(router="0xa5e0829caced8ffdd4de3c43696c57f7d7a678ff"),
        "quickswap_v3": VenueContracts(
            router="0xf5b509bb0909a69b1c207e495f687a596c168e12",
            quoter="0xa15f0d7377b2a0c0c10db057f641bed21028fc89",
        ),
        "sushiswap": _SUSHISWAP_V2_L2,
    },
    CHAIN_BSC: {
        "pancakeswap_v3": VenueContracts(
            router="0x1b81d678ffb9c0263b24a97847620c99d213eb14",
            quoter="0xb048bbc1ee6b733fffcfb9e9cef7375518e25997",
        ),
        "pancakeswap_v2": VenueContracts(router="0x10ed43c718714eb63d5aa57b78b54704e256024e"),
        "biswap": VenueContracts(router="0x3a6d8ca21d1cf76f653a67577fa0d27453350dd8"),
    },
    CHAIN_SEPOLIA: {
        "uniswap_v3": VenueContracts(
            router="0x3bfa4769fb09eefc5a80d6e87c3b9c650f7ae48e",
            quoter="0xed1f6473345f45b75f8179591dd5ba1888cf2fb3",
        ),
    },
}


def venue_family(venue_id: str) -> VenueFamily:
    """Return the pricing family of a venue.

    Unregistered venues are classified by name: ids mentioning "v3" are
    concentrated liquidity, everything else constant product.
    """
    info = VENUES.get(venue_id)
    if info is not None:
        return info.family
    if "v3" in venue_id.lower():
        return VenueFamily.CONCENTRATED
    return VenueFamily.CONSTANT_PRODUCT


def venue_name(venue_id: str) -> str:
    info = VENUES.get(venue_id)
    return info.name if info is not None else venue_id


def get_venue_contracts(chain_id: int, venue_id: str) -> VenueContracts | None:
    """Contracts for a venue on a chain, or None if not deployed there."""
    return VENUE_CONTRACTS.get(chain_id, {}).get(venue_id)


def venues_for_chain(chain_id: int) -> list[str]:
    """Venue ids with contracts configured on a chain, in registry order."""
    return list(VENUE_CONTRACTS.get(chain_id, {}))


__all__ = [
    "VenueInfo",
    "VenueContracts",
    "VENUES",
    "VENUE_CONTRACTS",
    "venue_family",
    "venue_name",
    "get_venue_contracts",
    "venues_for_chain",
]
