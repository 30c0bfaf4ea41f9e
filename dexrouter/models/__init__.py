"""Data models for the DEX router."""

from dexrouter.models.pool import Pool, PoolSnapshotProvider, StaticPoolProvider, VenueFamily
from dexrouter.models.types import (
    UINT256_MAX,
    Address,
    Uint,
    is_valid_address,
    normalize_address,
)

__all__ = [
    "UINT256_MAX",
    "Address",
    "Uint",
    "is_valid_address",
    "normalize_address",
    "Pool",
    "PoolSnapshotProvider",
    "StaticPoolProvider",
    "VenueFamily",
]
