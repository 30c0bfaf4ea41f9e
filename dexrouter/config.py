"""Router configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

from dexrouter.constants import V3_DEFAULT_FEE_TIER, V3_FEE_TIERS
from dexrouter.errors import ConfigError

ENV_PREFIX = "DEXROUTER_"


@dataclass(frozen=True)
class RouterConfig:
    """Centralized configuration for route search, quoting and splitting.

    Attributes:
        max_hops: Maximum hops per discovered route (default: 3)
        max_routes: Maximum candidate routes kept per search (default: 10)
        max_splits: Maximum legs in a split plan (default: 3)
        min_split_percent: Minimum share of a split leg, in percent (default: 5)
        split_improvement_bps: Improvement a split must exceed over the best
            single quote, in basis points (default: 10 = 0.1%)
        small_trade_units: Trades below this many whole input tokens are never
            split (default: 100)
        graph_ttl_seconds: Lifetime of a cached liquidity graph (default: 60)
        fee_tiers: Concentrated-liquidity fee tiers tried per hop
        default_fee_tier: Tier preferred when tiers quote the same output
        max_bridge_tokens: Cap on bridge tokens used for pool discovery
        exact_output_max_iterations: Bisection iterations for exact output
        exact_output_tolerance_bps: Relative tolerance for exact output, in
            basis points (default: 10 = 0.1%)
        exact_output_sample_divisor: Sample quote size is one whole token
            divided by this (default: 100, i.e. 0.01 token)
        rpc_timeout_seconds: Request timeout of the RPC transport
    """

    max_hops: int = 3
    max_routes: int = 10
    max_splits: int = 3
    min_split_percent: int = 5
    split_improvement_bps: int = 10
    small_trade_units: int = 100
    graph_ttl_seconds: float = 60.0
    fee_tiers: tuple[int, ...] = V3_FEE_TIERS
    default_fee_tier: int = V3_DEFAULT_FEE_TIER
    max_bridge_tokens: int = 8
    exact_output_max_iterations: int = 12
    exact_output_tolerance_bps: int = 10
    exact_output_sample_divisor: int = 100
    rpc_timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.max_hops < 1:
            raise ConfigError(f"max_hops must be >= 1, got {self.max_hops}")
        if self.max_routes < 1:
            raise ConfigError(f"max_routes must be >= 1, got {self.max_routes}")
        if self.max_splits < 1:
            raise ConfigError(f"max_splits must be >= 1, got {self.max_splits}")
        if not 0 <= self.min_split_percent <= 100:
            raise ConfigError(f"min_split_percent must be in [0, 100], got {self.min_split_percent}")
        if self.split_improvement_bps < 0:
            raise ConfigError("split_improvement_bps cannot be negative")
        if self.graph_ttl_seconds < 0:
            raise ConfigError("graph_ttl_seconds cannot be negative")
        if not self.fee_tiers:
            raise ConfigError("fee_tiers cannot be empty")
        if self.exact_output_max_iterations < 1:
            raise ConfigError("exact_output_max_iterations must be >= 1")
        if self.exact_output_sample_divisor < 1:
            raise ConfigError("exact_output_sample_divisor must be >= 1")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RouterConfig:
        """Build a config from DEXROUTER_* environment variables.

        Variable names are the upper-cased field names, e.g. DEXROUTER_MAX_HOPS.
        Fee tiers are comma-separated (DEXROUTER_FEE_TIERS=500,3000).

        Raises:
            ConfigError: If a variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for field in fields(cls):
            raw = env.get(ENV_PREFIX + field.name.upper())
            if raw is None or raw.strip() == "":
                continue
            overrides[field.name] = _parse_value(field.name, raw.strip(), field.type)
        return cls(**overrides)  # type: ignore[arg-type]


def _parse_value(name: str, raw: str, type_name: object) -> object:
    # Annotations are strings under `from __future__ import annotations`
    type_str = str(type_name)
    try:
        if type_str.startswith("tuple"):
            return tuple(int(part) for part in raw.split(",") if part.strip())
        if type_str == "float":
            return float(raw)
        return int(raw)
    except ValueError as err:
        raise ConfigError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from err


# Default configuration instance
DEFAULT_ROUTER_CONFIG = RouterConfig()


__all__ = ["RouterConfig", "DEFAULT_ROUTER_CONFIG", "ENV_PREFIX"]
