"""Type definitions for routes, quotes and execution plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from dexrouter.constants import BPS_DENOMINATOR
from dexrouter.errors import InvalidPathError
from dexrouter.models.pool import VenueFamily
from dexrouter.routing.graph import GraphEdge


@dataclass(frozen=True)
class RouteHop:
    """One trade through a single pool within a route."""

    edge: GraphEdge

    @property
    def token_in(self) -> str:
        return self.edge.token_in

    @property
    def token_out(self) -> str:
        return self.edge.token_out

    @property
    def pool_address(self) -> str:
        return self.edge.pool_address

    @property
    def venue_id(self) -> str:
        return self.edge.venue_id

    @property
    def fee(self) -> float:
        return self.edge.fee

    @property
    def family(self) -> VenueFamily:
        return self.edge.family


@dataclass(frozen=True)
class DiscoveredRoute:
    """A candidate path from token_in to token_out.

    Invariants (checked on construction): the path has one more token than
    there are hops, starts at token_in, ends at token_out and never revisits
    a token.
    """

    hops: tuple[RouteHop, ...]
    estimated_gas: int

    def __post_init__(self) -> None:
        if not self.hops:
            raise InvalidPathError("Route needs at least one hop")
        for prev, nxt in zip(self.hops, self.hops[1:]):
            if prev.token_out != nxt.token_in:
                raise InvalidPathError(
                    f"Disconnected route: {prev.token_out} does not feed {nxt.token_in}"
                )
        path = self.path
        if len(set(path)) != len(path):
            raise InvalidPathError(f"Route revisits a token: {path}")

    @property
    def token_in(self) -> str:
        return self.hops[0].token_in

    @property
    def token_out(self) -> str:
        return self.hops[-1].token_out

    @property
    def path(self) -> tuple[str, ...]:
        return (self.hops[0].token_in,) + tuple(hop.token_out for hop in self.hops)

    @property
    def total_hops(self) -> int:
        return len(self.hops)

    @property
    def venues(self) -> tuple[str, ...]:
        return tuple(hop.venue_id for hop in self.hops)


@dataclass(frozen=True)
class HopQuote:
    """Priced hop: what one pool returns for the amount entering it."""

    pool_address: str
    venue_id: str
    family: VenueFamily
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int
    fee_tier: int | None = None


@runtime_checkable
class Quote(Protocol):
    """Common view of route quotes and venue quotes used by the optimizer."""

    @property
    def amount_out(self) -> int: ...

    @property
    def estimated_gas(self) -> int: ...

    @property
    def price_impact(self) -> float: ...

    @property
    def path(self) -> tuple[str, ...]: ...

    @property
    def label(self) -> str: ...

    @property
    def fee_tier(self) -> int | None: ...

    @property
    def path_encoded(self) -> str | None: ...


@dataclass(frozen=True)
class RouteQuote:
    """Output of a discovered route for a given input amount."""

    route: DiscoveredRoute
    amount_in: int
    amount_out: int
    price_impact: float
    estimated_gas: int
    hops: tuple[HopQuote, ...]

    @property
    def path(self) -> tuple[str, ...]:
        return self.route.path

    @property
    def label(self) -> str:
        return " > ".join(hop.venue_id for hop in self.hops)

    @property
    def is_multihop(self) -> bool:
        return len(self.hops) > 1

    @property
    def fee_tier(self) -> int | None:
        """Quoted fee tier of a single concentrated hop."""
        if len(self.hops) == 1:
            return self.hops[0].fee_tier
        return None

    @property
    def path_encoded(self) -> str | None:
        """Packed path when every hop is concentrated liquidity on one venue."""
        if len(self.hops) < 2:
            return None
        first = self.hops[0]
        if any(
            hop.family is not VenueFamily.CONCENTRATED
            or hop.fee_tier is None
            or hop.venue_id != first.venue_id
            for hop in self.hops
        ):
            return None
        # Deferred: importing dexrouter.quoting loads oracle, which imports this module
        from dexrouter.quoting.encoding import encode_v3_path

        return encode_v3_path(list(self.path), [hop.fee_tier for hop in self.hops])  # type: ignore[misc]


@dataclass(frozen=True)
class VenueQuote:
    """Quote from a venue's own pricing function, direct or through one bridge."""

    venue_id: str
    venue_name: str
    family: VenueFamily
    amount_in: int
    amount_out: int
    estimated_gas: int
    price_impact: float
    path: tuple[str, ...]
    fee_tier: int | None = None
    fee_tiers: tuple[int, ...] | None = None
    path_encoded: str | None = None

    @property
    def is_multihop(self) -> bool:
        return len(self.path) > 2

    @property
    def label(self) -> str:
        return self.venue_id


@dataclass(frozen=True)
class PlanLeg:
    """One leg of an execution plan.

    The share is held as integer basis points; `percentage` is for display.
    """

    quote: Quote
    percentage_bps: int
    amount_in: int
    amount_out: int

    @property
    def percentage(self) -> float:
        return self.percentage_bps / 100

    @property
    def estimated_gas(self) -> int:
        return self.quote.estimated_gas

    @property
    def dex_data(self) -> str | None:
        """ABI-encoded swap adapter payload for this leg."""
        # Deferred: importing dexrouter.quoting loads oracle, which imports this module
        from dexrouter.quoting.encoding import encode_dex_data

        return encode_dex_data(fee_tier=self.quote.fee_tier, path_encoded=self.quote.path_encoded)


@dataclass(frozen=True)
class ExecutionPlan:
    """Final allocation of a trade across one or more legs."""

    legs: tuple[PlanLeg, ...]
    amount_in: int
    total_output: int
    total_gas: int
    price_impact: float
    is_split: bool = False
    desired_output: int | None = field(default=None, compare=False)
    # Exact-output plans only: whether total_output landed within tolerance of desired_output
    converged: bool | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        total_bps = sum(leg.percentage_bps for leg in self.legs)
        if total_bps != BPS_DENOMINATOR:
            raise ValueError(f"Plan legs sum to {total_bps} bps, expected {BPS_DENOMINATOR}")

    @property
    def best_quote(self) -> Quote:
        return self.legs[0].quote


__all__ = [
    "RouteHop",
    "DiscoveredRoute",
    "HopQuote",
    "Quote",
    "RouteQuote",
    "VenueQuote",
    "PlanLeg",
    "ExecutionPlan",
]
