"""Route search over a liquidity graph.

Two strategies are provided:

- find_routes: exhaustive depth-bounded DFS. Every simple path of at most
  max_hops hops is enumerated, then routes are ranked by estimated gas.
- find_routes_by_liquidity: best-first search where deep, cheap pools are
  "closer". The distance is a heuristic, not a true shortest-path metric.

Both return an empty list (never raise) when either token is missing from
the graph; the caller is expected to have triggered pool discovery first.
"""

from __future__ import annotations

import heapq
import itertools
import math
from collections.abc import Sequence

import structlog

from dexrouter.constants import (
    FEE_DISTANCE_SCALE,
    LIQUIDITY_NORMALIZER,
    V2_ADDITIONAL_HOP_GAS,
    V2_HOP_GAS,
    V3_ADDITIONAL_HOP_GAS,
    V3_HOP_GAS,
)
from dexrouter.models.pool import VenueFamily
from dexrouter.models.types import normalize_address
from dexrouter.routing.graph import GraphEdge, LiquidityGraph
from dexrouter.routing.types import DiscoveredRoute, RouteHop

logger = structlog.get_logger()

DEFAULT_MAX_HOPS = 3
DEFAULT_MAX_ROUTES = 10


def estimate_route_gas(hops: Sequence[RouteHop]) -> int:
    """Gas estimate for a route.

    The first hop is charged the single-swap rate of its venue family, every
    later hop the cheaper additional-hop rate.
    """
    gas = 0
    for index, hop in enumerate(hops):
        concentrated = hop.family is VenueFamily.CONCENTRATED
        if index == 0:
            gas += V3_HOP_GAS if concentrated else V2_HOP_GAS
        else:
            gas += V3_ADDITIONAL_HOP_GAS if concentrated else V2_ADDITIONAL_HOP_GAS
    return gas


def make_route(hops: Sequence[RouteHop]) -> DiscoveredRoute:
    return DiscoveredRoute(hops=tuple(hops), estimated_gas=estimate_route_gas(hops))


def find_routes(
    graph: LiquidityGraph,
    token_in: str,
    token_out: str,
    max_hops: int = DEFAULT_MAX_HOPS,
    max_routes: int = DEFAULT_MAX_ROUTES,
) -> list[DiscoveredRoute]:
    """Enumerate routes with a depth-bounded DFS.

    Visits edges in exactly the order a recursive DFS would: an explicit
    stack holds pending edge traversals, pushed in reverse so the first
    adjacency entry is explored first. A branch ends the moment it reaches
    token_out; tokens already on the path (token_in included) are never
    revisited.

    Args:
        graph: Liquidity graph to search
        token_in: Source token
        token_out: Destination token
        max_hops: Maximum hops per route
        max_routes: Maximum routes returned

    Returns:
        Routes sorted by estimated gas ascending (stable), at most max_routes
    """
    start = normalize_address(token_in)
    target = normalize_address(token_out)
    if start == target or not graph.has_token(start) or not graph.has_token(target):
        return []

    routes: list[DiscoveredRoute] = []
    # Each entry: (edge to traverse, hops so far, tokens on the path so far)
    stack: list[tuple[GraphEdge, tuple[RouteHop, ...], frozenset[str]]] = []

    def push_edges(token: str, hops: tuple[RouteHop, ...], visited: frozenset[str]) -> None:
        if len(hops) >= max_hops:
            return
        for edge in reversed(graph.edges_from(token)):
            stack.append((edge, hops, visited))

    push_edges(start, (), frozenset((start,)))

    while stack:
        edge, hops, visited = stack.pop()
        next_token = edge.token_out
        if next_token in visited:
            continue

        new_hops = hops + (RouteHop(edge),)
        if next_token == target:
            routes.append(make_route(new_hops))
            continue

        push_edges(next_token, new_hops, visited | {next_token})

    routes.sort(key=lambda route: route.estimated_gas)
    top_routes = routes[:max_routes]

    logger.debug(
        "routes_found",
        token_in=start,
        token_out=target,
        found=len(routes),
        returned=len(top_routes),
        max_hops=max_hops,
    )
    return top_routes


def edge_distance(edge: GraphEdge) -> float:
    """Distance contribution of an edge: -ln(liquidity / 1e18 + 1) + fee * 100."""
    liquidity_score = math.log(edge.liquidity / LIQUIDITY_NORMALIZER + 1) if edge.liquidity > 0 else 0.0
    return -liquidity_score + edge.fee * FEE_DISTANCE_SCALE


def find_routes_by_liquidity(
    graph: LiquidityGraph,
    token_in: str,
    token_out: str,
    max_hops: int = DEFAULT_MAX_HOPS,
    max_routes: int = DEFAULT_MAX_ROUTES,
) -> list[DiscoveredRoute]:
    """Best-first route search favoring deep, low-fee pools.

    Nodes are popped in ascending distance (ties in insertion order). A popped
    node is skipped when a strictly smaller distance to its token was already
    recorded. The search stops once max_routes routes are collected.

    Returns:
        Routes ranked by hop count, then estimated gas
    """
    start = normalize_address(token_in)
    target = normalize_address(token_out)
    if start == target or not graph.has_token(start) or not graph.has_token(target):
        return []

    routes: list[DiscoveredRoute] = []
    counter = itertools.count()
    queue: list[tuple[float, int, str, tuple[RouteHop, ...]]] = [(0.0, next(counter), start, ())]
    best_distance: dict[str, float] = {}

    while queue and len(routes) < max_routes:
        distance, _, token, hops = heapq.heappop(queue)

        if len(hops) >= max_hops:
            continue

        recorded = best_distance.get(token)
        if recorded is not None and recorded < distance:
            continue
        best_distance[token] = distance

        on_path = {start}
        on_path.update(hop.token_out for hop in hops)

        for edge in graph.edges_from(token):
            next_token = edge.token_out
            if next_token in on_path:
                continue

            new_hops = hops + (RouteHop(edge),)
            if next_token == target:
                routes.append(make_route(new_hops))
                if len(routes) >= max_routes:
                    break
            else:
                heapq.heappush(
                    queue,
                    (distance + edge_distance(edge), next(counter), next_token, new_hops),
                )

    routes.sort(key=lambda route: (route.total_hops, route.estimated_gas))
    return routes[:max_routes]


def format_route(route: DiscoveredRoute) -> str:
    """One-line summary of a route for log output."""
    path = " -> ".join(token[:8] for token in route.path)
    venues = ", ".join(route.venues)
    return f"{path} via [{venues}] ({route.total_hops} hops, ~{route.estimated_gas} gas)"


__all__ = [
    "DEFAULT_MAX_HOPS",
    "DEFAULT_MAX_ROUTES",
    "estimate_route_gas",
    "make_route",
    "find_routes",
    "find_routes_by_liquidity",
    "edge_distance",
    "format_route",
]
