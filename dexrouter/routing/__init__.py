"""Route search and allocation.

Module structure:
- graph.py: LiquidityGraph, build_graph and the per-chain GraphCache
- types.py: route, quote and execution plan types
- pathfinding.py: bounded DFS and liquidity-weighted route search
- discovery.py: bridge selection and pool discovery requests
- split.py: SplitOptimizer (single route vs. percentage split)
- exact_output.py: ExactOutputSolver (bisection over input amounts)
"""

from dexrouter.routing.discovery import PoolDiscovery, bridge_tokens, pairs_to_discover
from dexrouter.routing.exact_output import ExactOutputSolver
from dexrouter.routing.graph import GraphCache, GraphEdge, LiquidityGraph, build_graph
from dexrouter.routing.pathfinding import find_routes, find_routes_by_liquidity, format_route
from dexrouter.routing.split import SplitOptimizer
from dexrouter.routing.types import (
    DiscoveredRoute,
    ExecutionPlan,
    HopQuote,
    PlanLeg,
    Quote,
    RouteHop,
    RouteQuote,
    VenueQuote,
)

__all__ = [
    "DiscoveredRoute",
    "ExactOutputSolver",
    "ExecutionPlan",
    "GraphCache",
    "GraphEdge",
    "HopQuote",
    "LiquidityGraph",
    "PlanLeg",
    "PoolDiscovery",
    "Quote",
    "RouteHop",
    "RouteQuote",
    "SplitOptimizer",
    "VenueQuote",
    "bridge_tokens",
    "build_graph",
    "find_routes",
    "find_routes_by_liquidity",
    "format_route",
    "pairs_to_discover",
]
