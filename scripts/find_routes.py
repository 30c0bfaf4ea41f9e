#!/usr/bin/env python3
"""Search routes over a JSON pool snapshot, optionally quoting them over RPC.

The snapshot is either a list of pool records or an object with a "pools"
list. Pool records use the indexer field names (venueId, poolAddress,
token0, token1, fee, liquidity, ...).

Usage:
    python scripts/find_routes.py --snapshot pools.json \
        --token-in WETH --token-out USDC

    python scripts/find_routes.py --snapshot pools.json \
        --token-in WETH --token-out USDC \
        --amount 1000000000000000000 --rpc-url https://eth.llamarpc.com
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from dexrouter.config import RouterConfig
from dexrouter.constants import TOKEN_ADDRESSES
from dexrouter.errors import ConfigError, DexRouterError
from dexrouter.models.pool import Pool, StaticPoolProvider
from dexrouter.quoting.caller import Web3VenueCaller
from dexrouter.routing.graph import build_graph
from dexrouter.routing.pathfinding import find_routes, find_routes_by_liquidity, format_route
from dexrouter.service import QuoteService

logger = structlog.get_logger()


def load_pools(path: Path) -> list[Pool]:
    """Load and validate pool records from a snapshot file."""
    with open(path) as f:
        data = json.load(f)
    records = data["pools"] if isinstance(data, dict) else data
    return [Pool.model_validate(record) for record in records]


def resolve_token(chain_id: int, token: str) -> str:
    """Accept a well-known symbol or an address."""
    symbol = token.upper()
    chain_tokens = TOKEN_ADDRESSES.get(chain_id, {})
    if symbol in chain_tokens:
        return chain_tokens[symbol]
    return token.lower()


async def quote(
    pools: list[Pool], config: RouterConfig, args: argparse.Namespace, token_in: str, token_out: str
) -> None:
    service = QuoteService(
        StaticPoolProvider({args.chain_id: pools}),
        Web3VenueCaller(args.rpc_url, timeout=config.rpc_timeout_seconds),
        config=config,
    )
    plan = await service.quote_exact_input(
        args.chain_id, token_in, token_out, args.amount, args.decimals_in
    )

    print(f"\nPlan ({'split' if plan.is_split else 'single'}):")
    for leg in plan.legs:
        print(
            f"  {leg.percentage:6.2f}%  {leg.quote.label:<30} in={leg.amount_in} out={leg.amount_out}"
        )
    print(f"  total output: {plan.total_output}")
    print(f"  total gas:    {plan.total_gas}")
    print(f"  impact:       {plan.price_impact:.2f}%")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Find routes over a pool snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--snapshot", type=Path, required=True, help="Pool snapshot JSON file")
    parser.add_argument("--chain-id", type=int, default=1, help="Chain id (default: 1)")
    parser.add_argument("--token-in", required=True, help="Input token symbol or address")
    parser.add_argument("--token-out", required=True, help="Output token symbol or address")
    parser.add_argument(
        "--strategy",
        choices=["dfs", "liquidity"],
        default="dfs",
        help="Search strategy (default: dfs)",
    )
    parser.add_argument("--amount", type=int, help="Input amount in smallest units")
    parser.add_argument("--decimals-in", type=int, default=18, help="Input token decimals")
    parser.add_argument("--rpc-url", help="RPC endpoint used to quote routes")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logs")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    try:
        config = RouterConfig.from_env()
        pools = load_pools(args.snapshot)
    except (ConfigError, ValidationError, OSError, json.JSONDecodeError) as e:
        logger.error("startup_failed", error=str(e))
        return 2

    token_in = resolve_token(args.chain_id, args.token_in)
    token_out = resolve_token(args.chain_id, args.token_out)

    graph = build_graph(pools)
    print(f"Graph: {graph.pool_count} pools, {graph.token_count} tokens, {graph.edge_count} edges")

    search = find_routes if args.strategy == "dfs" else find_routes_by_liquidity
    routes = search(graph, token_in, token_out, config.max_hops, config.max_routes)
    print(f"\n{len(routes)} routes ({args.strategy}):")
    for route in routes:
        print(f"  {format_route(route)}")

    if args.amount is None or args.rpc_url is None:
        return 0

    try:
        asyncio.run(quote(pools, config, args, token_in, token_out))
    except DexRouterError as e:
        logger.error("quote_failed", error=str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
