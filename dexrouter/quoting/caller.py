"""Venue pricing calls: protocol, in-memory mock and RPC implementation."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, Union

import structlog

from dexrouter.models.types import normalize_address

logger = structlog.get_logger()


class VenueCaller(Protocol):
    """Protocol for calling venue pricing functions.

    This allows swapping between the RPC-backed caller and a mock for testing.
    Every method returns None when the call reverts or cannot be made.
    """

    async def get_amounts_out(self, router: str, amount_in: int, path: list[str]) -> int | None:
        """Constant-product router getAmountsOut; returns the final amount.

        Args:
            router: Router contract address
            amount_in: Input amount
            path: Token path, at least two tokens

        Returns:
            Output amount of the last token, or None if the call fails
        """
        ...

    async def quote_exact_input_single(
        self,
        quoter: str,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
    ) -> int | None:
        """Concentrated-liquidity single-pool quote at one fee tier.

        Args:
            quoter: Quoter contract address
            token_in: Input token address
            token_out: Output token address
            fee: Pool fee tier (e.g., 3000)
            amount_in: Input amount

        Returns:
            Output amount, or None if the quote fails
        """
        ...

    async def quote_exact_input(self, quoter: str, path_encoded: str, amount_in: int) -> int | None:
        """Concentrated-liquidity multi-hop quote over a packed path."""
        ...


async def call_or_none(
    call: Awaitable[int | None], event: str = "venue_call_failed", **context: object
) -> int | None:
    """Await one venue call, turning any failure into None.

    Sibling attempts gathered together are never cancelled by one failure.
    """
    try:
        return await call
    except Exception as e:
        logger.debug(event, error=str(e), **context)
        return None


# A mock rule: fixed output, (numerator, denominator) rate, pricing function,
# or an exception to raise (a revert)
QuoteRule = Union[int, tuple[int, int], Callable[[int], Union[int, None]], Exception]


class MockVenueCaller:
    """Mock venue caller for testing without RPC calls.

    Configure rules per call signature, and track calls for assertions.
    """

    def __init__(self, default_rate: tuple[int, int] | None = None) -> None:
        """Initialize mock caller.

        Args:
            default_rate: If set, (numerator, denominator) applied to any
                unconfigured call: amount_out = amount_in * num // denom.
                If None, unconfigured calls return None.
        """
        self.default_rate = default_rate
        self.v2_rules: dict[tuple[str, ...], QuoteRule] = {}
        self.v3_rules: dict[tuple[str, str, str, int], QuoteRule] = {}
        self.path_rules: dict[tuple[str, str], QuoteRule] = {}
        self.calls: list[tuple[Any, ...]] = []

    def set_amounts_out(self, router: str, path: list[str], rule: QuoteRule) -> None:
        key = (normalize_address(router), *(normalize_address(t) for t in path))
        self.v2_rules[key] = rule

    def set_exact_input_single(
        self, quoter: str, token_in: str, token_out: str, fee: int, rule: QuoteRule
    ) -> None:
        key = (
            normalize_address(quoter),
            normalize_address(token_in),
            normalize_address(token_out),
            fee,
        )
        self.v3_rules[key] = rule

    def set_exact_input(self, quoter: str, path_encoded: str, rule: QuoteRule) -> None:
        self.path_rules[(normalize_address(quoter), path_encoded.lower())] = rule

    async def get_amounts_out(self, router: str, amount_in: int, path: list[str]) -> int | None:
        self.calls.append(("get_amounts_out", router, amount_in, tuple(path)))
        key = (normalize_address(router), *(normalize_address(t) for t in path))
        return self._apply(self.v2_rules.get(key), amount_in)

    async def quote_exact_input_single(
        self,
        quoter: str,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
    ) -> int | None:
        self.calls.append(("quote_exact_input_single", quoter, token_in, token_out, fee, amount_in))
        key = (
            normalize_address(quoter),
            normalize_address(token_in),
            normalize_address(token_out),
            fee,
        )
        return self._apply(self.v3_rules.get(key), amount_in)

    async def quote_exact_input(self, quoter: str, path_encoded: str, amount_in: int) -> int | None:
        self.calls.append(("quote_exact_input", quoter, path_encoded, amount_in))
        rule = self.path_rules.get((normalize_address(quoter), path_encoded.lower()))
        return self._apply(rule, amount_in)

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == method]

    def _apply(self, rule: QuoteRule | None, amount_in: int) -> int | None:
        if rule is None:
            if self.default_rate is None:
                return None
            num, denom = self.default_rate
            return amount_in * num // denom
        if isinstance(rule, Exception):
            raise rule
        if isinstance(rule, tuple):
            num, denom = rule
            # Floor division for output amount (conservative for receiver)
            return amount_in * num // denom
        if callable(rule):
            return rule(amount_in)
        return rule


# Router ABI - minimal, just getAmountsOut
ROUTER_V2_ABI = [
    {
        "name": "getAmountsOut",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "amountIn", "type": "uint256"},
            {"name": "path", "type": "address[]"},
        ],
        "outputs": [{"name": "amounts", "type": "uint256[]"}],
    },
]

# QuoterV2 ABI - minimal, just the exact input functions
QUOTER_V2_ABI = [
    {
        "name": "quoteExactInputSingle",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {
                "name": "params",
                "type": "tuple",
                "components": [
                    {"name": "tokenIn", "type": "address"},
                    {"name": "tokenOut", "type": "address"},
                    {"name": "amountIn", "type": "uint256"},
                    {"name": "fee", "type": "uint24"},
                    {"name": "sqrtPriceLimitX96", "type": "uint160"},
                ],
            }
        ],
        "outputs": [
            {"name": "amountOut", "type": "uint256"},
            {"name": "sqrtPriceX96After", "type": "uint160"},
            {"name": "initializedTicksCrossed", "type": "uint32"},
            {"name": "gasEstimate", "type": "uint256"},
        ],
    },
    {
        "name": "quoteExactInput",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "path", "type": "bytes"},
            {"name": "amountIn", "type": "uint256"},
        ],
        "outputs": [
            {"name": "amountOut", "type": "uint256"},
            {"name": "sqrtPriceX96AfterList", "type": "uint160[]"},
            {"name": "initializedTicksCrossedList", "type": "uint32[]"},
            {"name": "gasEstimate", "type": "uint256"},
        ],
    },
]


class Web3VenueCaller:
    """Real caller that prices swaps with eth_call via an async RPC provider.

    Each request carries the provider's own timeout; nothing else bounds it.
    """

    def __init__(self, rpc_url: str, timeout: float = 10.0):
        """Initialize caller with an RPC endpoint.

        Args:
            rpc_url: HTTP RPC URL (e.g., "https://eth.llamarpc.com")
            timeout: Per-request timeout in seconds
        """
        try:
            from web3 import AsyncWeb3
        except ImportError as e:
            raise ImportError(
                "web3 package required for Web3VenueCaller. Install with: pip install web3"
            ) from e

        self._to_checksum = AsyncWeb3.to_checksum_address
        self.w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
        self._contracts: dict[tuple[str, str], Any] = {}

    def _contract(self, address: str, kind: str) -> Any:
        key = (normalize_address(address), kind)
        if key not in self._contracts:
            abi = ROUTER_V2_ABI if kind == "router" else QUOTER_V2_ABI
            self._contracts[key] = self.w3.eth.contract(address=self._to_checksum(address), abi=abi)
        return self._contracts[key]

    async def get_amounts_out(self, router: str, amount_in: int, path: list[str]) -> int | None:
        """Get output amount via the router's getAmountsOut."""
        try:
            contract = self._contract(router, "router")
            amounts = await contract.functions.getAmountsOut(
                amount_in, [self._to_checksum(token) for token in path]
            ).call()
            return int(amounts[-1])
        except Exception as e:
            logger.debug(
                "get_amounts_out_failed",
                router=router,
                path=path,
                amount_in=amount_in,
                error=str(e),
            )
            return None

    async def quote_exact_input_single(
        self,
        quoter: str,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
    ) -> int | None:
        """Get output amount for exact input via RPC call."""
        try:
            contract = self._contract(quoter, "quoter")
            result = await contract.functions.quoteExactInputSingle(
                (
                    self._to_checksum(token_in),
                    self._to_checksum(token_out),
                    amount_in,
                    fee,
                    0,  # sqrtPriceLimitX96 = 0 means no limit
                )
            ).call()

            # Result is (amountOut, sqrtPriceX96After, initializedTicksCrossed, gasEstimate)
            return int(result[0])
        except Exception as e:
            logger.debug(
                "quote_exact_input_single_failed",
                token_in=token_in,
                token_out=token_out,
                fee=fee,
                amount_in=amount_in,
                error=str(e),
            )
            return None

    async def quote_exact_input(self, quoter: str, path_encoded: str, amount_in: int) -> int | None:
        """Get output amount for a packed multi-hop path via RPC call."""
        try:
            contract = self._contract(quoter, "quoter")
            result = await contract.functions.quoteExactInput(
                bytes.fromhex(path_encoded.removeprefix("0x")), amount_in
            ).call()
            return int(result[0])
        except Exception as e:
            logger.debug(
                "quote_exact_input_failed",
                path=path_encoded,
                amount_in=amount_in,
                error=str(e),
            )
            return None


__all__ = [
    "VenueCaller",
    "call_or_none",
    "QuoteRule",
    "MockVenueCaller",
    "Web3VenueCaller",
    "ROUTER_V2_ABI",
    "QUOTER_V2_ABI",
]
