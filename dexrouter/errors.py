"""Router error classes.

Only aggregate "nothing worked" conditions surface as exceptions. Failures
of individual hop, fee tier, bridge or venue attempts are absorbed where
they happen and never reach the caller.
"""


class DexRouterError(Exception):
    """Base error for routing operations."""

    pass


class NoLiquidityError(DexRouterError):
    """No route or venue produced a quote for the requested pair and amount."""

    def __init__(
        self,
        chain_id: int | None = None,
        token_in: str | None = None,
        token_out: str | None = None,
        amount: int | None = None,
        message: str | None = None,
    ) -> None:
        self.chain_id = chain_id
        self.token_in = token_in
        self.token_out = token_out
        self.amount = amount
        if message is None:
            if token_in is not None and token_out is not None:
                message = (
                    f"No liquidity for {token_in} -> {token_out} "
                    f"(amount={amount}, chain={chain_id})"
                )
            else:
                message = "No liquidity found"
        super().__init__(message)


class InvalidPathError(DexRouterError):
    """Internally inconsistent path (token/fee counts, malformed packed bytes)."""

    pass


class ConfigError(DexRouterError):
    """Invalid router configuration value."""

    pass


__all__ = ["DexRouterError", "NoLiquidityError", "InvalidPathError", "ConfigError"]
