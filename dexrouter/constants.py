"""Protocol constants for the DEX router.

Centralizes fee tiers, the gas model, bridge token preferences and
well-known token addresses per chain.
"""

from dexrouter.models.types import is_valid_address


def _validate_token_address(name: str, address: str) -> str:
    """Validate and return a lowercase token address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address.lower()


# Chain ids
CHAIN_MAINNET = 1
CHAIN_BSC = 56
CHAIN_POLYGON = 137
CHAIN_ARBITRUM = 42161
CHAIN_SEPOLIA = 11155111

# Concentrated-liquidity fee tiers in hundredths of a basis point
# Fee = units / 1,000,000 (e.g., 3000 = 0.3%)
V3_FEE_LOW = 500
V3_FEE_MEDIUM = 3000
V3_FEE_HIGH = 10000
V3_FEE_TIERS = (V3_FEE_LOW, V3_FEE_MEDIUM, V3_FEE_HIGH)
V3_DEFAULT_FEE_TIER = V3_FEE_MEDIUM

# Fee tier denominator and the fee assumed for constant-product pools without one
FEE_TIER_DENOMINATOR = 1_000_000
DEFAULT_V2_FEE = 0.003

# Gas model for discovered routes: first hop pays the single rate,
# every further hop the additional rate
V3_HOP_GAS = 150_000
V3_ADDITIONAL_HOP_GAS = 100_000
V2_HOP_GAS = 120_000
V2_ADDITIONAL_HOP_GAS = 80_000

# Gas for direct venue quotes
V3_SINGLE_HOP_GAS = 150_000
V3_MULTI_HOP_GAS = 250_000
V2_SINGLE_HOP_GAS = 120_000
V2_MULTI_HOP_GAS = 180_000

# Price impact baselines (percent)
V2_PRICE_IMPACT = 0.3
V3_PRICE_IMPACT = 0.5
V2_MULTI_HOP_PRICE_IMPACT = 0.5
V3_MULTI_HOP_PRICE_IMPACT = 0.8
ADDITIONAL_HOP_PRICE_IMPACT = 0.3
AMOUNT_PRICE_IMPACT_FACTOR = 0.001
MAX_AMOUNT_PRICE_IMPACT = 1.0

# Liquidity-weighted search: liquidity normalization and fee penalty scale
LIQUIDITY_NORMALIZER = 10**18
FEE_DISTANCE_SCALE = 100

# Basis points in 100%
BPS_DENOMINATOR = 10_000

# Placeholder address wallets use for the native asset; never a bridge
NATIVE_TOKEN_PLACEHOLDER = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"

# Well-known token addresses per chain (lowercase)
TOKEN_ADDRESSES: dict[int, dict[str, str]] = {
    CHAIN_MAINNET: {
        "WETH": _validate_token_address("WETH", "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"),
        "USDC": _validate_token_address("USDC", "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"),
        "USDT": _validate_token_address("USDT", "0xdac17f958d2ee523a2206206994597c13d831ec7"),
        "DAI": _validate_token_address("DAI", "0x6b175474e89094c44da98b954eedeac495271d0f"),
        "WBTC": _validate_token_address("WBTC", "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599"),
        "LINK": _validate_token_address("LINK", "0x514910771af9ca656af840dff83e8264ecf986ca"),
        "UNI": _validate_token_address("UNI", "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984"),
    },
    CHAIN_BSC: {
        "WBNB": _validate_token_address("WBNB", "0xbb4cdb9cbd36b01bd1cbaebf2de08d9173bc095c"),
        "USDC": _validate_token_address("USDC", "0x8ac76a51cc950d9822d68b83fe1ad97b32cd580d"),
        "USDT": _validate_token_address("USDT", "0x55d398326f99059ff775485246999027b3197955"),
        "BUSD": _validate_token_address("BUSD", "0xe9e7cea3dedca5984780bafc599bd69add087d56"),
        "WETH": _validate_token_address("WETH", "0x2170ed0880ac9a755fd29b2688956bd959f933f8"),
    },
    CHAIN_POLYGON: {
        "WMATIC": _validate_token_address("WMATIC", "0x0d500b1d8e8ef31e21c99d1db9a6444d3adf1270"),
        "WETH": _validate_token_address("WETH", "0x7ceb23fd6bc0add59e62ac25578270cff1b9f619"),
        "USDC": _validate_token_address("USDC", "0x3c499c542cef5e3811e1192ce70d8cc03d5c3359"),
        "USDT": _validate_token_address("USDT", "0xc2132d05d31c914a87c6611c10748aeb04b58e8f"),
        "DAI": _validate_token_address("DAI", "0x8f3cf7ad23cd3cadbd9735aff958023239c6a063"),
    },
    CHAIN_ARBITRUM: {
        "WETH": _validate_token_address("WETH", "0x82af49447d8a07e3bd95bd0d56f35241523fbab1"),
        "USDC": _validate_token_address("USDC", "0xaf88d065e77c8cc2239327c5edb3a432268e5831"),
        "USDT": _validate_token_address("USDT", "0xfd086bc7cd5c481dcc9c85ebe478a1c0b69fcbb9"),
        "DAI": _validate_token_address("DAI", "0xda10009cbd5d07dd0cecc66161fc93d7c9000da1"),
        "ARB": _validate_token_address("ARB", "0x912ce59144191c1204e64559fe8253a0e49e6548"),
        "WBTC": _validate_token_address("WBTC", "0x2f2a2543b76a4166549f7aab2e75bef0aefc5b0f"),
    },
    CHAIN_SEPOLIA: {
        "WETH": _validate_token_address("WETH", "0xfff9976782d46cc05630d1f6ebab18b2324d6b14"),
        "USDC": _validate_token_address("USDC", "0x1c7d4b196cb0c7b01d743fbc6116a902379c7238"),
        "LINK": _validate_token_address("LINK", "0x779877a7b0d9e8603169ddbd7836e478b4624789"),
        "UNI": _validate_token_address("UNI", "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984"),
    },
}

# Bridge candidates used when discovering pools before a graph search
DISCOVERY_BRIDGE_SYMBOLS: dict[int, tuple[str, ...]] = {
    CHAIN_MAINNET: ("WETH", "USDC", "USDT", "DAI", "WBTC"),
    CHAIN_SEPOLIA: ("WETH", "USDC", "DAI", "LINK", "UNI"),
    CHAIN_ARBITRUM: ("WETH", "USDC", "USDT", "DAI", "ARB"),
    CHAIN_POLYGON: ("WMATIC", "WETH", "USDC", "USDT", "DAI"),
    CHAIN_BSC: ("WBNB", "USDC", "USDT", "BUSD", "WETH"),
}

# Bridge candidates for direct venue quoting, most liquid first
QUOTE_BRIDGE_SYMBOLS: dict[int, tuple[str, ...]] = {
    CHAIN_MAINNET: ("WETH", "USDC", "USDT", "DAI", "WBTC"),
    CHAIN_BSC: ("WBNB", "USDC", "USDT", "BUSD"),
    CHAIN_ARBITRUM: ("WETH", "USDC", "USDT", "DAI"),
    CHAIN_POLYGON: ("WMATIC", "WETH", "USDC", "USDT"),
    CHAIN_SEPOLIA: ("WETH", "USDC"),
}


def resolve_symbols(chain_id: int, symbols: tuple[str, ...]) -> list[str]:
    """Resolve token symbols to addresses on a chain, skipping unknown ones."""
    chain_tokens = TOKEN_ADDRESSES.get(chain_id, {})
    return [chain_tokens[symbol] for symbol in symbols if symbol in chain_tokens]


def symbol_for_address(chain_id: int, address: str) -> str | None:
    """Reverse lookup of a well-known token symbol (used for log output)."""
    address = address.lower()
    for symbol, token in TOKEN_ADDRESSES.get(chain_id, {}).items():
        if token == address:
            return symbol
    return None


__all__ = [
    # Chains
    "CHAIN_MAINNET",
    "CHAIN_BSC",
    "CHAIN_POLYGON",
    "CHAIN_ARBITRUM",
    "CHAIN_SEPOLIA",
    # Fees
    "V3_FEE_LOW",
    "V3_FEE_MEDIUM",
    "V3_FEE_HIGH",
    "V3_FEE_TIERS",
    "V3_DEFAULT_FEE_TIER",
    "FEE_TIER_DENOMINATOR",
    "DEFAULT_V2_FEE",
    # Gas
    "V3_HOP_GAS",
    "V3_ADDITIONAL_HOP_GAS",
    "V2_HOP_GAS",
    "V2_ADDITIONAL_HOP_GAS",
    "V3_SINGLE_HOP_GAS",
    "V3_MULTI_HOP_GAS",
    "V2_SINGLE_HOP_GAS",
    "V2_MULTI_HOP_GAS",
    # Price impact
    "V2_PRICE_IMPACT",
    "V3_PRICE_IMPACT",
    "V2_MULTI_HOP_PRICE_IMPACT",
    "V3_MULTI_HOP_PRICE_IMPACT",
    "ADDITIONAL_HOP_PRICE_IMPACT",
    "AMOUNT_PRICE_IMPACT_FACTOR",
    "MAX_AMOUNT_PRICE_IMPACT",
    # Search and allocation
    "LIQUIDITY_NORMALIZER",
    "FEE_DISTANCE_SCALE",
    "BPS_DENOMINATOR",
    # Tokens
    "NATIVE_TOKEN_PLACEHOLDER",
    "TOKEN_ADDRESSES",
    "DISCOVERY_BRIDGE_SYMBOLS",
    "QUOTE_BRIDGE_SYMBOLS",
    "resolve_symbols",
    "symbol_for_address",
]
