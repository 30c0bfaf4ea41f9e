"""DEX router - multi-hop route search, quoting and split allocation."""

from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from dexrouter.errors import NoLiquidityError
from dexrouter.service import QuoteRequest, QuoteService, TradeMode

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_ROUTER_CONFIG",
    "NoLiquidityError",
    "QuoteRequest",
    "QuoteService",
    "RouterConfig",
    "TradeMode",
    "__version__",
]
