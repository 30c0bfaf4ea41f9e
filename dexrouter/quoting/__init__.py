"""On-chain quoting of routes and venues.

Module structure:
- caller.py: VenueCaller protocol, MockVenueCaller and Web3VenueCaller
- encoding.py: packed multi-hop paths and swap adapter payloads
- oracle.py: QuoteOracle, hop-by-hop route quoting
- direct.py: DirectQuoter, per-venue quoting used as a fallback
"""

from dexrouter.quoting.caller import MockVenueCaller, VenueCaller, Web3VenueCaller
from dexrouter.quoting.direct import DirectQuoter
from dexrouter.quoting.encoding import decode_v3_path, encode_dex_data, encode_v3_path
from dexrouter.quoting.oracle import QuoteOracle

__all__ = [
    "DirectQuoter",
    "MockVenueCaller",
    "QuoteOracle",
    "VenueCaller",
    "Web3VenueCaller",
    "decode_v3_path",
    "encode_dex_data",
    "encode_v3_path",
]
