"""Packed path and adapter payload encoding for concentrated-liquidity swaps.

A packed path is token0 (20 bytes) followed, per hop, by the fee tier
(3 bytes) and the next token (20 bytes), as consumed by the quoter's and
router's exactInput functions.
"""

from __future__ import annotations

from eth_abi import decode, encode  # type: ignore[attr-defined]

from dexrouter.errors import InvalidPathError
from dexrouter.models.types import is_valid_address, normalize_address

# Hex characters per packed element
ADDRESS_HEX_LENGTH = 40
FEE_HEX_LENGTH = 6
MAX_FEE = 2**24 - 1


def encode_v3_path(tokens: list[str], fees: list[int]) -> str:
    """Encode a multi-hop path as packed hex.

    Args:
        tokens: Token addresses along the path (n + 1 entries)
        fees: Fee tier of each hop (n entries)

    Returns:
        0x-prefixed lowercase hex string

    Raises:
        InvalidPathError: If the counts do not line up or a value is out of range
    """
    if len(tokens) != len(fees) + 1:
        raise InvalidPathError(
            f"Path needs one more token than fees: {len(tokens)} tokens, {len(fees)} fees"
        )
    if not fees:
        raise InvalidPathError("Path needs at least one hop")

    parts = [_token_hex(tokens[0])]
    for fee, token in zip(fees, tokens[1:], strict=True):
        if not 0 <= fee <= MAX_FEE:
            raise InvalidPathError(f"Fee tier out of uint24 range: {fee}")
        parts.append(f"{fee:06x}")
        parts.append(_token_hex(token))
    return "0x" + "".join(parts)


def decode_v3_path(encoded: str) -> tuple[list[str], list[int]]:
    """Decode a packed path back into tokens and fee tiers.

    Raises:
        InvalidPathError: If the hex length does not match a whole path
    """
    body = encoded[2:] if encoded.startswith("0x") else encoded
    hop_length = FEE_HEX_LENGTH + ADDRESS_HEX_LENGTH
    if len(body) < ADDRESS_HEX_LENGTH + hop_length or (len(body) - ADDRESS_HEX_LENGTH) % hop_length:
        raise InvalidPathError(f"Malformed packed path of {len(body)} hex chars")

    try:
        int(body, 16)
    except ValueError as err:
        raise InvalidPathError("Packed path is not valid hex") from err

    body = body.lower()
    tokens = ["0x" + body[:ADDRESS_HEX_LENGTH]]
    fees: list[int] = []
    offset = ADDRESS_HEX_LENGTH
    while offset < len(body):
        fees.append(int(body[offset : offset + FEE_HEX_LENGTH], 16))
        offset += FEE_HEX_LENGTH
        tokens.append("0x" + body[offset : offset + ADDRESS_HEX_LENGTH])
        offset += ADDRESS_HEX_LENGTH
    return tokens, fees


def encode_dex_data(fee_tier: int | None = None, path_encoded: str | None = None) -> str | None:
    """Encode the swap adapter payload abi.encode(bool isMultiHop, bytes swapData).

    A multi-hop swap carries the packed path as swapData; a single hop carries
    abi.encode(uint24 fee). Returns None when there is nothing to encode
    (constant-product swaps need no adapter payload).
    """
    if path_encoded is not None:
        swap_data = bytes.fromhex(path_encoded.removeprefix("0x"))
        return "0x" + encode(["bool", "bytes"], [True, swap_data]).hex()
    if fee_tier is not None:
        fee_encoded = encode(["uint24"], [fee_tier])
        return "0x" + encode(["bool", "bytes"], [False, fee_encoded]).hex()
    return None


def decode_dex_data(dex_data: str) -> tuple[bool, bytes]:
    """Split an adapter payload into (is_multihop, swap_data)."""
    is_multihop, swap_data = decode(["bool", "bytes"], bytes.fromhex(dex_data.removeprefix("0x")))
    return is_multihop, swap_data


def _token_hex(token: str) -> str:
    address = normalize_address(token)
    if not is_valid_address(address):
        raise InvalidPathError(f"Invalid token address in path: {token}")
    return address[2:]


__all__ = [
    "encode_v3_path",
    "decode_v3_path",
    "encode_dex_data",
    "decode_dex_data",
]
