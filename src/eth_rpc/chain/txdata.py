"""Call data encoding and key helpers for transactions."""

from __future__ import annotations

from typing import Any, Sequence

from eth_abi import encode
from eth_abi.exceptions import EncodingError, ParseError
from eth_account import Account
from eth_utils import function_signature_to_4byte_selector, remove_0x_prefix

from eth_rpc.errors import InputError


def _split_top_level(types_str: str) -> list[str]:
    """Split "uint256,(address,bool)[],bytes" on commas outside parentheses."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in types_str:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise InputError(f"Unbalanced parentheses in types: {types_str}")
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    if depth != 0:
        raise InputError(f"Unbalanced parentheses in types: {types_str}")
    parts.append("".join(current))
    return [p.strip() for p in parts]


def parse_signature(method_signature: str) -> tuple[str, list[str]]:
    """Split "transfer(address,uint256)" into its name and argument types."""
    sig = method_signature.replace(" ", "")
    open_idx = sig.find("(")
    if open_idx <= 0 or not sig.endswith(")"):
        raise InputError(f"Invalid method signature: {method_signature!r}")
    name = sig[:open_idx]
    inner = sig[open_idx + 1 : -1]
    types = _split_top_level(inner) if inner else []
    if any(not t for t in types):
        raise InputError(f"Invalid method signature: {method_signature!r}")
    return name, types


def encode_tx_data(method_signature: str, args: Sequence[Any] = ()) -> str:
    """Build 0x-prefixed call data: 4-byte selector followed by ABI-encoded args."""
    _, types = parse_signature(method_signature)
    if len(types) != len(args):
        raise InputError(
            f"{method_signature} expects {len(types)} argument(s), got {len(args)}"
        )
    selector = function_signature_to_4byte_selector(method_signature.replace(" ", ""))
    try:
        encoded = encode(types, list(args))
    except (EncodingError, ParseError, TypeError, ValueError) as e:
        raise InputError(f"Cannot encode arguments for {method_signature}: {e}") from e
    return "0x" + (selector + encoded).hex()


def normalize_private_key(private_key: bytes | str) -> bytes:
    """Accept raw 32 bytes or a hex string with or without 0x prefix."""
    if isinstance(private_key, (bytes, bytearray)):
        key = bytes(private_key)
    elif isinstance(private_key, str):
        try:
            key = bytes.fromhex(remove_0x_prefix(private_key))
        except ValueError as e:
            raise InputError("Private key is not valid hex") from e
    else:
        raise InputError(
            f"Expected bytes or hex private key, got {type(private_key).__name__}"
        )
    if len(key) != 32:
        raise InputError(f"Private key must be 32 bytes, got {len(key)}")
    return key


def private_to_address(private_key: bytes | str) -> str:
    """Checksummed address controlled by the given private key."""
    return Account.from_key(normalize_private_key(private_key)).address
