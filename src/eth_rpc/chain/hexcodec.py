"""Hex-encoded integer codec for JSON-RPC quantities."""

from __future__ import annotations

from typing import Any

from eth_utils import is_0x_prefixed
from eth_utils import is_hex as _eth_is_hex
from eth_utils import to_hex as _eth_to_hex

from eth_rpc.errors import DecodeError, InputError


def is_hex(value: Any) -> bool:
    """True for a 0x-prefixed string with at least one hex digit."""
    return (
        isinstance(value, str)
        and is_0x_prefixed(value)
        and len(value) > 2
        and _eth_is_hex(value)
    )


class HexCodec:
    """Converts between ints and 0x-prefixed lowercase hex quantities."""

    def to_hex(self, value: int) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InputError(
                f"Expected int, got: {value!r} (type {type(value).__name__})"
            )
        if value < 0:
            raise InputError(f"Expected non-negative int, got: {value}")
        return _eth_to_hex(value)

    def from_hex(self, value: Any) -> int:
        if not is_hex(value):
            raise DecodeError(
                f"Expected hex, got: {value!r} (type {type(value).__name__})"
            )
        return int(value, 16)

    def is_hex(self, value: Any) -> bool:
        return is_hex(value)
