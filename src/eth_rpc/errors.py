"""Typed errors raised by the RPC helper.

Every error carries a ``kind`` tag so callers can branch without importing
each subclass.
"""

from __future__ import annotations


class EthRPCError(Exception):
    """Base class for all errors raised by eth_rpc."""

    kind = "error"


class InputError(EthRPCError, ValueError):
    """Raised when a caller argument is malformed. No RPC call is issued."""

    kind = "input"


class DecodeError(EthRPCError, ValueError):
    """Raised when an RPC result field cannot be decoded."""

    kind = "decode"


class TransportError(EthRPCError):
    """Raised when an RPC call fails at the network, HTTP or JSON-RPC level."""

    kind = "transport"

    def __init__(
        self,
        message: str,
        code: int | None = None,
        method: str | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.method = method


class ConsistencyError(EthRPCError):
    """Raised when a log does not belong to the block it was merged into."""

    kind = "consistency"

    def __init__(
        self,
        message: str,
        *,
        block_number: int,
        expected_hash: str | None,
        actual_hash: str | None,
    ):
        super().__init__(message)
        self.block_number = block_number
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash
