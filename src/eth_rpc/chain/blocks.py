"""Batched block + log fetch and merge.

Range mode (``merge_range``) trusts nothing: every log is placed by its
block number and its ``blockHash`` must match the hash of the block it lands
in. Array mode (``merge_pairs``) scopes each ``eth_getLogs`` call to a single
block and attaches the result as-is, without comparing hashes.
"""

from __future__ import annotations

from typing import Any, Sequence

from eth_rpc.chain.hexcodec import HexCodec
from eth_rpc.chain.rpc import RPCRequest, RPCResponse
from eth_rpc.errors import ConsistencyError, DecodeError, InputError

Block = dict[str, Any]
Log = dict[str, Any]


def check_block_number(value: Any, name: str = "block number") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InputError(f"{name} must be a non-negative int, got: {value!r}")
    return value


def log_filter(codec: HexCodec, from_block: int, to_block: int) -> dict[str, str]:
    """eth_getLogs filter for the inclusive range [from_block, to_block]."""
    return {"fromBlock": codec.to_hex(from_block), "toBlock": codec.to_hex(to_block)}


def block_request(codec: HexCodec, number: int) -> RPCRequest:
    return RPCRequest("eth_getBlockByNumber", [codec.to_hex(number), True])


def logs_request(codec: HexCodec, from_block: int, to_block: int) -> RPCRequest:
    return RPCRequest("eth_getLogs", [log_filter(codec, from_block, to_block)])


def range_requests(codec: HexCodec, from_block: int, to_block: int) -> list[RPCRequest]:
    """One block call per number in [from_block, to_block), then one logs call."""
    batch = [block_request(codec, n) for n in range(from_block, to_block)]
    batch.append(logs_request(codec, from_block, to_block - 1))
    return batch


def pair_requests(codec: HexCodec, block_numbers: Sequence[int]) -> list[RPCRequest]:
    """A block call followed by a single-block logs call, for each number."""
    batch: list[RPCRequest] = []
    for bn in block_numbers:
        batch.append(block_request(codec, bn))
        batch.append(logs_request(codec, bn, bn))
    return batch


def normalize_block(codec: HexCodec, raw: Any) -> Block:
    """Copy a raw block and decode its number and timestamp."""
    if not isinstance(raw, dict):
        raise DecodeError(f"Expected block object, got: {raw!r}")
    block = dict(raw)
    block["number"] = codec.from_hex(raw.get("number"))
    block["timestamp"] = codec.from_hex(raw.get("timestamp"))
    return block


def _logs_result(raw: Any) -> list[Log]:
    if not isinstance(raw, list):
        raise DecodeError(f"Expected list of logs, got: {raw!r}")
    for log in raw:
        if not isinstance(log, dict):
            raise DecodeError(f"Expected log object, got: {log!r}")
    return raw


def merge_range(
    codec: HexCodec,
    from_block: int,
    responses: Sequence[RPCResponse],
) -> list[Block]:
    """Merge N block replies and one trailing logs reply into enriched blocks.

    Raises ConsistencyError if a log falls outside the range or its blockHash
    differs from the hash of the block at its index.
    """
    *block_replies, logs_reply = responses
    blocks = [
        normalize_block(codec, r.unwrap("eth_getBlockByNumber")) for r in block_replies
    ]
    for block in blocks:
        block["logs"] = []

    for log in _logs_result(logs_reply.unwrap("eth_getLogs")):
        log_block_number = codec.from_hex(log.get("blockNumber"))
        index = log_block_number - from_block
        if not 0 <= index < len(blocks):
            raise ConsistencyError(
                f"Log block number {log_block_number} is outside the requested "
                f"range [{from_block}, {from_block + len(blocks)})",
                block_number=log_block_number,
                expected_hash=None,
                actual_hash=log.get("blockHash"),
            )
        block = blocks[index]
        if not block.get("hash") or not log.get("blockHash"):
            raise DecodeError(
                f"Missing hash for block {log_block_number}: "
                f"block hash {block.get('hash')!r}, log blockHash {log.get('blockHash')!r}"
            )
        if log.get("blockHash") != block.get("hash"):
            raise ConsistencyError(
                f"Error during fetch of logs. Log block hash ({log.get('blockHash')}) "
                f"differs from block hash ({block.get('hash')})",
                block_number=log_block_number,
                expected_hash=block.get("hash"),
                actual_hash=log.get("blockHash"),
            )
        block["logs"].append(log)

    return blocks


def merge_pairs(codec: HexCodec, responses: Sequence[RPCResponse]) -> list[Block]:
    """Merge (block, logs) reply pairs. No hash check is made."""
    blocks: list[Block] = []
    for i in range(0, len(responses) - 1, 2):
        block = normalize_block(codec, responses[i].unwrap("eth_getBlockByNumber"))
        block["logs"] = _logs_result(responses[i + 1].unwrap("eth_getLogs"))
        blocks.append(block)
    return blocks
