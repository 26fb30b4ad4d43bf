"""Eth JSON-RPC helper: thin wrappers plus batched block/log fetching."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from eth_account import Account
from eth_utils import to_checksum_address, to_hex

from eth_rpc.chain import blocks as batch
from eth_rpc.chain.blocks import Block, Log
from eth_rpc.chain.hexcodec import HexCodec
from eth_rpc.chain.rpc import JsonRpcClient
from eth_rpc.chain.txdata import (
    encode_tx_data,
    normalize_private_key,
    private_to_address,
)
from eth_rpc.config import DEFAULT_GAS_LIMIT
from eth_rpc.errors import InputError

logger = logging.getLogger(__name__)


class Eth:
    """Ethereum RPC helper bound to a transport and a hex codec.

    The transport must return batch replies in submission order;
    JsonRpcClient guarantees this by correlating reply ids.
    """

    def __init__(
        self,
        transport: JsonRpcClient,
        codec: HexCodec | None = None,
        *,
        chain_id: int | None = None,
        default_gas_limit: str = DEFAULT_GAS_LIMIT,
    ):
        self.transport = transport
        self.codec = codec or HexCodec()
        self.chain_id = chain_id
        self.default_gas_limit = default_gas_limit

    def rpc(self, method: str, params: Sequence[Any] | None = None) -> Any:
        return self.transport.call(method, list(params or []))

    # --- Contract calls and transactions

    def call(
        self,
        method_signature: str,
        to: str,
        args: Sequence[Any] = (),
        block_number: str = "latest",
    ) -> str:
        """eth_call a contract method and return the raw hex result.

        ``block_number`` is "latest" or a 0x-prefixed hex quantity.
        """
        if block_number != "latest" and not self.codec.is_hex(block_number):
            raise InputError(
                f"Expected hex, got: {block_number!r} "
                f"(type {type(block_number).__name__})"
            )
        data = encode_tx_data(method_signature, args)
        return self.rpc("eth_call", [{"to": to, "data": data}, block_number])

    def transaction(
        self,
        method_signature: str,
        to: str,
        args: Sequence[Any] = (),
        private_key: bytes | str = b"",
        nonce: int | str | None = None,
        value: int | str | None = None,
        gas: int | str | None = None,
        gas_price: int | str | None = None,
        data: str | None = None,
    ) -> str:
        """Build, sign and send a legacy transaction. Returns the tx hash.

        Nonce and gas price are fetched from the node only when not given.
        Numeric fields accept ints or hex strings.
        """
        data = data or encode_tx_data(method_signature, args)
        key = normalize_private_key(private_key)
        try:
            to_address = to_checksum_address(to)
        except (TypeError, ValueError) as e:
            raise InputError(f"Invalid recipient address: {to!r}") from e

        if nonce is None:
            nonce = self.get_transaction_count(private_to_address(key))
        if gas_price is None:
            gas_price = self.gas_price()

        tx: dict[str, Any] = {
            "to": to_address,
            "data": data,
            "nonce": self._quantity(nonce, "nonce"),
            "gas": self._quantity(gas or self.default_gas_limit, "gas"),
            "gasPrice": self._quantity(gas_price, "gas_price"),
            "value": self._quantity(value or 0, "value"),
        }
        if self.chain_id is not None:
            tx["chainId"] = self.chain_id

        signed = Account.sign_transaction(tx, key)
        logger.debug("Sending tx nonce=%d to %s", tx["nonce"], tx["to"])
        return self.rpc("eth_sendRawTransaction", [to_hex(signed.raw_transaction)])

    def _quantity(self, value: int | str, name: str) -> int:
        if isinstance(value, str):
            if value == "0x":
                return 0
            if not self.codec.is_hex(value):
                raise InputError(f"{name} must be an int or hex string, got: {value!r}")
            return self.codec.from_hex(value)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InputError(f"{name} must be a non-negative int, got: {value!r}")
        return value

    # --- Pass-through queries

    def gas_price(self) -> str:
        return self.rpc("eth_gasPrice", [])

    def get_code(self, address: str) -> str:
        return self.rpc("eth_getCode", [address, "latest"])

    def get_transaction_receipt(self, transaction_hash: str) -> dict[str, Any] | None:
        return self.rpc("eth_getTransactionReceipt", [transaction_hash])

    def get_transaction_count(self, address: str, block: str = "latest") -> str:
        return self.rpc("eth_getTransactionCount", [address, block])

    def block_number(self) -> int:
        return self.codec.from_hex(self.rpc("eth_blockNumber", []))

    def get_block(self, block_number: int) -> Block:
        """Fetch a block with full transactions; number and timestamp as ints."""
        batch.check_block_number(block_number)
        raw = self.rpc(
            "eth_getBlockByNumber", [self.codec.to_hex(block_number), True]
        )
        return batch.normalize_block(self.codec, raw)

    def get_logs(self, from_block: int, to_block: int) -> list[Log]:
        """Logs for the inclusive range [from_block, to_block]."""
        batch.check_block_number(from_block, "from_block")
        batch.check_block_number(to_block, "to_block")
        return self.rpc(
            "eth_getLogs", [batch.log_filter(self.codec, from_block, to_block)]
        )

    # --- Batched block + log fetching

    def get_blocks(self, from_block: int, to_block: int) -> list[Block]:
        """Fetch blocks [from_block, to_block) and their logs in one batch.

        Every log is attached to the block at ``blockNumber - from_block``
        and its ``blockHash`` must match that block's hash; a mismatch raises
        ConsistencyError and no blocks are returned. A mismatch usually means
        the node served logs from a different fork than the blocks, so the
        caller should re-fetch rather than retry the merge.
        """
        batch.check_block_number(from_block, "from_block")
        batch.check_block_number(to_block, "to_block")
        if from_block > to_block:
            raise InputError(
                f"from_block ({from_block}) must be <= to_block ({to_block})"
            )
        if from_block == to_block:
            return []

        responses = self.transport.batch_request(
            batch.range_requests(self.codec, from_block, to_block)
        )
        return batch.merge_range(self.codec, from_block, responses)

    def get_blocks_from_array(self, block_numbers: Sequence[int]) -> list[Block]:
        """Fetch the given blocks and their logs in one batch.

        Each block is paired with an eth_getLogs call scoped to that block
        alone. Unlike get_blocks, log hashes are NOT checked against the
        block hash, so a reorg between the two calls goes unnoticed.
        """
        numbers = [batch.check_block_number(bn) for bn in block_numbers]
        if not numbers:
            return []

        responses = self.transport.batch_request(
            batch.pair_requests(self.codec, numbers)
        )
        return batch.merge_pairs(self.codec, responses)
