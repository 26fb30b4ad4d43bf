"""Factory wiring config, transport and request logging into an Eth helper."""

from __future__ import annotations

import logging
import os

from eth_rpc.chain.eth import Eth
from eth_rpc.chain.hexcodec import HexCodec
from eth_rpc.chain.rpc import JsonRpcClient, request_logger
from eth_rpc.config import Config, load_config

logger = logging.getLogger(__name__)


def configure_request_log_file(log_path: str) -> logging.Handler | None:
    """Attach a JSONL file handler to the request logger if a path is given."""
    if not log_path:
        return None

    os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)

    for existing in request_logger.handlers:
        if (
            isinstance(existing, logging.FileHandler)
            and existing.baseFilename == os.path.abspath(log_path)
        ):
            return existing

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    request_logger.addHandler(handler)
    request_logger.setLevel(logging.INFO)
    logger.info("RPC request logging enabled: %s", log_path)
    return handler


def create_eth(config: Config | None = None) -> Eth:
    """Build an Eth helper.

    Pass a Config object for testing; defaults to loading from environment.
    """
    if config is None:
        config = load_config()

    configure_request_log_file(config.request_log_path)

    transport = JsonRpcClient(config.rpc_url, timeout=config.timeout)
    return Eth(
        transport,
        HexCodec(),
        chain_id=config.chain_id,
        default_gas_limit=config.default_gas_limit,
    )
