"""Environment configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_GAS_LIMIT = "0x6691b7"
DEFAULT_TIMEOUT = 10.0


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True, slots=True)
class Config:
    rpc_url: str
    timeout: float = DEFAULT_TIMEOUT
    chain_id: int | None = None
    default_gas_limit: str = DEFAULT_GAS_LIMIT
    request_log_path: str = ""


def _parse_number(name: str, raw: str, kind: type) -> int | float:
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def load_config() -> Config:
    """Load configuration from environment variables.

    Raises ConfigError if ETH_RPC_URL is not set or a numeric value is malformed.
    """
    load_dotenv()

    rpc_url = os.environ.get("ETH_RPC_URL", "")
    if not rpc_url:
        raise ConfigError("ETH_RPC_URL environment variable is required")

    raw_timeout = os.environ.get("ETH_RPC_TIMEOUT", "")
    timeout = (
        float(_parse_number("ETH_RPC_TIMEOUT", raw_timeout, float))
        if raw_timeout
        else DEFAULT_TIMEOUT
    )

    raw_chain_id = os.environ.get("ETH_CHAIN_ID", "")
    chain_id: int | None = (
        int(_parse_number("ETH_CHAIN_ID", raw_chain_id, int)) if raw_chain_id else None
    )

    return Config(
        rpc_url=rpc_url,
        timeout=timeout,
        chain_id=chain_id,
        default_gas_limit=os.environ.get("ETH_DEFAULT_GAS_LIMIT", DEFAULT_GAS_LIMIT),
        request_log_path=os.environ.get("RPC_LOG_PATH", ""),
    )
