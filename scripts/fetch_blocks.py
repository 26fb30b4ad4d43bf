#!/usr/bin/env python3
"""Fetch blocks with their logs in a single batch RPC request.

Usage:
    python scripts/fetch_blocks.py --from-block 100 --to-block 110
    python scripts/fetch_blocks.py --blocks 100 250 4000
    python scripts/fetch_blocks.py --from-block 100 --to-block 102 --summary

Environment:
    ETH_RPC_URL - JSON-RPC endpoint (or pass --rpc-url)
    RPC_LOG_PATH - Optional JSONL file for per-request timing lines
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from eth_rpc.chain.eth import Eth
from eth_rpc.client import create_eth
from eth_rpc.config import Config, ConfigError, load_config
from eth_rpc.errors import EthRPCError


def summarize(blocks: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Reduce blocks to number, hash, timestamp and counts."""
    return [
        {
            "number": b["number"],
            "hash": b.get("hash"),
            "timestamp": b["timestamp"],
            "transactions": len(b.get("transactions") or []),
            "logs": len(b["logs"]),
        }
        for b in blocks
    ]


def fetch(eth: Eth, args: argparse.Namespace) -> list[dict[str, Any]]:
    if args.blocks:
        return eth.get_blocks_from_array(args.blocks)
    return eth.get_blocks(args.from_block, args.to_block)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Batch-fetch blocks and logs")
    parser.add_argument("--rpc-url", default="", help="Override ETH_RPC_URL")
    parser.add_argument("--from-block", type=int, help="First block (inclusive)")
    parser.add_argument("--to-block", type=int, help="Last block (exclusive)")
    parser.add_argument(
        "--blocks",
        type=int,
        nargs="+",
        default=[],
        help="Explicit block numbers (no log/block hash check)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print counts instead of full block objects",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    has_range = args.from_block is not None or args.to_block is not None
    if args.blocks and has_range:
        parser.error("--blocks cannot be combined with --from-block/--to-block")
    if not args.blocks and (args.from_block is None or args.to_block is None):
        parser.error("pass --from-block and --to-block, or --blocks")

    try:
        config = Config(rpc_url=args.rpc_url) if args.rpc_url else load_config()
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    eth = create_eth(config)
    try:
        blocks = fetch(eth, args)
    except EthRPCError as e:
        print(f"ERROR ({e.kind}): {e}", file=sys.stderr)
        return 1

    out = summarize(blocks) if args.summary else blocks
    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
