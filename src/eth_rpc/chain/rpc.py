"""Ethereum JSON-RPC transport using raw JSON-RPC via requests.

Batch replies are matched back to their requests by id, so the list returned
by ``batch_request`` always follows submission order even when the node
answers out of order.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Sequence

import requests

from eth_rpc.errors import TransportError

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("eth_rpc.requests")

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class RPCRequest:
    method: str
    params: list[Any] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RPCResponse:
    """One element of a batch reply: either a result or an error object."""

    result: Any = None
    error: dict[str, Any] | None = None

    def unwrap(self, method: str | None = None) -> Any:
        """Return the result, or raise TransportError for an error element."""
        if self.error is not None:
            raise _error_from_payload(self.error, method)
        return self.result


def _error_from_payload(err: Any, method: str | None) -> TransportError:
    if isinstance(err, dict):
        return TransportError(
            f"RPC error: {err.get('message', 'unknown')}",
            code=err.get("code"),
            method=method,
        )
    return TransportError(f"RPC error: {err}", method=method)


class JsonRpcClient:
    """Blocking JSON-RPC 2.0 client over HTTP POST."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, payload: Any, methods: list[str]) -> Any:
        label = methods[0] if len(methods) == 1 else "batch"
        start = time.monotonic()
        ok = False
        try:
            try:
                resp = self.session.post(self.url, json=payload, timeout=self.timeout)
                resp.raise_for_status()
            except (requests.RequestException, ConnectionError) as e:
                raise TransportError(f"RPC request failed: {e}", method=label) from e

            try:
                data = resp.json()
            except ValueError as e:
                raise TransportError(
                    f"RPC returned invalid JSON: {e}", method=label
                ) from e
            ok = True
            return data
        finally:
            _log_round_trip(methods, start, ok)

    def call(self, method: str, params: Sequence[Any] | None = None) -> Any:
        """Issue a single call and return its result.

        A JSON ``null`` result is returned as None; deciding whether that is
        acceptable is left to the caller.
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": list(params or []),
            "id": 1,
        }
        logger.debug("RPC call %s %s", method, payload["params"])
        data = self._post(payload, [method])

        if not isinstance(data, dict):
            raise TransportError("RPC returned a non-object reply", method=method)
        if data.get("error") is not None:
            raise _error_from_payload(data["error"], method)
        return data.get("result")

    def batch_request(self, calls: Sequence[RPCRequest]) -> list[RPCResponse]:
        """Issue all calls in one round trip.

        The returned list is in the same order as ``calls``. A reply that is not
        a list, or whose ids do not match the request ids one to one, raises
        TransportError. Errors on individual elements are returned in place and
        raised by RPCResponse.unwrap.
        """
        if not calls:
            return []

        payload = [
            {"jsonrpc": "2.0", "method": c.method, "params": list(c.params), "id": i}
            for i, c in enumerate(calls, start=1)
        ]
        methods = [c.method for c in calls]
        logger.debug("RPC batch of %d calls", len(calls))
        data = self._post(payload, methods)

        if isinstance(data, dict) and data.get("error") is not None:
            # Whole batch rejected by the node
            raise _error_from_payload(data["error"], "batch")
        if not isinstance(data, list):
            raise TransportError("RPC batch reply is not a list", method="batch")

        by_id: dict[int, dict[str, Any]] = {}
        for item in data:
            if (
                isinstance(item, dict)
                and item.get("id") is None
                and item.get("error") is not None
            ):
                # Whole batch rejected, reported as a one-element list
                raise _error_from_payload(item["error"], "batch")
            item_id = item.get("id") if isinstance(item, dict) else None
            if not isinstance(item_id, int) or not 1 <= item_id <= len(calls):
                raise TransportError(
                    f"RPC batch reply has unexpected id: {item_id!r}", method="batch"
                )
            if item_id in by_id:
                raise TransportError(
                    f"RPC batch reply has duplicate id: {item_id}", method="batch"
                )
            by_id[item_id] = item

        if len(by_id) != len(calls):
            missing = sorted(set(range(1, len(calls) + 1)) - by_id.keys())
            raise TransportError(
                f"RPC batch reply is missing ids: {missing}", method="batch"
            )

        return [
            RPCResponse(result=by_id[i].get("result"), error=by_id[i].get("error"))
            for i in range(1, len(calls) + 1)
        ]


def _log_round_trip(methods: list[str], start: float, ok: bool) -> None:
    """Emit one structured JSON line per HTTP round trip."""
    if not request_logger.isEnabledFor(logging.INFO):
        return
    entry: dict[str, object] = {
        "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "methods": sorted(set(methods)),
        "size": len(methods),
        "duration_ms": round((time.monotonic() - start) * 1000),
        "ok": ok,
    }
    request_logger.info(json.dumps(entry, separators=(",", ":")))
