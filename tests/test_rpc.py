import json

import pytest
import responses

from eth_rpc.chain.rpc import JsonRpcClient, RPCRequest, RPCResponse
from eth_rpc.errors import TransportError
from tests.fixtures.chain import RPC_URL


@pytest.fixture()
def client():
    return JsonRpcClient(RPC_URL, timeout=5.0)


# --- call tests ---


@responses.activate
def test_call_success(client):
    responses.post(RPC_URL, json={"jsonrpc": "2.0", "id": 1, "result": "0x6080604052"})
    result = client.call("eth_getCode", ["0x" + "12" * 20, "latest"])
    assert result == "0x6080604052"

    sent = json.loads(responses.calls[0].request.body)
    assert sent["method"] == "eth_getCode"
    assert sent["params"] == ["0x" + "12" * 20, "latest"]
    assert sent["jsonrpc"] == "2.0"


@responses.activate
def test_call_null_result_returned_as_none(client):
    responses.post(RPC_URL, json={"jsonrpc": "2.0", "id": 1, "result": None})
    assert client.call("eth_getTransactionReceipt", ["0x" + "aa" * 32]) is None


@responses.activate
def test_call_rpc_error(client):
    responses.post(
        RPC_URL,
        json={
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32600, "message": "Invalid request"},
        },
    )
    with pytest.raises(TransportError, match="Invalid request") as exc_info:
        client.call("eth_gasPrice")
    assert exc_info.value.code == -32600
    assert exc_info.value.method == "eth_gasPrice"
    assert exc_info.value.kind == "transport"


@responses.activate
def test_call_network_error(client):
    responses.post(RPC_URL, body=ConnectionError("timeout"))
    with pytest.raises(TransportError, match="RPC request failed"):
        client.call("eth_blockNumber")


@responses.activate
def test_call_http_error(client):
    responses.post(RPC_URL, status=503, body="unavailable")
    with pytest.raises(TransportError, match="RPC request failed"):
        client.call("eth_blockNumber")


@responses.activate
def test_call_invalid_json(client):
    responses.post(RPC_URL, body="not json")
    with pytest.raises(TransportError, match="invalid JSON"):
        client.call("eth_blockNumber")


# --- batch_request tests ---


def _batch_reply(items):
    return [{"jsonrpc": "2.0", "id": i, "result": r} for i, r in items]


@responses.activate
def test_batch_request_ids_follow_submission_order(client):
    responses.post(RPC_URL, json=_batch_reply([(1, "0x1"), (2, "0x2")]))
    client.batch_request(
        [RPCRequest("eth_blockNumber"), RPCRequest("eth_gasPrice")]
    )
    sent = json.loads(responses.calls[0].request.body)
    assert [s["id"] for s in sent] == [1, 2]
    assert [s["method"] for s in sent] == ["eth_blockNumber", "eth_gasPrice"]


@responses.activate
def test_batch_request_reorders_replies_by_id(client):
    responses.post(RPC_URL, json=_batch_reply([(3, "c"), (1, "a"), (2, "b")]))
    out = client.batch_request([RPCRequest("m")] * 3)
    assert [r.result for r in out] == ["a", "b", "c"]


@responses.activate
def test_batch_request_per_element_error(client):
    responses.post(
        RPC_URL,
        json=[
            {"jsonrpc": "2.0", "id": 1, "result": "0x1"},
            {"jsonrpc": "2.0", "id": 2, "error": {"code": -32000, "message": "header not found"}},
        ],
    )
    out = client.batch_request([RPCRequest("a"), RPCRequest("b")])
    assert out[0].unwrap("a") == "0x1"
    with pytest.raises(TransportError, match="header not found") as exc_info:
        out[1].unwrap("b")
    assert exc_info.value.code == -32000
    assert exc_info.value.method == "b"


@responses.activate
def test_batch_request_missing_id(client):
    responses.post(RPC_URL, json=_batch_reply([(1, "a")]))
    with pytest.raises(TransportError, match="missing ids: \\[2\\]"):
        client.batch_request([RPCRequest("m"), RPCRequest("m")])


@responses.activate
def test_batch_request_duplicate_id(client):
    responses.post(RPC_URL, json=_batch_reply([(1, "a"), (1, "b")]))
    with pytest.raises(TransportError, match="duplicate id"):
        client.batch_request([RPCRequest("m"), RPCRequest("m")])


@responses.activate
def test_batch_request_unknown_id(client):
    responses.post(RPC_URL, json=_batch_reply([(1, "a"), (7, "b")]))
    with pytest.raises(TransportError, match="unexpected id"):
        client.batch_request([RPCRequest("m"), RPCRequest("m")])


@responses.activate
def test_batch_request_whole_batch_rejected(client):
    responses.post(
        RPC_URL,
        json={"jsonrpc": "2.0", "id": None, "error": {"code": -32005, "message": "batch too large"}},
    )
    with pytest.raises(TransportError, match="batch too large"):
        client.batch_request([RPCRequest("m")])


@responses.activate
def test_batch_request_rejected_as_list_reply(client):
    responses.post(
        RPC_URL,
        json=[{"jsonrpc": "2.0", "id": None, "error": {"code": -32600, "message": "batch too large"}}],
    )
    with pytest.raises(TransportError, match="batch too large") as exc_info:
        client.batch_request([RPCRequest("m"), RPCRequest("m")])
    assert exc_info.value.code == -32600
    assert exc_info.value.method == "batch"


@responses.activate
def test_batch_request_network_error(client):
    responses.post(RPC_URL, body=ConnectionError("reset"))
    with pytest.raises(TransportError, match="RPC request failed"):
        client.batch_request([RPCRequest("m")])


@responses.activate
def test_batch_request_empty_makes_no_call(client):
    assert client.batch_request([]) == []
    assert len(responses.calls) == 0


def test_rpc_response_unwrap_result():
    assert RPCResponse(result={"a": 1}).unwrap() == {"a": 1}
