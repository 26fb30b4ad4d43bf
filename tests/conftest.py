import pytest

from eth_rpc.chain.eth import Eth
from eth_rpc.chain.hexcodec import HexCodec
from eth_rpc.chain.rpc import JsonRpcClient
from eth_rpc.config import Config
from tests.fixtures.chain import RPC_URL


@pytest.fixture()
def test_config():
    return Config(rpc_url=RPC_URL, timeout=5.0)


@pytest.fixture()
def transport():
    return JsonRpcClient(RPC_URL, timeout=5.0)


@pytest.fixture()
def eth(transport):
    return Eth(transport, HexCodec())
