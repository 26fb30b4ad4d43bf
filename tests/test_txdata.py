import pytest
from eth_account import Account

from eth_rpc.chain.txdata import (
    encode_tx_data,
    normalize_private_key,
    parse_signature,
    private_to_address,
)
from eth_rpc.errors import InputError


def test_parse_signature_simple():
    assert parse_signature("transfer(address,uint256)") == ("transfer", ["address", "uint256"])


def test_parse_signature_no_args():
    assert parse_signature("pause()") == ("pause", [])


def test_parse_signature_tuple_args():
    name, types = parse_signature("submit((address,uint256)[], bytes)")
    assert name == "submit"
    assert types == ["(address,uint256)[]", "bytes"]


@pytest.mark.parametrize("bad", ["transfer", "(uint256)", "f(uint256", "f(uint256,)", "f((a)"])
def test_parse_signature_invalid(bad):
    with pytest.raises(InputError):
        parse_signature(bad)


def test_encode_tx_data_no_args():
    assert encode_tx_data("pause()") == "0x8456cb59"


def test_encode_tx_data_with_args():
    data = encode_tx_data("mint(address,uint256)", ["0x" + "22" * 20, 100])
    assert data.startswith("0x40c10f19")
    assert data[10:] == "00" * 12 + "22" * 20 + f"{100:064x}"


def test_encode_tx_data_arg_count_mismatch():
    with pytest.raises(InputError, match="expects 1 argument"):
        encode_tx_data("mint(uint256)", [])


def test_encode_tx_data_bad_value():
    with pytest.raises(InputError, match="Cannot encode"):
        encode_tx_data("mint(uint256)", [-1])


def test_normalize_private_key_forms():
    raw = bytes.fromhex("4c" * 32)
    assert normalize_private_key(raw) == raw
    assert normalize_private_key("4c" * 32) == raw
    assert normalize_private_key("0x" + "4c" * 32) == raw


@pytest.mark.parametrize("bad", ["0xzz", b"\x01" * 31, 12345])
def test_normalize_private_key_invalid(bad):
    with pytest.raises(InputError):
        normalize_private_key(bad)


def test_private_to_address():
    key = "0x" + "4c" * 32
    assert private_to_address(key) == Account.from_key(key).address
