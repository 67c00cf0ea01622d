"""
Unit tests for the JSON-RPC client.

No network access: either _rpc_call is patched, or httpx is given a
MockTransport.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from iotexkit.address import InvalidAddressFormat
from iotexkit.chain import rpc
from iotexkit.chain.rpc import (
    RpcError,
    get_account_info,
    get_balance,
    get_block,
    get_chain_id,
    get_chain_meta,
    get_collection_info,
    get_logs,
    get_nft_balance,
    get_nft_info,
    get_nft_owner,
    get_nonce,
    get_token_balance,
    get_token_info,
    is_contract,
    read_contract,
    wait_for_receipt,
)

IO_ADDR = "io1mflp9m6hcgm2qcghchsdqj3z3eccrnekx9p0ms"
HEX_ADDR = "0xda7e12ef57c236a06117c5e0d04a228e7181cf36"
RPC_URL = "http://node.test"


def _uint(value: int) -> str:
    return "0x" + value.to_bytes(32, "big").hex()


def _mock_client(handler: Any) -> Any:
    real_client = httpx.Client

    def factory(*args: Any, **kwargs: Any) -> httpx.Client:
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    return patch("iotexkit.chain.rpc.httpx.Client", side_effect=factory)


class TestRpcCall:
    """Tests for the JSON-RPC transport."""

    def test_posts_jsonrpc_payload(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1251"})

        with _mock_client(handler):
            assert get_chain_id(rpc_url=RPC_URL) == 4689

        assert seen["url"].startswith(RPC_URL)
        assert seen["body"]["method"] == "eth_chainId"
        assert seen["body"]["jsonrpc"] == "2.0"
        assert seen["body"]["params"] == []

    def test_error_object(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "boom"}},
            )

        with _mock_client(handler):
            with pytest.raises(RpcError) as excinfo:
                get_chain_id(rpc_url=RPC_URL)

        assert excinfo.value.code == -32000
        assert excinfo.value.message == "boom"
        assert excinfo.value.method == "eth_chainId"

    def test_http_error_propagates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        with _mock_client(handler):
            with pytest.raises(httpx.HTTPStatusError):
                get_chain_id(rpc_url=RPC_URL)


class TestAccountQueries:
    """Tests for account-level calls."""

    def test_balance_converts_io_address(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value="0xde0b6b3a7640000") as call:
            assert get_balance(IO_ADDR) == 10 ** 18
        call.assert_called_once_with("eth_getBalance", [HEX_ADDR, "latest"], rpc_url=None)

    def test_balance_at_block_number(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value="0x0") as call:
            get_balance(HEX_ADDR, block=255)
        assert call.call_args.args[1] == [HEX_ADDR, "0xff"]

    def test_invalid_address_never_reaches_wire(self) -> None:
        with patch.object(rpc, "_rpc_call") as call:
            with pytest.raises(InvalidAddressFormat):
                get_nonce("io1bad")
        call.assert_not_called()

    def test_is_contract(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value="0x6080"):
            assert is_contract(IO_ADDR)
        with patch.object(rpc, "_rpc_call", return_value="0x"):
            assert not is_contract(IO_ADDR)

    def test_account_info(self) -> None:
        responses = {
            "eth_getBalance": "0x14d1120d7b160000",
            "eth_getTransactionCount": "0x7",
            "eth_getCode": "0x",
        }

        def fake(method: str, params: list, rpc_url: Any = None) -> Any:
            assert params[0] == HEX_ADDR
            return responses[method]

        with patch.object(rpc, "_rpc_call", side_effect=fake):
            info = get_account_info(HEX_ADDR)

        assert info.native_address == IO_ADDR
        assert info.hex_address == HEX_ADDR
        assert info.balance_rau == 1_500_000_000_000_000_000
        assert info.balance_iotx == "1.5"
        assert info.nonce == 7
        assert info.is_contract is False
        assert info.to_dict()["balance"] == "1.5"


class TestChainQueries:
    """Tests for block and chain calls."""

    def test_chain_meta_epoch(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value=hex(8640 * 3 + 5)):
            meta = get_chain_meta()
        assert meta == {"height": 25925, "epoch": {"num": 3, "height": 25920}}

    def test_block_by_number(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value={"number": "0x10"}) as call:
            get_block(16)
        call.assert_called_once_with("eth_getBlockByNumber", ["0x10", False], rpc_url=None)

    def test_block_by_tag(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value={}) as call:
            get_block("latest", full_transactions=True)
        call.assert_called_once_with("eth_getBlockByNumber", ["latest", True], rpc_url=None)

    def test_block_by_hash(self) -> None:
        block_hash = "0x" + "ab" * 32
        with patch.object(rpc, "_rpc_call", return_value={}) as call:
            get_block(block_hash)
        call.assert_called_once_with("eth_getBlockByHash", [block_hash, False], rpc_url=None)

    def test_wait_for_receipt_polls(self) -> None:
        receipt = {"status": "0x1"}
        with patch.object(rpc, "_rpc_call", side_effect=[None, None, receipt]) as call:
            assert wait_for_receipt("0xabc", poll_interval=0) == receipt
        assert call.call_count == 3

    def test_wait_for_receipt_timeout(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value=None):
            with pytest.raises(TimeoutError):
                wait_for_receipt("0xabc", timeout=0, poll_interval=0)


class TestContracts:
    """Tests for eth_call helpers."""

    def test_read_contract(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value=_uint(1234)) as call:
            result = read_contract(IO_ADDR, "balanceOf", [IO_ADDR], abi_name="XRC20")

        assert result == 1234
        method, params = call.call_args.args
        assert method == "eth_call"
        assert params[0]["to"] == HEX_ADDR
        assert params[0]["data"].startswith("0x70a08231")
        assert params[1] == "latest"

    def test_read_contract_empty_result(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value="0x"):
            assert read_contract(IO_ADDR, "decimals", abi_name="XRC20") is None

    def test_read_contract_requires_abi(self) -> None:
        with pytest.raises(ValueError):
            read_contract(IO_ADDR, "decimals")

    def test_token_balance(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value=_uint(5_000_000)):
            assert get_token_balance(IO_ADDR, HEX_ADDR) == 5_000_000

    def test_token_info(self) -> None:
        values = {"name": "Wrapped IOTX", "symbol": "WIOTX", "decimals": 18, "totalSupply": 10 ** 24}

        def fake(address: str, field: str, **kwargs: Any) -> Any:
            assert kwargs["abi_name"] == "XRC20"
            return values[field]

        with patch.object(rpc, "read_contract", side_effect=fake):
            info = get_token_info(HEX_ADDR)

        assert info["address"] == IO_ADDR
        assert info["symbol"] == "WIOTX"
        assert info["decimals"] == 18


class TestNfts:
    """Tests for XRC-721 reads."""

    def test_owner_returned_as_io_address(self) -> None:
        owner_word = "0x" + "0" * 24 + HEX_ADDR[2:]
        with patch.object(rpc, "_rpc_call", return_value=owner_word) as call:
            assert get_nft_owner(HEX_ADDR, 7) == IO_ADDR
        params = call.call_args.args[1]
        # ownerOf(uint256)
        assert params[0]["data"].startswith("0x6352211e")
        assert params[0]["data"].endswith((7).to_bytes(32, "big").hex())

    def test_owner_missing(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value="0x"):
            with pytest.raises(RpcError):
                get_nft_owner(HEX_ADDR, 7)

    def test_balance(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value=_uint(3)):
            assert get_nft_balance(IO_ADDR, HEX_ADDR) == 3

    def test_collection_and_token_info(self) -> None:
        values = {"name": "Pebbles", "symbol": "PBL", "tokenURI": "ipfs://x/7"}

        def fake(address: str, field: str, args: Any = None, **kwargs: Any) -> Any:
            assert kwargs["abi_name"] == "XRC721"
            if field == "ownerOf":
                assert args == [7]
                return HEX_ADDR
            return values[field]

        with patch.object(rpc, "read_contract", side_effect=fake):
            collection = get_collection_info(HEX_ADDR)
            info = get_nft_info(HEX_ADDR, 7)

        assert collection == {"contractAddress": IO_ADDR, "name": "Pebbles", "symbol": "PBL"}
        assert info == {
            "contractAddress": IO_ADDR,
            "name": "Pebbles",
            "symbol": "PBL",
            "tokenId": 7,
            "owner": IO_ADDR,
            "tokenUri": "ipfs://x/7",
        }


class TestLogs:
    """Tests for eth_getLogs filters."""

    def test_filter_shape(self) -> None:
        topic = "0x" + "ab" * 32
        with patch.object(rpc, "_rpc_call", return_value=[{"data": "0x"}]) as call:
            result = get_logs(IO_ADDR, topics=[topic, None], from_block=100, to_block="latest")

        assert result == [{"data": "0x"}]
        call.assert_called_once_with(
            "eth_getLogs",
            [{"fromBlock": "0x64", "toBlock": "latest", "address": HEX_ADDR, "topics": [topic, None]}],
            rpc_url=None,
        )

    def test_multiple_addresses_and_defaults(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value=None) as call:
            assert get_logs([IO_ADDR, HEX_ADDR]) == []
        log_filter = call.call_args.args[1][0]
        assert log_filter["address"] == [HEX_ADDR, HEX_ADDR]
        assert "topics" not in log_filter

    def test_any_address(self) -> None:
        with patch.object(rpc, "_rpc_call", return_value=[]) as call:
            get_logs()
        assert "address" not in call.call_args.args[1][0]

    def test_invalid_address(self) -> None:
        with patch.object(rpc, "_rpc_call") as call:
            with pytest.raises(InvalidAddressFormat):
                get_logs("io1nope")
        call.assert_not_called()
