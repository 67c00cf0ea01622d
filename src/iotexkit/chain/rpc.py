"""
JSON-RPC client for the IoTeX Babel (Ethereum-compatible) endpoint.

Uses httpx for HTTP + eth-abi for contract calls. Every address argument
accepts io- or 0x-form; it is converted to 0x-form before it goes on the
wire.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

import httpx

from ..address import to_hex, to_native
from ..networks import EPOCH_BLOCKS, get_rpc_url
from ..units import rau_to_iotx
from .abi import decode_function_result, encode_function_call, load_abi

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30

BlockId = Union[int, str]


class RpcError(RuntimeError):
    exit_code: int = 1

    def __init__(self, method: str, code: Optional[int], message: str) -> None:
        self.method = method
        self.code = code
        self.message = message
        super().__init__(f"RPC error in {method}: {message} (code {code})")


@dataclass(frozen=True)
class AccountInfo:
    native_address: str
    hex_address: str
    balance_rau: int
    nonce: int
    is_contract: bool

    @property
    def balance_iotx(self) -> str:
        return rau_to_iotx(self.balance_rau)

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.native_address,
            "hexAddress": self.hex_address,
            "balance": self.balance_iotx,
            "balanceRau": str(self.balance_rau),
            "nonce": self.nonce,
            "isContract": self.is_contract,
        }


def _rpc_call(method: str, params: list, rpc_url: Optional[str] = None) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_call")
        params: RPC parameters
        rpc_url: RPC endpoint URL (default: active network)

    Returns:
        Result field from the RPC response

    Raises:
        RpcError: If the node answers with a JSON-RPC error
        httpx.HTTPError: On transport failure or non-2xx status
    """
    url = rpc_url or get_rpc_url()
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }
    logger.debug("rpc %s %s params=%s", url, method, params)

    with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
        response = client.post(url, json=payload)
        response.raise_for_status()
        data = response.json()

    error = data.get("error")
    if error:
        if isinstance(error, dict):
            raise RpcError(method, error.get("code"), error.get("message", "Unknown RPC error"))
        raise RpcError(method, None, str(error))

    return data.get("result")


def _block_param(block: BlockId) -> str:
    if isinstance(block, int):
        return hex(block)
    return block


def _to_int(value: Optional[str]) -> int:
    if value is None:
        return 0
    return int(value, 16)


# ==================== Account ====================

def get_balance(address: str, block: BlockId = "latest", rpc_url: Optional[str] = None) -> int:
    """
    Get IOTX balance for an address.

    Returns:
        Balance in Rau
    """
    result = _rpc_call("eth_getBalance", [to_hex(address), _block_param(block)], rpc_url=rpc_url)
    return _to_int(result)


def get_nonce(address: str, block: BlockId = "latest", rpc_url: Optional[str] = None) -> int:
    result = _rpc_call(
        "eth_getTransactionCount", [to_hex(address), _block_param(block)], rpc_url=rpc_url
    )
    return _to_int(result)


def get_code(address: str, rpc_url: Optional[str] = None) -> str:
    """Deployed bytecode at an address ("0x" for plain accounts)."""
    return _rpc_call("eth_getCode", [to_hex(address), "latest"], rpc_url=rpc_url) or "0x"


def is_contract(address: str, rpc_url: Optional[str] = None) -> bool:
    return get_code(address, rpc_url=rpc_url) not in ("0x", "0x0", "")


def get_account_info(address: str, rpc_url: Optional[str] = None) -> AccountInfo:
    hex_address = to_hex(address)
    return AccountInfo(
        native_address=to_native(hex_address),
        hex_address=hex_address,
        balance_rau=get_balance(hex_address, rpc_url=rpc_url),
        nonce=get_nonce(hex_address, rpc_url=rpc_url),
        is_contract=is_contract(hex_address, rpc_url=rpc_url),
    )


# ==================== Chain / Blocks ====================

def get_gas_price(rpc_url: Optional[str] = None) -> int:
    """Current gas price in Rau."""
    return _to_int(_rpc_call("eth_gasPrice", [], rpc_url=rpc_url))


def get_chain_id(rpc_url: Optional[str] = None) -> int:
    return _to_int(_rpc_call("eth_chainId", [], rpc_url=rpc_url))


def get_block_number(rpc_url: Optional[str] = None) -> int:
    return _to_int(_rpc_call("eth_blockNumber", [], rpc_url=rpc_url))


def get_block(
    block: BlockId = "latest",
    full_transactions: bool = False,
    rpc_url: Optional[str] = None,
) -> Optional[dict]:
    """
    Get a block by number, tag ("latest", "earliest", "pending") or hash.
    """
    if isinstance(block, str) and block.startswith("0x") and len(block) == 66:
        return _rpc_call("eth_getBlockByHash", [block, full_transactions], rpc_url=rpc_url)
    return _rpc_call(
        "eth_getBlockByNumber", [_block_param(block), full_transactions], rpc_url=rpc_url
    )


def get_chain_meta(rpc_url: Optional[str] = None) -> dict[str, Any]:
    """Chain height and the epoch derived from it."""
    height = get_block_number(rpc_url=rpc_url)
    epoch_num = height // EPOCH_BLOCKS
    return {
        "height": height,
        "epoch": {
            "num": epoch_num,
            "height": epoch_num * EPOCH_BLOCKS,
        },
    }


# ==================== Transactions ====================

def get_transaction(tx_hash: str, rpc_url: Optional[str] = None) -> Optional[dict]:
    return _rpc_call("eth_getTransactionByHash", [tx_hash], rpc_url=rpc_url)


def get_transaction_receipt(tx_hash: str, rpc_url: Optional[str] = None) -> Optional[dict]:
    return _rpc_call("eth_getTransactionReceipt", [tx_hash], rpc_url=rpc_url)


def estimate_gas(
    from_address: str,
    to_address: str,
    value: int = 0,
    data: str = "0x",
    rpc_url: Optional[str] = None,
) -> int:
    """
    Estimate gas for a call.

    Args:
        value: Amount in Rau
    """
    call = {
        "from": to_hex(from_address),
        "to": to_hex(to_address),
        "value": hex(value),
        "data": data,
    }
    return _to_int(_rpc_call("eth_estimateGas", [call], rpc_url=rpc_url))


def send_raw_transaction(raw_tx: str, rpc_url: Optional[str] = None) -> str:
    """
    Send a signed raw transaction.

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    return _rpc_call("eth_sendRawTransaction", [raw_tx], rpc_url=rpc_url)


def wait_for_receipt(
    tx_hash: str,
    timeout: int = 120,
    poll_interval: float = 2.0,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Wait for a transaction receipt.

    Raises:
        TimeoutError: If receipt not found within timeout
    """
    start = time.time()
    while time.time() - start < timeout:
        receipt = get_transaction_receipt(tx_hash, rpc_url=rpc_url)
        if receipt is not None:
            return receipt
        time.sleep(poll_interval)

    raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")


# ==================== Contracts ====================

def read_contract(
    contract_address: str,
    function_name: str,
    args: Optional[list] = None,
    abi_name: Optional[str] = None,
    abi: Optional[list] = None,
    block: BlockId = "latest",
    rpc_url: Optional[str] = None,
) -> Any:
    """
    Read from a smart contract (eth_call).

    Args:
        contract_address: Contract address, io- or 0x-form
        function_name: Function to call
        args: Function arguments (default: [])
        abi_name: Bundled ABI name or ABI file path
        abi: Pre-loaded ABI (if not using abi_name)

    Returns:
        Decoded return value(s), or None for an empty result
    """
    if abi is None:
        if abi_name is None:
            raise ValueError("Either abi or abi_name must be provided")
        abi = load_abi(abi_name)

    calldata = encode_function_call(abi, function_name, args or [])

    result = _rpc_call(
        "eth_call",
        [{"to": to_hex(contract_address), "data": calldata}, _block_param(block)],
        rpc_url=rpc_url,
    )

    if result is None or result == "0x":
        return None

    return decode_function_result(abi, function_name, result)


def get_token_balance(token_address: str, owner: str, rpc_url: Optional[str] = None) -> int:
    """XRC-20 balance of `owner`, in the token's base units."""
    balance = read_contract(token_address, "balanceOf", [owner], abi_name="XRC20", rpc_url=rpc_url)
    return balance or 0


def get_token_info(token_address: str, rpc_url: Optional[str] = None) -> dict[str, Any]:
    """Name, symbol, decimals and total supply of an XRC-20 token."""
    info: dict[str, Any] = {"address": to_native(token_address)}
    for field in ("name", "symbol", "decimals", "totalSupply"):
        info[field] = read_contract(token_address, field, abi_name="XRC20", rpc_url=rpc_url)
    return info


# ==================== NFTs (XRC-721) ====================

def get_nft_owner(contract_address: str, token_id: int, rpc_url: Optional[str] = None) -> str:
    """Owner of an XRC-721 token, as an io-address."""
    owner = read_contract(contract_address, "ownerOf", [token_id], abi_name="XRC721", rpc_url=rpc_url)
    if owner is None:
        raise RpcError("eth_call", None, f"ownerOf({token_id}) returned no data")
    return to_native(owner.lower())


def get_nft_balance(contract_address: str, owner: str, rpc_url: Optional[str] = None) -> int:
    """Number of tokens `owner` holds in an XRC-721 collection."""
    balance = read_contract(contract_address, "balanceOf", [owner], abi_name="XRC721", rpc_url=rpc_url)
    return balance or 0


def get_collection_info(contract_address: str, rpc_url: Optional[str] = None) -> dict[str, Any]:
    """Name and symbol of an XRC-721 collection."""
    info: dict[str, Any] = {"contractAddress": to_native(contract_address)}
    for field in ("name", "symbol"):
        info[field] = read_contract(contract_address, field, abi_name="XRC721", rpc_url=rpc_url)
    return info


def get_nft_info(contract_address: str, token_id: int, rpc_url: Optional[str] = None) -> dict[str, Any]:
    """Collection name/symbol plus owner and metadata URI of one token."""
    info = get_collection_info(contract_address, rpc_url=rpc_url)
    info["tokenId"] = token_id
    info["owner"] = get_nft_owner(contract_address, token_id, rpc_url=rpc_url)
    info["tokenUri"] = read_contract(
        contract_address, "tokenURI", [token_id], abi_name="XRC721", rpc_url=rpc_url
    )
    return info


# ==================== Events ====================

def get_logs(
    address: Union[str, Sequence[str], None] = None,
    topics: Optional[list] = None,
    from_block: BlockId = "latest",
    to_block: BlockId = "latest",
    rpc_url: Optional[str] = None,
) -> list[dict]:
    """
    Fetch event logs (eth_getLogs).

    Args:
        address: Emitting contract(s), io- or 0x-form (default: any)
        topics: Topic filter; each position is a 0x-hash, a list of
            alternatives, or None as a wildcard
        from_block: First block (number or tag)
        to_block: Last block (number or tag)

    Returns:
        Log objects as returned by the node
    """
    log_filter: dict[str, Any] = {
        "fromBlock": _block_param(from_block),
        "toBlock": _block_param(to_block),
    }
    if isinstance(address, str):
        log_filter["address"] = to_hex(address)
    elif address is not None:
        log_filter["address"] = [to_hex(a) for a in address]
    if topics:
        log_filter["topics"] = topics

    return _rpc_call("eth_getLogs", [log_filter], rpc_url=rpc_url) or []
