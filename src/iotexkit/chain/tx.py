"""
Transaction Builder - Build, sign, and send IoTeX transactions.

Uses eth-account for signing and the httpx-based JSON-RPC client for
sending. Recipients may be io- or 0x-addresses.
"""

from __future__ import annotations

from typing import Any, Optional

from ..address import to_hex, to_native
from ..networks import get_chain_id
from ..units import iotx_to_rau
from ..wallet.eth import get_account
from .abi import encode_deploy_data, encode_function_call, keccak256, load_abi
from .rpc import (
    get_gas_price,
    get_nonce,
    send_raw_transaction,
    wait_for_receipt,
)

DEFAULT_TRANSFER_GAS = 21_000
DEFAULT_CONTRACT_GAS = 500_000
DEFAULT_DEPLOY_GAS = 3_000_000


def to_checksum_address(address: str) -> str:
    """Convert an io- or 0x-address to EIP-55 checksummed 0x-form.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = to_hex(address)[2:]
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def _base_tx(private_key: Optional[str], rpc_url: Optional[str]) -> dict[str, Any]:
    account = get_account(private_key)
    return {
        "nonce": get_nonce(account.address, rpc_url=rpc_url),
        "gasPrice": get_gas_price(rpc_url=rpc_url),
        "chainId": get_chain_id(),
    }


def build_transfer_tx(
    to: str,
    amount_iotx: str,
    data: str = "0x",
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Build a native IOTX transfer (unsigned).

    Args:
        to: Recipient, io- or 0x-form
        amount_iotx: Amount in IOTX, e.g. "1.5"
        data: Optional payload
        gas_limit: Gas limit (default: 21000, or 500000 with payload)

    Returns:
        Unsigned transaction dict
    """
    tx = _base_tx(private_key, rpc_url)
    tx.update({
        "to": to_checksum_address(to),
        "value": iotx_to_rau(amount_iotx),
        "data": data,
        "gas": gas_limit or (DEFAULT_TRANSFER_GAS if data in ("", "0x") else DEFAULT_CONTRACT_GAS),
    })
    return tx


def build_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    abi_name: Optional[str] = None,
    abi: Optional[list] = None,
    value: int = 0,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Build a contract call transaction (unsigned).

    Args:
        contract_address: Contract address, io- or 0x-form
        function_name: Function to call
        args: Function arguments
        abi_name: Bundled ABI name or ABI file path
        abi: Pre-loaded ABI
        value: IOTX value in Rau (default: 0)
        gas_limit: Gas limit (default: 500000)
        private_key: For nonce lookup and later signing

    Returns:
        Unsigned transaction dict
    """
    if abi is None:
        if abi_name is None:
            raise ValueError("Either abi or abi_name must be provided")
        abi = load_abi(abi_name)

    tx = _base_tx(private_key, rpc_url)
    tx.update({
        "to": to_checksum_address(contract_address),
        "data": encode_function_call(abi, function_name, args),
        "value": value,
        "gas": gas_limit or DEFAULT_CONTRACT_GAS,
    })
    return tx


def sign_and_send(
    tx: dict,
    private_key: Optional[str] = None,
    wait: bool = True,
    timeout: int = 120,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Sign a transaction and send it.

    Returns:
        Dict with tx_hash and, when waiting, receipt and status
    """
    account = get_account(private_key)
    signed = account.sign_transaction(tx)
    raw_tx = "0x" + bytes(signed.raw_transaction).hex()

    tx_hash = send_raw_transaction(raw_tx, rpc_url=rpc_url)
    result: dict[str, Any] = {"tx_hash": tx_hash}

    if wait:
        receipt = wait_for_receipt(tx_hash, timeout=timeout, rpc_url=rpc_url)
        result["receipt"] = receipt
        result["status"] = int(receipt.get("status", "0x0"), 16)

    return result


def send_iotx(
    to: str,
    amount_iotx: str,
    data: str = "0x",
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    wait: bool = True,
    rpc_url: Optional[str] = None,
) -> dict:
    """Build, sign, and send a native IOTX transfer."""
    tx = build_transfer_tx(
        to=to,
        amount_iotx=amount_iotx,
        data=data,
        gas_limit=gas_limit,
        private_key=private_key,
        rpc_url=rpc_url,
    )
    return sign_and_send(tx, private_key=private_key, wait=wait, rpc_url=rpc_url)


def send_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    abi_name: Optional[str] = None,
    abi: Optional[list] = None,
    value: int = 0,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    wait: bool = True,
    rpc_url: Optional[str] = None,
) -> dict:
    """Build, sign, and send a contract call transaction."""
    tx = build_contract_tx(
        contract_address=contract_address,
        function_name=function_name,
        args=args,
        abi_name=abi_name,
        abi=abi,
        value=value,
        gas_limit=gas_limit,
        private_key=private_key,
        rpc_url=rpc_url,
    )
    return sign_and_send(tx, private_key=private_key, wait=wait, rpc_url=rpc_url)


def build_deploy_tx(
    bytecode: str,
    abi: Optional[list] = None,
    constructor_args: Optional[list] = None,
    value: int = 0,
    gas_limit: int = DEFAULT_DEPLOY_GAS,
    private_key: Optional[str] = None,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Build a contract creation transaction (no "to" field, unsigned).

    Args:
        bytecode: Creation bytecode, 0x-hex
        abi: Contract ABI, needed only for constructor arguments
        constructor_args: Constructor arguments (default: none)
        value: IOTX value in Rau sent to the constructor
        gas_limit: Gas limit for deployment

    Returns:
        Unsigned transaction dict
    """
    tx = _base_tx(private_key, rpc_url)
    tx.update({
        "data": encode_deploy_data(bytecode, abi, constructor_args),
        "value": value,
        "gas": gas_limit,
    })
    return tx


def deploy_contract(
    bytecode: str,
    abi: Optional[list] = None,
    constructor_args: Optional[list] = None,
    value: int = 0,
    gas_limit: int = DEFAULT_DEPLOY_GAS,
    private_key: Optional[str] = None,
    wait: bool = True,
    timeout: int = 180,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Deploy a contract.

    Builds a creation transaction, signs, sends, and when waiting reads
    the deployed contract address from the receipt.

    Returns:
        Dict with tx_hash and, when waiting, receipt, status and
        contract_address (io-form)
    """
    tx = build_deploy_tx(
        bytecode,
        abi=abi,
        constructor_args=constructor_args,
        value=value,
        gas_limit=gas_limit,
        private_key=private_key,
        rpc_url=rpc_url,
    )
    result = sign_and_send(tx, private_key=private_key, wait=wait, timeout=timeout, rpc_url=rpc_url)

    if wait and result.get("receipt"):
        contract_address = result["receipt"].get("contractAddress")
        if contract_address:
            result["contract_address"] = to_native(contract_address.lower())

    return result
