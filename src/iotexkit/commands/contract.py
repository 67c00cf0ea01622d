"""
Contract commands - read, execute, deploy, and inspect smart contracts.
"""

from __future__ import annotations

import json
from typing import Optional, Union

import click
import httpx

from ..address import InvalidAddressFormat, is_hex_format, to_native
from ..chain.abi import (
    decode_function_result,
    decode_log,
    encode_function_call,
    event_topic,
    find_event,
    load_abi,
    load_bytecode,
)
from ..chain.rpc import RpcError, get_code, get_logs, get_token_info, read_contract
from ..chain.tx import deploy_contract, send_contract_tx
from ..units import format_units
from ..wallet.eth import get_address, load_private_key
from . import echo_field, echo_json, fail


def _parse_args(args_json: str) -> list:
    try:
        args = json.loads(args_json)
        if not isinstance(args, list):
            raise ValueError("Args must be a JSON array")
    except (json.JSONDecodeError, ValueError) as exc:
        fail(f"Invalid args: {exc}")
    return args


@click.group()
def contract() -> None:
    """Interact with smart contracts."""


@contract.command("read")
@click.option("--address", "contract_address", required=True, help="Contract address")
@click.option("--function", "func_name", required=True, help="Function name to call")
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.option("--abi", "abi_name", default="XRC20", show_default=True, help="Bundled ABI name or ABI file")
def read(contract_address: str, func_name: str, args_json: str, abi_name: str) -> None:
    """Call a view function (eth_call)."""
    args = _parse_args(args_json)
    try:
        result = read_contract(contract_address, func_name, args, abi_name=abi_name)
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (FileNotFoundError, ValueError, RpcError, httpx.HTTPError) as exc:
        fail(exc)
    echo_json(result)


@contract.command("invoke")
@click.option("--address", "contract_address", required=True, help="Contract address")
@click.option("--function", "func_name", required=True, help="Function name to call")
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.option("--abi", "abi_name", default="XRC20", show_default=True, help="Bundled ABI name or ABI file")
@click.option("--value", default=0, type=int, help="IOTX value in Rau")
@click.option("--gas-limit", default=500_000, type=int, help="Gas limit")
def invoke(
    contract_address: str,
    func_name: str,
    args_json: str,
    abi_name: str,
    value: int,
    gas_limit: int,
) -> None:
    """
    Execute a contract function.

    Sends a transaction from the local wallet to the contract.
    """
    args = _parse_args(args_json)

    try:
        private_key = load_private_key()
        sender = get_address(private_key)
    except ValueError as exc:
        fail(exc)

    echo_field("Sender", sender.native)
    echo_field("Target", contract_address)
    echo_field("Function", func_name)
    echo_field("Args", args)
    if value > 0:
        echo_field("Value", f"{value} Rau")
    click.echo("")

    try:
        result = send_contract_tx(
            contract_address=contract_address,
            function_name=func_name,
            args=args,
            abi_name=abi_name,
            value=value,
            gas_limit=gas_limit,
            private_key=private_key,
        )
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except Exception as exc:
        fail(f"Transaction failed: {exc}")

    if result.get("status") == 1:
        click.secho("SUCCESS: Transaction confirmed!", fg="green")
        echo_field("TX", result["tx_hash"])
    else:
        click.secho("FAILED: Transaction reverted", fg="red")
        echo_field("TX", result.get("tx_hash", "unknown"))
        fail("Transaction reverted")


@contract.command("code")
@click.argument("address")
def code(address: str) -> None:
    """Print the deployed bytecode at ADDRESS."""
    try:
        click.echo(get_code(address))
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(exc)


@contract.command("token-info")
@click.argument("token")
def token_info(token: str) -> None:
    """Name, symbol, decimals and supply of an XRC-20 TOKEN."""
    try:
        result = get_token_info(token)
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read token: {exc}")

    echo_field("Address", to_native(token))
    echo_field("Name", result["name"])
    echo_field("Symbol", result["symbol"])
    echo_field("Decimals", result["decimals"])
    echo_field("Total supply", format_units(result["totalSupply"] or 0, result["decimals"] or 0))


def _block_id(value: str) -> Union[int, str]:
    return int(value) if value.isdigit() else value


def _load_abi_or_fail(abi_name: str) -> list:
    try:
        return load_abi(abi_name)
    except (FileNotFoundError, ValueError) as exc:
        fail(exc, 2)


def _native_args(args: dict) -> dict:
    return {k: to_native(v.lower()) if is_hex_format(v) else v for k, v in args.items()}


@contract.command("logs")
@click.argument("address")
@click.option("--from-block", default="latest", help="First block (number or tag)")
@click.option("--to-block", default="latest", help="Last block (number or tag)")
@click.option("--topic", "topics", multiple=True, help="Topic filter by position; '-' matches any")
@click.option("--abi", "abi_name", default=None, help="Decode logs with this ABI")
@click.option("--event", "event_name", default=None, help="Only this event (requires --abi)")
def logs(
    address: str,
    from_block: str,
    to_block: str,
    topics: tuple[str, ...],
    abi_name: Optional[str],
    event_name: Optional[str],
) -> None:
    """Event logs emitted by ADDRESS."""
    topic_filter: list = [None if t == "-" else t for t in topics]
    abi = _load_abi_or_fail(abi_name) if abi_name else None

    if event_name:
        if abi is None:
            fail("--event requires --abi", 2)
        try:
            event = find_event(abi, event_name)
        except ValueError as exc:
            fail(exc, 2)
        selector = event_topic(event_name, [inp["type"] for inp in event.get("inputs", [])])
        topic_filter = [selector] + topic_filter[1:]

    try:
        entries = get_logs(
            address,
            topics=topic_filter,
            from_block=_block_id(from_block),
            to_block=_block_id(to_block),
        )
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read logs: {exc}")

    if abi is not None:
        for entry in entries:
            decoded = decode_log(abi, entry)
            if decoded is not None:
                decoded["args"] = _native_args(decoded["args"])
            entry["decoded"] = decoded
    echo_json(entries)


@contract.command("encode")
@click.option("--function", "func_name", required=True, help="Function name")
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.option("--abi", "abi_name", default="XRC20", show_default=True, help="Bundled ABI name or ABI file")
def encode(func_name: str, args_json: str, abi_name: str) -> None:
    """Print the calldata for a function call."""
    args = _parse_args(args_json)
    abi = _load_abi_or_fail(abi_name)
    try:
        click.echo(encode_function_call(abi, func_name, args))
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (ValueError, TypeError, OverflowError) as exc:
        fail(f"Cannot encode: {exc}", 2)


@contract.command("decode")
@click.option("--function", "func_name", required=True, help="Function name")
@click.option("--data", required=True, help="Return data (0x-hex)")
@click.option("--abi", "abi_name", default="XRC20", show_default=True, help="Bundled ABI name or ABI file")
def decode(func_name: str, data: str, abi_name: str) -> None:
    """Decode the return data of a function call."""
    abi = _load_abi_or_fail(abi_name)
    try:
        result = decode_function_result(abi, func_name, data)
    except Exception as exc:
        fail(f"Cannot decode: {exc}", 2)
    echo_json(result)


@contract.command("deploy")
@click.argument("artifact", type=click.Path(exists=True, dir_okay=False))
@click.option("--args", "args_json", default="[]", help="Constructor args as JSON array")
@click.option("--value", default=0, type=int, help="IOTX value in Rau")
@click.option("--gas-limit", default=3_000_000, type=int, help="Gas limit")
def deploy(artifact: str, args_json: str, value: int, gas_limit: int) -> None:
    """
    Deploy a contract from a compiler ARTIFACT (JSON with abi + bytecode).

    Sends the creation transaction from the local wallet.
    """
    args = _parse_args(args_json)

    try:
        abi = load_abi(artifact)
        bytecode = load_bytecode(artifact)
    except ValueError as exc:
        fail(exc, 2)

    try:
        private_key = load_private_key()
        sender = get_address(private_key)
    except ValueError as exc:
        fail(exc)

    echo_field("Sender", sender.native)
    echo_field("Artifact", artifact)
    echo_field("Args", args)
    click.echo("")

    try:
        result = deploy_contract(
            bytecode,
            abi=abi,
            constructor_args=args,
            value=value,
            gas_limit=gas_limit,
            private_key=private_key,
        )
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except Exception as exc:
        fail(f"Deployment failed: {exc}")

    if result.get("status") == 1:
        click.secho("SUCCESS: Contract deployed!", fg="green")
        echo_field("Address", result.get("contract_address", "unknown"))
        echo_field("TX", result["tx_hash"])
    else:
        click.secho("FAILED: Deployment reverted", fg="red")
        echo_field("TX", result.get("tx_hash", "unknown"))
        fail("Deployment reverted")
