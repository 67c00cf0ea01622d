"""
Account commands - balances, nonces and account info.
"""

from __future__ import annotations

import click
import httpx

from ..address import InvalidAddressFormat, to_native
from ..chain.rpc import RpcError, get_account_info, get_balance, get_nonce, get_token_balance, read_contract
from ..units import format_units, rau_to_iotx
from . import echo_field, echo_json, fail


@click.group()
def account() -> None:
    """Query accounts (io- or 0x-addresses)."""


@account.command("info")
@click.argument("address")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
def info(address: str, as_json: bool) -> None:
    """Balance, nonce and contract flag of ADDRESS."""
    try:
        result = get_account_info(address)
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read account: {exc}")

    if as_json:
        echo_json(result.to_dict())
        return
    echo_field("io-address", result.native_address)
    echo_field("0x-address", result.hex_address)
    echo_field("Balance", f"{result.balance_iotx} IOTX")
    echo_field("Nonce", result.nonce)
    echo_field("Contract", "yes" if result.is_contract else "no")


@account.command("balance")
@click.argument("address")
@click.option("--rau", "in_rau", is_flag=True, help="Print the raw Rau amount")
def balance(address: str, in_rau: bool) -> None:
    """IOTX balance of ADDRESS."""
    try:
        amount = get_balance(address)
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read balance: {exc}")
    click.echo(str(amount) if in_rau else rau_to_iotx(amount))


@account.command("nonce")
@click.argument("address")
def nonce(address: str) -> None:
    """Transaction count of ADDRESS."""
    try:
        click.echo(get_nonce(address))
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read nonce: {exc}")


@account.command("token-balance")
@click.argument("token")
@click.argument("owner")
def token_balance(token: str, owner: str) -> None:
    """XRC-20 balance of OWNER in TOKEN."""
    try:
        raw = get_token_balance(token, owner)
        decimals = read_contract(token, "decimals", abi_name="XRC20") or 0
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read token balance: {exc}")

    echo_field("Token", to_native(token))
    echo_field("Owner", to_native(owner))
    echo_field("Balance", format_units(raw, decimals))
