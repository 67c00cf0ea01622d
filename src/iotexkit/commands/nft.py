"""
NFT commands - XRC-721 owners, token metadata and collections.
"""

from __future__ import annotations

import click
import httpx

from ..address import InvalidAddressFormat
from ..chain.rpc import RpcError, get_collection_info, get_nft_balance, get_nft_info, get_nft_owner
from . import echo_field, echo_json, fail


@click.group()
def nft() -> None:
    """Query XRC-721 collections (io- or 0x-addresses)."""


@nft.command("owner")
@click.argument("contract_address")
@click.argument("token_id", type=int)
def owner(contract_address: str, token_id: int) -> None:
    """Owner of TOKEN_ID in CONTRACT_ADDRESS."""
    try:
        click.echo(get_nft_owner(contract_address, token_id))
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read owner: {exc}")


@nft.command("info")
@click.argument("contract_address")
@click.argument("token_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
def info(contract_address: str, token_id: int, as_json: bool) -> None:
    """Collection, owner and metadata URI of one token."""
    try:
        result = get_nft_info(contract_address, token_id)
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read token: {exc}")

    if as_json:
        echo_json(result)
        return
    echo_field("Collection", f"{result['name']} ({result['symbol']})")
    echo_field("Contract", result["contractAddress"])
    echo_field("Token ID", result["tokenId"])
    echo_field("Owner", result["owner"])
    echo_field("Token URI", result["tokenUri"])


@nft.command("collection")
@click.argument("contract_address")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
def collection(contract_address: str, as_json: bool) -> None:
    """Name and symbol of an XRC-721 collection."""
    try:
        result = get_collection_info(contract_address)
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read collection: {exc}")

    if as_json:
        echo_json(result)
        return
    echo_field("Contract", result["contractAddress"])
    echo_field("Name", result["name"])
    echo_field("Symbol", result["symbol"])


@nft.command("balance")
@click.argument("contract_address")
@click.argument("owner_address")
def balance(contract_address: str, owner_address: str) -> None:
    """Number of tokens OWNER_ADDRESS holds in the collection."""
    try:
        click.echo(get_nft_balance(contract_address, owner_address))
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read balance: {exc}")
