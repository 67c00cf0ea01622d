"""
Chain commands - chain metadata, blocks and transactions.
"""

from __future__ import annotations

import click
import httpx

from ..chain.rpc import (
    RpcError,
    get_block,
    get_chain_id,
    get_chain_meta,
    get_gas_price,
    get_transaction,
    get_transaction_receipt,
)
from ..networks import CHAIN_ID_TO_NETWORK, get_rpc_url
from ..units import format_units
from . import echo_field, echo_json, fail


@click.group()
def chain() -> None:
    """Query chain state."""


@chain.command("info")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
def info(as_json: bool) -> None:
    """Chain ID, height, epoch and gas price."""
    try:
        chain_id = get_chain_id()
        meta = get_chain_meta()
        gas_price = get_gas_price()
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read chain state: {exc}")

    if as_json:
        echo_json({"chainId": chain_id, "gasPrice": str(gas_price), **meta})
        return
    echo_field("Endpoint", get_rpc_url())
    echo_field("Chain ID", f"{chain_id} ({CHAIN_ID_TO_NETWORK.get(chain_id, 'custom')})")
    echo_field("Height", meta["height"])
    echo_field("Epoch", f"{meta['epoch']['num']} (from block {meta['epoch']['height']})")
    # Qev is the customary unit for IoTeX gas prices
    echo_field("Gas price", f"{format_units(gas_price, 3)} Qev")


@chain.command("block")
@click.argument("block", default="latest")
@click.option("--full", is_flag=True, help="Include full transaction objects")
def block(block: str, full: bool) -> None:
    """Show BLOCK (number, hash or tag; default: latest)."""
    block_id = int(block) if block.isdigit() else block
    try:
        result = get_block(block_id, full_transactions=full)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read block: {exc}")
    if result is None:
        fail(f"Block not found: {block}")
    echo_json(result)


@chain.command("tx")
@click.argument("tx_hash")
@click.option("--receipt", is_flag=True, help="Show the receipt instead")
def tx(tx_hash: str, receipt: bool) -> None:
    """Show a transaction by hash."""
    try:
        result = get_transaction_receipt(tx_hash) if receipt else get_transaction(tx_hash)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Failed to read transaction: {exc}")
    if result is None:
        fail(f"Transaction not found: {tx_hash}")
    echo_json(result)
