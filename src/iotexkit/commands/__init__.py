"""
Commands - click command groups for the iotexkit CLI.

Each module is one top-level group:
- address: Convert and validate io-/0x-addresses
- wallet:  Create keys, show identity, sign and verify messages
- account: Balances, nonces, account info, token balances
- chain:   Chain metadata, blocks, transactions
- contract: Read/execute/deploy contracts, event logs, XRC-20 token info
- nft:     XRC-721 owners, metadata and collections
- units:   Convert between rau/qev/jing/iotx
"""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import click


def fail(message: Any, exit_code: int = 1) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red", err=True)
    sys.exit(exit_code)


def _jsonable(value: Any) -> Any:
    # Decoded ABI values: bytes -> 0x-hex, tuples -> lists
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return value


def echo_json(payload: Any) -> None:
    click.echo(json.dumps(_jsonable(payload), indent=2, default=str))


def echo_field(label: str, value: Any) -> None:
    click.echo(f"  {label + ':':<16} {value}")
