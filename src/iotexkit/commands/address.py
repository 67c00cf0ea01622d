"""
Address commands - convert and validate IoTeX addresses.
"""

from __future__ import annotations

import sys

import click

from ..address import (
    InvalidAddressFormat,
    both_formats,
    has_valid_checksum,
    is_hex_format,
    is_native_format,
)
from . import echo_field, echo_json, fail


@click.group()
def address() -> None:
    """Convert and validate io-/0x-addresses."""


@address.command("convert")
@click.argument("value")
@click.option("--verify", is_flag=True, help="Reject io-addresses with a bad checksum")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
def convert(value: str, verify: bool, as_json: bool) -> None:
    """Show both forms of VALUE."""
    try:
        formats = both_formats(value.strip(), verify=verify)
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)

    if as_json:
        echo_json(formats.to_dict())
        return
    echo_field("io-address", formats.native)
    echo_field("0x-address", formats.hex)


@address.command("validate")
@click.argument("value")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
def validate(value: str, as_json: bool) -> None:
    """Check whether VALUE is a valid address. Exits 2 if not."""
    value = value.strip()
    if is_native_format(value):
        kind = "io"
    elif is_hex_format(value):
        kind = "hex"
    else:
        kind = None

    checksum_ok = has_valid_checksum(value) if kind == "io" else None
    valid = kind is not None and checksum_ok is not False

    if as_json:
        echo_json({"address": value, "valid": valid, "format": kind, "checksum": checksum_ok})
    elif valid:
        click.secho(f"Valid {kind}-address", fg="green")
    elif kind == "io":
        click.secho("Invalid io-address: checksum mismatch", fg="red")
    else:
        click.secho("Invalid address", fg="red")

    if not valid:
        sys.exit(2)
