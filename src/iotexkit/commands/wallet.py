"""
Wallet commands - key generation, identity, signatures and transfers.
"""

from __future__ import annotations

import sys

import click

from ..address import InvalidAddressFormat
from ..chain.tx import send_iotx
from ..units import UnitError
from ..wallet.eth import (
    IOTEXKIT_ENV,
    generate_keypair,
    get_address,
    load_private_key,
    recover_signer,
    save_private_key,
    sign_message,
    verify_message,
)
from . import echo_field, echo_json, fail


@click.group()
def wallet() -> None:
    """Manage the local signing key."""


@wallet.command("create")
@click.option("--save", is_flag=True, help=f"Store the private key in {IOTEXKIT_ENV}")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
def create(save: bool, as_json: bool) -> None:
    """Generate a new keypair."""
    keypair = generate_keypair()

    if as_json:
        echo_json({
            "privateKey": keypair.private_key,
            "publicKey": keypair.public_key,
            "ioAddress": keypair.native_address,
            "hexAddress": keypair.hex_address,
        })
    else:
        echo_field("io-address", keypair.native_address)
        echo_field("0x-address", keypair.hex_address)
        echo_field("Public key", keypair.public_key)
        if not save:
            echo_field("Private key", keypair.private_key)
            click.secho("  Keep the private key secret. It cannot be recovered.", fg="yellow")

    if save:
        path = save_private_key(keypair.private_key)
        if not as_json:
            click.secho(f"  Private key saved to {path}", fg="green")


@wallet.command("whoami")
def whoami() -> None:
    """Show current wallet identity."""
    try:
        formats = get_address(load_private_key())
    except ValueError:
        click.echo("No wallet found.")
        click.echo("Run 'iotexkit wallet create --save' to create one.")
        sys.exit(1)
    echo_field("io-address", formats.native)
    echo_field("0x-address", formats.hex)


@wallet.command("sign")
@click.argument("message")
def sign(message: str) -> None:
    """Sign MESSAGE with EIP-191 personal_sign."""
    try:
        private_key = load_private_key()
    except ValueError as exc:
        fail(exc)
    click.echo(sign_message(message, private_key))


@wallet.command("verify")
@click.argument("message")
@click.argument("signature")
@click.argument("signer")
def verify(message: str, signature: str, signer: str) -> None:
    """Check that SIGNATURE over MESSAGE was made by SIGNER."""
    try:
        ok = verify_message(message, signature, signer)
    except InvalidAddressFormat as exc:
        fail(exc, exc.exit_code)
    except Exception as exc:
        fail(f"Bad signature: {exc}")

    if ok:
        click.secho("Signature valid", fg="green")
        return
    recovered = recover_signer(message, signature)
    click.secho(f"Signature invalid: signed by {recovered.native}", fg="red")
    sys.exit(1)


@wallet.command("send")
@click.argument("to")
@click.argument("amount")
@click.option("--data", default="0x", help="Hex payload")
@click.option("--gas-limit", default=None, type=int, help="Gas limit")
@click.option("--no-wait", is_flag=True, help="Return after broadcasting")
def send(to: str, amount: str, data: str, gas_limit: int, no_wait: bool) -> None:
    """Send AMOUNT IOTX to TO (io- or 0x-address)."""
    try:
        private_key = load_private_key()
        sender = get_address(private_key)
    except ValueError as exc:
        fail(exc)

    echo_field("From", sender.native)
    echo_field("To", to)
    echo_field("Amount", f"{amount} IOTX")
    click.echo("")

    try:
        result = send_iotx(
            to=to,
            amount_iotx=amount,
            data=data,
            gas_limit=gas_limit,
            private_key=private_key,
            wait=not no_wait,
        )
    except (InvalidAddressFormat, UnitError) as exc:
        fail(exc, exc.exit_code)
    except Exception as exc:
        fail(f"Transfer failed: {exc}")

    if no_wait:
        echo_field("TX", result["tx_hash"])
    elif result.get("status") == 1:
        click.secho("SUCCESS: Transfer confirmed!", fg="green")
        echo_field("TX", result["tx_hash"])
    else:
        click.secho("FAILED: Transfer reverted", fg="red")
        echo_field("TX", result.get("tx_hash", "unknown"))
        sys.exit(1)
