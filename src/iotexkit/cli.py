"""
iotexkit CLI

Command-line interface for the IoTeX blockchain.

Every command that takes an address accepts the native io-address
("io1...") or the EVM 0x-address; output shows the io-form first.

Command groups:
  address   - Convert and validate io-/0x-addresses
  wallet    - Create keys, show identity, sign/verify, send IOTX
  account   - Balance, nonce and account info
  chain     - Chain metadata, blocks and transactions
  contract  - Read/execute/deploy contracts, event logs, XRC-20 token info
  nft       - XRC-721 owners, token metadata and collections
  units     - Convert between rau/qev/jing/iotx
  networks  - List known networks
  info      - Show configuration
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

import click

from .networks import NETWORKS, UnknownNetworkError, get_network_config, get_network_name, get_rpc_url
from .wallet.eth import get_address, load_private_key


# ============ Constants ============

VERSION = "1.0.0"


# ============ Banner ============


def _print_banner() -> None:
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("I O T E X K I T", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="iotexkit")
@click.option(
    "--network",
    envvar="IOTEX_NETWORK",
    type=click.Choice(sorted(NETWORKS), case_sensitive=False),
    default=None,
    help="Network to use (default: mainnet)",
)
@click.option("--rpc-url", envvar="IOTEX_RPC_URL", default=None, help="Override the RPC endpoint")
@click.option("--verbose", "-v", is_flag=True, help="Log RPC traffic")
@click.pass_context
def cli(ctx: click.Context, network: Optional[str], rpc_url: Optional[str], verbose: bool) -> None:
    """iotexkit — IoTeX addresses, accounts and contracts."""
    if network:
        os.environ["IOTEX_NETWORK"] = network.lower()
    if rpc_url:
        os.environ["IOTEX_RPC_URL"] = rpc_url
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Command Groups ============

from .commands.account import account
from .commands.address import address
from .commands.chain import chain
from .commands.contract import contract
from .commands.nft import nft
from .commands.units import units
from .commands.wallet import wallet

cli.add_command(address)
cli.add_command(wallet)
cli.add_command(account)
cli.add_command(chain)
cli.add_command(contract)
cli.add_command(nft)
cli.add_command(units)


# ============ Networks ============


@cli.command("networks")
def networks() -> None:
    """List known networks."""
    active = get_network_name()
    for key, cfg in NETWORKS.items():
        marker = click.style("*", fg="green") if key == active else " "
        click.echo(f"{marker} {key:<8} {cfg.name:<14} chain {cfg.chain_id:<5} {cfg.http_endpoint}")


# ============ Info ============


@cli.command()
def info() -> None:
    """Show configuration."""
    _print_banner()

    click.secho("  Network ────────────────────────────────", fg="cyan")
    click.echo()
    try:
        cfg = get_network_config(get_network_name())
        click.echo(click.style("  Network:     ", dim=True) + click.style(cfg.name, fg="bright_white"))
        click.echo(click.style("  Chain ID:    ", dim=True) + str(cfg.chain_id))
        click.echo(click.style("  Endpoint:    ", dim=True) + get_rpc_url())
        click.echo(click.style("  Explorer:    ", dim=True) + cfg.explorer_url)
    except UnknownNetworkError as exc:
        click.secho(f"  {exc}", fg="red")
    click.echo()

    click.secho("  Wallet ─────────────────────────────────", fg="cyan")
    click.echo()
    try:
        formats = get_address(load_private_key())
        click.echo(click.style("  io-address:  ", dim=True) + click.style(formats.native, fg="bright_white"))
        click.echo(click.style("  0x-address:  ", dim=True) + formats.hex)
    except ValueError:
        click.echo(
            click.style("  Address:     ", dim=True)
            + click.style("not initialized", fg="yellow")
            + click.style("  (run: iotexkit wallet create --save)", dim=True)
        )
    click.echo()


# ============ Entry Points ============


def main() -> None:
    """iotexkit CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass
    cli()


if __name__ == "__main__":
    main()
