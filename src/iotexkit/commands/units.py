"""
Units commands - convert between rau, qev, jing and iotx.
"""

from __future__ import annotations

import click

from ..units import UNITS, UnitError, convert_units
from . import fail


@click.group()
def units() -> None:
    """Convert IOTX amounts between units."""


@units.command("convert")
@click.argument("amount")
@click.argument("from_unit", type=click.Choice(sorted(UNITS), case_sensitive=False))
@click.argument("to_unit", type=click.Choice(sorted(UNITS), case_sensitive=False))
def convert(amount: str, from_unit: str, to_unit: str) -> None:
    """Convert AMOUNT from FROM_UNIT to TO_UNIT."""
    try:
        click.echo(convert_units(amount, from_unit, to_unit))
    except UnitError as exc:
        fail(exc, exc.exit_code)
