"""
IoTeX unit conversion.

Rau is the smallest unit: 1 IOTX = 10^18 Rau (same scale as wei/ether).

    rau   10^0
    qev   10^3
    jing  10^6
    iotx  10^18

Amounts in base units are plain ints; human-readable amounts are
strings with trailing fractional zeros removed. All arithmetic is exact
(int / Decimal), never float, except for the compact display helpers.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

Amount = Union[int, str, Decimal]

UNITS: dict[str, int] = {
    "rau": 0,
    "qev": 3,
    "jing": 6,
    "iotx": 18,
}

IOTX_DECIMALS = UNITS["iotx"]


class UnitError(ValueError):
    exit_code: int = 2


def _unit_decimals(unit: str) -> int:
    decimals = UNITS.get(unit.lower())
    if decimals is None:
        raise UnitError(f"Unknown unit: {unit}")
    return decimals


def _to_decimal(amount: Amount) -> Decimal:
    if isinstance(amount, bool):
        raise UnitError(f"Invalid amount: {amount!r}")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise UnitError(f"Invalid amount: {amount!r}") from None
    if not value.is_finite():
        raise UnitError(f"Invalid amount: {amount!r}")
    return value


def _to_int(amount: Amount) -> int:
    value = _to_decimal(amount)
    if value != value.to_integral_value():
        raise UnitError(f"Amount must be an integer in base units: {amount!r}")
    return int(value)


def _scale(value: Decimal, exponent: int) -> Decimal:
    """value * 10**exponent, never rounded to the context precision."""
    with localcontext() as ctx:
        ctx.prec = len(value.as_tuple().digits) + abs(exponent) + 2
        return value.scaleb(exponent)


def _strip_zeros(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_units(value: Amount, decimals: int) -> str:
    """Render an integer amount of base units with `decimals` places."""
    raw = _to_int(value)
    sign = "-" if raw < 0 else ""
    whole, frac = divmod(abs(raw), 10 ** decimals)
    if decimals == 0 or frac == 0:
        return f"{sign}{whole}"
    return _strip_zeros(f"{sign}{whole}.{frac:0{decimals}d}")


def parse_units(amount: Amount, decimals: int) -> int:
    """
    Parse a human-readable amount into integer base units.

    Raises:
        UnitError: If the amount is malformed or has more fractional
            digits than `decimals` allows
    """
    value = _scale(_to_decimal(amount), decimals)
    if value != value.to_integral_value():
        raise UnitError(f"Too many decimal places for {decimals}-decimal unit: {amount}")
    return int(value)


def rau_to_iotx(rau: Amount) -> str:
    return format_units(rau, IOTX_DECIMALS)


def iotx_to_rau(iotx: Amount) -> int:
    return parse_units(iotx, IOTX_DECIMALS)


def convert_units(amount: Amount, from_unit: str, to_unit: str) -> str:
    """
    Convert an amount between any two known units.

    Args:
        amount: Amount expressed in `from_unit`
        from_unit: Source unit name (case-insensitive)
        to_unit: Target unit name (case-insensitive)

    Returns:
        Amount expressed in `to_unit`, trailing zeros removed
    """
    from_decimals = _unit_decimals(from_unit)
    to_decimals = _unit_decimals(to_unit)
    rau = parse_units(amount, from_decimals)
    return format_units(rau, to_decimals)


def _format_display(value: Decimal, display_decimals: int) -> str:
    if value == 0:
        return "0"
    if abs(value) < Decimal("0.0001"):
        return f"{float(value):.2e}"
    quantum = Decimal(1).scaleb(-display_decimals)
    with localcontext() as ctx:
        ctx.prec = len(value.as_tuple().digits) + display_decimals + 2
        rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    return _strip_zeros(f"{rounded:f}")


def format_iotx(rau: Amount, decimals: int = 4) -> str:
    """Compact IOTX display string for a Rau amount."""
    return format_token_amount(rau, IOTX_DECIMALS, decimals)


def format_token_amount(amount: Amount, decimals: int, display_decimals: int = 4) -> str:
    """Compact display string for a token amount given in base units."""
    value = _scale(Decimal(_to_int(amount)), -decimals)
    return _format_display(value, display_decimals)


def parse_token_amount(amount: Amount, decimals: int) -> int:
    return parse_units(amount, decimals)


def is_valid_amount(amount: Amount) -> bool:
    """True for a finite, non-negative number."""
    try:
        return _to_decimal(amount) >= 0
    except UnitError:
        return False


def compare_amounts(a: Amount, b: Amount) -> int:
    x, y = _to_int(a), _to_int(b)
    return (x > y) - (x < y)


def add_amounts(a: Amount, b: Amount) -> int:
    return _to_int(a) + _to_int(b)


def subtract_amounts(a: Amount, b: Amount) -> int:
    result = _to_int(a) - _to_int(b)
    if result < 0:
        raise UnitError("Result would be negative")
    return result


def multiply_by_percentage(amount: Amount, percentage: float) -> int:
    """Scale an amount by a fraction, truncated to 4 decimal places of precision."""
    multiplier = math.floor(percentage * 10_000)
    return _to_int(amount) * multiplier // 10_000


def calculate_gas_cost(gas_limit: Amount, gas_price: Amount) -> str:
    """Gas cost in IOTX for a gas limit and a gas price in Rau."""
    return rau_to_iotx(_to_int(gas_limit) * _to_int(gas_price))
