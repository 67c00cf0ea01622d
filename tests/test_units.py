"""Unit tests for IOTX unit conversion."""

from __future__ import annotations

from decimal import Decimal

import pytest

from iotexkit.units import (
    UNITS,
    UnitError,
    add_amounts,
    calculate_gas_cost,
    compare_amounts,
    convert_units,
    format_iotx,
    format_token_amount,
    format_units,
    iotx_to_rau,
    is_valid_amount,
    multiply_by_percentage,
    parse_token_amount,
    parse_units,
    rau_to_iotx,
    subtract_amounts,
)

ONE_IOTX = 10 ** 18


class TestRauIotx:
    """Tests for rau_to_iotx / iotx_to_rau."""

    def test_whole_iotx(self) -> None:
        assert rau_to_iotx(ONE_IOTX) == "1"
        assert iotx_to_rau("1") == ONE_IOTX

    def test_fractional(self) -> None:
        assert rau_to_iotx(1_500_000_000_000_000_000) == "1.5"
        assert iotx_to_rau("1.5") == 1_500_000_000_000_000_000

    def test_smallest_unit(self) -> None:
        assert rau_to_iotx(1) == "0.000000000000000001"
        assert iotx_to_rau("0.000000000000000001") == 1

    def test_zero(self) -> None:
        assert rau_to_iotx(0) == "0"
        assert iotx_to_rau(0) == 0

    def test_string_and_decimal_input(self) -> None:
        assert rau_to_iotx("2500000000000000000") == "2.5"
        assert iotx_to_rau(Decimal("0.25")) == 250_000_000_000_000_000

    def test_too_many_decimals(self) -> None:
        with pytest.raises(UnitError):
            iotx_to_rau("0.0000000000000000001")

    def test_fractional_rau_rejected(self) -> None:
        with pytest.raises(UnitError):
            rau_to_iotx("1.5")

    @pytest.mark.parametrize("value", ["abc", "", "inf", "NaN", True])
    def test_malformed(self, value: object) -> None:
        with pytest.raises(UnitError):
            iotx_to_rau(value)  # type: ignore[arg-type]


class TestConvertUnits:
    """Tests for convert_units."""

    def test_units_table(self) -> None:
        assert UNITS == {"rau": 0, "qev": 3, "jing": 6, "iotx": 18}

    def test_down_to_smaller_unit(self) -> None:
        assert convert_units("1", "iotx", "rau") == "1000000000000000000"
        assert convert_units("1", "iotx", "jing") == "1000000000000"
        assert convert_units("2", "qev", "rau") == "2000"

    def test_up_to_larger_unit(self) -> None:
        assert convert_units("1500", "rau", "qev") == "1.5"
        assert convert_units("1000000", "jing", "iotx") == "0.000001"
        assert convert_units("3000", "qev", "jing") == "3"

    def test_same_unit(self) -> None:
        assert convert_units("5", "rau", "rau") == "5"
        assert convert_units("1.25", "iotx", "iotx") == "1.25"

    def test_case_insensitive_units(self) -> None:
        assert convert_units("1", "IOTX", "Qev") == "1000000000000000"

    def test_unknown_unit(self) -> None:
        with pytest.raises(UnitError, match="Unknown unit"):
            convert_units("1", "wei", "iotx")
        with pytest.raises(UnitError, match="Unknown unit"):
            convert_units("1", "iotx", "gwei")

    def test_fraction_below_source_unit(self) -> None:
        with pytest.raises(UnitError):
            convert_units("0.5", "rau", "iotx")


class TestFormatting:
    """Tests for display helpers."""

    def test_format_units(self) -> None:
        assert format_units(1500, 3) == "1.5"
        assert format_units(-1500, 3) == "-1.5"
        assert format_units(1000, 3) == "1"
        assert format_units(100, 0) == "100"

    def test_parse_units(self) -> None:
        assert parse_units("1.5", 6) == 1_500_000
        assert parse_token_amount("10", 6) == 10_000_000

    def test_format_iotx(self) -> None:
        assert format_iotx(ONE_IOTX) == "1"
        assert format_iotx(1_234_567_890_000_000_000) == "1.2346"
        assert format_iotx(100 * ONE_IOTX) == "100"
        assert format_iotx(0) == "0"

    def test_format_iotx_tiny_amount(self) -> None:
        assert format_iotx(10 ** 13) == "1.00e-05"

    def test_format_iotx_custom_decimals(self) -> None:
        assert format_iotx(1_234_567_890_000_000_000, decimals=2) == "1.23"

    def test_format_token_amount(self) -> None:
        assert format_token_amount(1_500_000, 6) == "1.5"
        assert format_token_amount(123_456_789, 6, display_decimals=1) == "123.5"


class TestArithmetic:
    """Tests for amount arithmetic."""

    def test_is_valid_amount(self) -> None:
        assert is_valid_amount("1.5")
        assert is_valid_amount("0")
        assert is_valid_amount(10)
        assert not is_valid_amount("-1")
        assert not is_valid_amount("abc")
        assert not is_valid_amount("inf")
        assert not is_valid_amount("NaN")

    def test_compare(self) -> None:
        assert compare_amounts(1, 2) == -1
        assert compare_amounts("5", 5) == 0
        assert compare_amounts(ONE_IOTX, "1") == 1

    def test_add_and_subtract(self) -> None:
        assert add_amounts("1", 2) == 3
        assert subtract_amounts(ONE_IOTX, 1) == ONE_IOTX - 1

    def test_subtract_negative(self) -> None:
        with pytest.raises(UnitError, match="negative"):
            subtract_amounts(1, 2)

    def test_multiply_by_percentage(self) -> None:
        assert multiply_by_percentage(1000, 0.5) == 500
        assert multiply_by_percentage(1000, 0.12345) == 123
        assert multiply_by_percentage(ONE_IOTX, 1) == ONE_IOTX

    def test_gas_cost(self) -> None:
        assert calculate_gas_cost(21_000, 10 ** 12) == "0.021"


class TestLargeAmounts:
    """Amounts beyond 28 significant digits must stay exact."""

    def test_iotx_to_rau(self) -> None:
        assert iotx_to_rau("12345678901.123456789012345678") == 12345678901123456789012345678
        assert rau_to_iotx(12345678901123456789012345678) == "12345678901.123456789012345678"

    def test_convert_units(self) -> None:
        amount = "12345678901234567890123456789"
        assert convert_units(amount, "rau", "rau") == amount
        assert convert_units(amount, "rau", "iotx") == "12345678901.234567890123456789"
        assert convert_units("12345678901.234567890123456789", "iotx", "qev") == (
            "12345678901234567890123456.789"
        )

    def test_parse_token_amount(self) -> None:
        assert parse_token_amount("123456789012.123456789012345678", 18) == (
            123456789012123456789012345678
        )

    def test_still_rejects_extra_precision(self) -> None:
        with pytest.raises(UnitError):
            iotx_to_rau("12345678901.1234567890123456789")

    def test_format_token_amount(self) -> None:
        assert format_token_amount(12345678901234567890123456789012, 18) == "12345678901234.5679"
