"""Unit tests for invoice number formatting and parsing."""

import pytest

from efactura.core.exceptions import InvoiceNumberParseError
from efactura.core.services.invoice_number import (
    InvoiceNumber,
    format_invoice_number,
    parse_invoice_number,
)


class TestFormatInvoiceNumber:
    """Tests for format_invoice_number."""

    def test_pads_to_six_digits(self):
        assert format_invoice_number("PMT", 42) == "PMT000042"

    def test_long_numbers_are_not_truncated(self):
        assert format_invoice_number("PMT", 1234567) == "PMT1234567"

    def test_six_digit_number(self):
        assert format_invoice_number("FACT", 999999) == "FACT999999"


class TestParseInvoiceNumber:
    """Tests for parse_invoice_number."""

    def test_parses_series_and_number(self):
        assert parse_invoice_number("PMT000042") == InvoiceNumber(series="PMT", number=42)

    def test_result_fields(self):
        parsed = parse_invoice_number("AB000001")
        assert parsed.series == "AB"
        assert parsed.number == 1

    @pytest.mark.parametrize(
        "value",
        ["", "PMT", "000042", "pmt000042", "PMT-000042", "PMT000042X", "P1T000042"],
    )
    def test_invalid_format_raises(self, value):
        with pytest.raises(InvoiceNumberParseError):
            parse_invoice_number(value)

    def test_trailing_newline_raises(self):
        with pytest.raises(InvoiceNumberParseError):
            parse_invoice_number("PMT000042\n")

    def test_non_ascii_digits_raise(self):
        """Arabic-Indic "42" would otherwise parse and format back differently."""
        with pytest.raises(InvoiceNumberParseError):
            parse_invoice_number("PMT٤٢")

    def test_parse_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_invoice_number("not a number")

    def test_parse_error_carries_code(self):
        with pytest.raises(InvoiceNumberParseError) as exc_info:
            parse_invoice_number("bad")
        assert exc_info.value.code == "INVOICE_NUMBER_PARSE_ERROR"
        assert exc_info.value.details["value"] == "bad"


class TestRoundTrip:
    """parse(format(s, n)) returns (s, n)."""

    @pytest.mark.parametrize("series", ["A", "PMT", "FACTURARO", "ABCDEFGHIJ"])
    @pytest.mark.parametrize("number", [1, 42, 1000, 999999, 1234567])
    def test_round_trip(self, series, number):
        assert parse_invoice_number(format_invoice_number(series, number)) == (series, number)
