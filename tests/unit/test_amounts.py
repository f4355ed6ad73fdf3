"""Unit tests for currency parsing and formatting"""

import pytest
from decimal import Decimal
from fastmoney.domain.amounts import format_amount, parse_amount, to_canonical
from fastmoney.domain.exceptions import InvalidAmount


def test_parse_amount_thousands_and_decimal_comma():
    assert parse_amount("1.234,56") == Decimal("1234.56")


def test_parse_amount_strips_currency_symbol():
    assert parse_amount("R$ 12.500,00") == Decimal("12500.00")


def test_parse_amount_without_decimal_part():
    assert parse_amount("350") == Decimal("350.00")


def test_parse_amount_leading_comma():
    assert parse_amount(",5") == Decimal("0.50")


def test_parse_amount_extra_commas_join_fraction():
    """Only the first comma separates decimals; later ones are dropped"""
    assert parse_amount("1,2,3") == Decimal("1.23")


def test_parse_amount_rounds_half_away_from_zero():
    assert parse_amount("10,005") == Decimal("10.01")
    assert parse_amount("10,004") == Decimal("10.00")
    assert parse_amount("0,125") == Decimal("0.13")


@pytest.mark.parametrize("raw", ["", "   ", "abc", ",", "R$"])
def test_parse_amount_rejects_unparseable(raw):
    with pytest.raises(InvalidAmount):
        parse_amount(raw)


def test_parse_amount_rejects_non_string():
    with pytest.raises(InvalidAmount):
        parse_amount(None)


def test_format_amount_brazilian_convention():
    assert format_amount(Decimal("1234.56")) == "R$ 1.234,56"
    assert format_amount("1234567.8") == "R$ 1.234.567,80"
    assert format_amount(5) == "R$ 5,00"


def test_format_amount_empty_is_zero():
    assert format_amount("") == "R$ 0,00"
    assert format_amount(None) == "R$ 0,00"


def test_format_amount_negative():
    assert format_amount(Decimal("-5")) == "-R$ 5,00"


def test_format_amount_rejects_garbage():
    with pytest.raises(InvalidAmount):
        format_amount("doze reais")


@pytest.mark.parametrize("value", ["0.01", "0.10", "99.99", "1000.00", "1234567.89"])
def test_parse_amount_reads_back_formatted_values(value):
    canonical = Decimal(value)
    assert parse_amount(format_amount(canonical)) == canonical


def test_to_canonical():
    assert to_canonical(Decimal("10.5")) == "10.50"
    assert to_canonical("3") == "3.00"
