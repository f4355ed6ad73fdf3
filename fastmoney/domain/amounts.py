"""Brazilian currency parsing and formatting for bill amounts"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from fastmoney.domain.exceptions import InvalidAmount

CURRENCY_SYMBOL = "R$"
CENTS = Decimal("0.01")

_NON_AMOUNT_CHARS = re.compile(r"[^\d,]")

AmountLike = Union[str, Decimal, int, None]


def parse_amount(raw: str) -> Decimal:
    """
    Parse a pt-BR formatted amount into a canonical two-place Decimal.

    Dots and the currency symbol are stripped, the first comma is the decimal
    separator and any further commas are dropped with their digits kept in
    the fractional part.

    Examples:
        "R$ 1.234,56" -> Decimal("1234.56")
        "1,2,3"       -> Decimal("1.23")
        "10,005"      -> Decimal("10.01")

    Raises:
        InvalidAmount: input is not a string or holds no digits
    """
    if not isinstance(raw, str):
        raise InvalidAmount("Valor inválido")

    cleaned = _NON_AMOUNT_CHARS.sub("", raw.strip())
    integer_part, _, fraction = cleaned.partition(",")
    fraction = fraction.replace(",", "")

    if not integer_part and not fraction:
        raise InvalidAmount("Valor inválido")

    try:
        value = Decimal(f"{integer_part or '0'}.{fraction or '0'}")
    except InvalidOperation as e:
        raise InvalidAmount("Valor inválido") from e

    if not value.is_finite():
        raise InvalidAmount("Valor inválido")

    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _to_decimal(value: AmountLike) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as e:
        raise InvalidAmount(f"Valor inválido: {value!r}") from e


def format_amount(value: AmountLike) -> str:
    """Render a canonical amount as "R$ 1.234,56"; empty input renders zero"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return f"{CURRENCY_SYMBOL} 0,00"

    amount = _to_decimal(value)
    if not amount.is_finite():
        raise InvalidAmount(f"Valor inválido: {value!r}")

    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    # Swap en-US grouping for pt-BR: "1,234.56" -> "1.234,56"
    digits = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{CURRENCY_SYMBOL} {digits}"


def to_canonical(value: AmountLike) -> str:
    """Storage representation, e.g. "1234.56" """
    return str(_to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))
