"""Installment plan generation for bills paid in parts"""

from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Optional

from fastmoney.domain.amounts import CENTS
from fastmoney.domain.exceptions import InvalidInstallmentPlan
from fastmoney.domain.models import Installment
from fastmoney.utils.date_utils import fixed_interval_dates

MAX_INSTALLMENTS = 48
DEFAULT_INTERVAL_DAYS = 30


def installment_amount(total: Decimal, count: int) -> Decimal:
    """Value of each installment, rounded half-up to cents"""
    return (total / count).quantize(CENTS, rounding=ROUND_HALF_UP)


def validate_plan(total: Decimal, count: int, max_count: int = MAX_INSTALLMENTS) -> None:
    """
    Raises:
        InvalidInstallmentPlan: total not positive or count outside 1..max_count
    """
    if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= max_count:
        raise InvalidInstallmentPlan(f"Número de parcelas deve ser um número entre 1 e {max_count}")

    try:
        value = Decimal(str(total))
    except InvalidOperation:
        value = None
    if value is None or not value.is_finite() or value <= 0:
        raise InvalidInstallmentPlan(
            "Valor total deve ser um número maior que zero", field="installments_total"
        )


def split_installments(
    total: Decimal,
    count: int,
    first_due_date: date,
    counterparty: str = "",
    notes: Optional[str] = None,
    interval_days: int = DEFAULT_INTERVAL_DAYS,
    absorb_remainder: bool = False,
    max_count: int = MAX_INSTALLMENTS,
) -> List[Installment]:
    """
    Split a bill total into equal installments on a fixed day cadence.

    Requirements:
    - Every installment is round(total / count, 2)
    - Due dates are first_due_date + i * interval_days (not calendar months)
    - Unless absorb_remainder is set, the rounding drift stays unallocated,
      so the sum may differ from the total by up to count * 0.005

    Example:
        100.00 in 3 -> [33.33, 33.33, 33.33] (sum 99.99)
        100.00 in 3, absorb_remainder -> [33.33, 33.33, 33.34]
    """
    validate_plan(total, count, max_count)
    total = Decimal(str(total))

    amount = installment_amount(total, count)
    remainder = total.quantize(CENTS, rounding=ROUND_HALF_UP) - amount * count

    due_dates = fixed_interval_dates(first_due_date, count, interval_days)

    installments = []
    for i, due_date in enumerate(due_dates):
        value = amount + (remainder if absorb_remainder and i == count - 1 else 0)
        number = f"{i + 1}/{count}"
        suffix = f"Parcela {i + 1} de {count}"

        installments.append(
            Installment(
                amount=value,
                due_date=due_date,
                label=f"{counterparty} - Parcela {number}",
                notes=f"{notes} - {suffix}" if notes else suffix,
            )
        )

    return installments
