"""Bill form draft and the pure reducers that transform it

The draft holds raw form values (amounts as typed, dates as ISO strings).
Reducers never mutate their input; each returns a new draft.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Sequence

from fastmoney.domain.amounts import format_amount
from fastmoney.domain.models import Bill, BillDirection, BillStatus, Category, Depositor


@dataclass(frozen=True)
class BillDraft:
    """Snapshot of the bill form"""

    due_date: str
    direction: BillDirection = BillDirection.PAYABLE
    status: BillStatus = BillStatus.UNPAID
    depositor_id: str = ""
    amount: str = ""
    payment_date: str = ""
    category_id: Optional[str] = None
    category: str = ""
    notes: str = ""
    invoice_number: str = ""
    has_installments: bool = False
    installments_count: str = ""
    installments_total: str = ""


# Category and installment fields have their own reducers
_REFERENCE_FIELDS = {"category_id", "category", "has_installments", "installments_count", "installments_total"}


def blank_draft(direction: BillDirection, today: Optional[date] = None) -> BillDraft:
    """Create-mode defaults: due today, empty amount, unpaid"""
    return BillDraft(due_date=(today or date.today()).isoformat(), direction=direction)


def draft_from_bill(bill: Bill, default_direction: BillDirection = BillDirection.PAYABLE) -> BillDraft:
    """Edit-mode defaults seeded from a stored bill"""
    return BillDraft(
        due_date=bill.due_date.isoformat(),
        direction=bill.direction or default_direction,
        status=bill.status,
        depositor_id=bill.depositor_id or "",
        amount=format_amount(bill.amount) if bill.amount is not None else "",
        payment_date=bill.payment_date.isoformat() if bill.payment_date else "",
        category_id=bill.category_id,
        category=bill.category or "",
        notes=bill.notes or "",
        invoice_number=bill.invoice_number or "",
    )


def edit(draft: BillDraft, **changes) -> BillDraft:
    """
    Set plain form fields.

    Raises:
        ValueError: a category or installment field was passed
    """
    blocked = _REFERENCE_FIELDS.intersection(changes)
    if blocked:
        raise ValueError(f"Use the dedicated reducer for: {', '.join(sorted(blocked))}")
    if "status" in changes:
        changes["status"] = BillStatus(changes["status"])
    if "direction" in changes:
        changes["direction"] = BillDirection(changes["direction"])
    return replace(draft, **changes)


def select_category(
    draft: BillDraft, categories: Sequence[Category], category_id: Optional[str]
) -> BillDraft:
    """Set category id and its name together; None clears, unknown ids leave the draft as is"""
    if category_id is None:
        return replace(draft, category_id=None, category="")
    for category in categories:
        if category.id == category_id:
            return replace(draft, category_id=category.id, category=category.name)
    return draft


def select_depositor(
    draft: BillDraft, depositors: Sequence[Depositor], depositor_id: Optional[str]
) -> BillDraft:
    """Select a depositor by id; None clears the selection"""
    if depositor_id is None:
        return replace(draft, depositor_id="")
    if any(d.id == depositor_id for d in depositors):
        return replace(draft, depositor_id=depositor_id)
    return draft


def set_installments(draft: BillDraft, enabled: bool, count: str = "", total: str = "") -> BillDraft:
    """Toggle installment mode; disabling clears count and total"""
    if not enabled:
        return replace(draft, has_installments=False, installments_count="", installments_total="")
    return replace(draft, has_installments=True, installments_count=str(count), installments_total=str(total))


def selected_depositor(draft: BillDraft, depositors: Sequence[Depositor]) -> Optional[Depositor]:
    return next((d for d in depositors if d.id == draft.depositor_id), None)
