"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class BillStatus(str, Enum):
    """Payment status of a bill"""

    PAID = "paid"
    UNPAID = "unpaid"


class BillDirection(str, Enum):
    """Whether the bill is owed by us or to us. Values are the stored flags."""

    PAYABLE = "pagar"
    RECEIVABLE = "receber"

    @classmethod
    def from_path(cls, path: str) -> "BillDirection":
        """Infer direction from the navigation path the form was opened from"""
        return cls.RECEIVABLE if "/receitas" in (path or "") else cls.PAYABLE

    @property
    def list_path(self) -> str:
        return "/receitas" if self is BillDirection.RECEIVABLE else "/bills"


@dataclass
class Category:
    """Bill category"""

    id: str
    name: str


@dataclass
class Depositor:
    """Counterparty (vendor or payer) of a bill"""

    id: str
    name: str
    city: Optional[str] = None
    state: Optional[str] = None


@dataclass
class Bill:
    """Payable or receivable obligation"""

    vendor_name: str
    amount: Decimal
    due_date: date
    status: BillStatus = BillStatus.UNPAID
    direction: BillDirection = BillDirection.PAYABLE
    depositor_id: Optional[str] = None
    category_id: Optional[str] = None
    category: str = ""
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    invoice_number: Optional[str] = None
    id: Optional[str] = None


@dataclass
class Installment:
    """Single bill generated from an installment plan"""

    amount: Decimal
    due_date: date
    label: str
    notes: str
