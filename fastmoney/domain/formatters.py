"""Display helpers for bill listings"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Union

from fastmoney.domain.models import BillStatus
from fastmoney.utils.date_utils import parse_iso_date

DUE_SOON_DAYS = 3


@dataclass
class StatusInfo:
    """Listing status derived from payment status and due date"""

    code: str  # paid | overdue | due_soon | on_time
    text: str


@dataclass
class CategoryInfo:
    name: str
    icon: str


_CATEGORIES = {
    "utilities": CategoryInfo("Utilidades", "⚡"),
    "rent": CategoryInfo("Aluguel", "🏢"),
    "insurance": CategoryInfo("Seguro", "🔒"),
    "subscription": CategoryInfo("Assinatura", "📱"),
    "services": CategoryInfo("Serviços", "🔧"),
    "supplies": CategoryInfo("Suprimentos", "📦"),
    "taxes": CategoryInfo("Impostos", "📝"),
}
_OTHER = CategoryInfo("Outros", "📋")


def format_date(value: Union[str, date]) -> str:
    """ISO date (or timestamp) to dd/mm/yyyy"""
    return parse_iso_date(value).strftime("%d/%m/%Y")


def days_between(first: date, second: date) -> int:
    """Absolute number of days between two dates"""
    return abs((first - second).days)


def bill_status_info(
    due_date: Union[str, date],
    status: BillStatus,
    today: Optional[date] = None,
) -> StatusInfo:
    """
    Classify a bill for display.

    Unpaid bills past due are overdue; those due within three days are due soon.
    """
    if BillStatus(status) is BillStatus.PAID:
        return StatusInfo("paid", "Pago")

    today = today or date.today()
    due = parse_iso_date(due_date)

    if due < today:
        return StatusInfo("overdue", "Vencido")
    if due <= today + timedelta(days=DUE_SOON_DAYS):
        return StatusInfo("due_soon", "Próximo ao vencimento")
    return StatusInfo("on_time", "Em dia")


def category_info(category: str) -> CategoryInfo:
    """Display name and icon for a category key; unknown keys map to "Outros" """
    return _CATEGORIES.get((category or "").lower(), _OTHER)
