"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from typing import Dict, List, Optional

from fastmoney.domain.models import BillDirection, BillStatus


class CategorySchema(BaseModel):
    id: str
    name: str


class CategoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Category display name")


class DepositorSchema(BaseModel):
    id: str
    name: str
    city: Optional[str] = None
    state: Optional[str] = None


class DepositorCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Depositor display name")
    city: Optional[str] = None
    state: Optional[str] = Field(default=None, max_length=2, description="UF")


class DepositorOption(BaseModel):
    """Select option for the depositor picker"""

    value: str
    label: str


class BillSchema(BaseModel):
    """Stored bill with display helpers"""

    id: str
    vendor_name: str
    amount: str = Field(..., description="Canonical amount, e.g. 1234.56")
    amount_display: str = Field(..., description="e.g. R$ 1.234,56")
    due_date: date
    due_date_display: str
    payment_date: Optional[date] = None
    status: BillStatus
    status_code: str
    status_text: str
    direction: BillDirection
    depositor_id: Optional[str] = None
    category_id: Optional[str] = None
    category: str = ""
    category_icon: str = ""
    notes: Optional[str] = None
    invoice_number: Optional[str] = None


class BillListResponse(BaseModel):
    bills: List[BillSchema]
    total_display: str


class BillFormValues(BaseModel):
    """Raw bill form values as typed by the user"""

    depositor_id: str = ""
    amount: str = ""
    due_date: str
    payment_date: str = ""
    category_id: Optional[str] = None
    status: BillStatus = BillStatus.UNPAID
    direction: Optional[BillDirection] = None
    notes: str = ""
    invoice_number: str = ""
    has_installments: bool = False
    installments_count: str = ""
    installments_total: str = ""
    path: str = Field(default="/bills", description="Path the form was opened from")


class DraftSchema(BaseModel):
    """Seeded form values"""

    due_date: str
    direction: BillDirection
    status: BillStatus
    depositor_id: str
    amount: str
    payment_date: str
    category_id: Optional[str] = None
    category: str
    notes: str
    invoice_number: str
    has_installments: bool
    installments_count: str
    installments_total: str


class BillFormResponse(BaseModel):
    """Everything the bill form needs to render"""

    edit_mode: bool
    state: str
    draft: DraftSchema
    categories: List[CategorySchema]
    depositor_options: List[DepositorOption]
    selected_depositor: Optional[DepositorSchema] = None


class NotificationSchema(BaseModel):
    kind: str
    message: str
    description: Optional[str] = None


class SubmitResponse(BaseModel):
    """Response for bill create/update"""

    mode: str
    bills: List[BillSchema]
    redirect_to: str
    notifications: List[NotificationSchema]


class SubmitErrorDetail(BaseModel):
    message: str
    field_errors: Dict[str, str] = {}
    notifications: List[NotificationSchema] = []


class InstallmentPreviewRequest(BaseModel):
    total: str = Field(..., description="Total as typed, e.g. 1.200,00")
    count: int
    first_due_date: date
    counterparty: str = ""
    notes: Optional[str] = None


class InstallmentPreviewItem(BaseModel):
    number: int
    amount: str
    amount_display: str
    due_date: date
    label: str
    notes: str


class InstallmentPreviewResponse(BaseModel):
    installment_amount_display: str
    total_display: str
    sum_display: str
    installments: List[InstallmentPreviewItem]
