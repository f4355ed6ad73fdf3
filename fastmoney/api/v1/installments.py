"""POST /v1/installments/preview - Show installments before submitting"""

from fastapi import APIRouter, HTTPException

from fastmoney.api.v1.schemas import (
    InstallmentPreviewItem,
    InstallmentPreviewRequest,
    InstallmentPreviewResponse,
)
from fastmoney.config import settings
from fastmoney.domain.amounts import format_amount, parse_amount, to_canonical
from fastmoney.domain.exceptions import InvalidAmount, InvalidInstallmentPlan
from fastmoney.domain.installments import split_installments

router = APIRouter()


@router.post("/installments/preview", response_model=InstallmentPreviewResponse)
def preview_installments(body: InstallmentPreviewRequest):
    """Split a total with the same rules the bill form uses, without saving"""
    try:
        total = parse_amount(body.total)
        installments = split_installments(
            total,
            body.count,
            body.first_due_date,
            counterparty=body.counterparty,
            notes=body.notes,
            interval_days=settings.installment_interval_days,
            absorb_remainder=settings.installment_absorb_remainder,
            max_count=settings.installment_max_count,
        )
    except InvalidAmount as e:
        raise HTTPException(status_code=422, detail={"message": e.message, "field_errors": {"total": e.message}})
    except InvalidInstallmentPlan as e:
        raise HTTPException(status_code=422, detail={"message": e.message, "field_errors": {e.field: e.message}})

    return InstallmentPreviewResponse(
        installment_amount_display=format_amount(installments[0].amount),
        total_display=format_amount(total),
        sum_display=format_amount(sum(i.amount for i in installments)),
        installments=[
            InstallmentPreviewItem(
                number=n,
                amount=to_canonical(i.amount),
                amount_display=format_amount(i.amount),
                due_date=i.due_date,
                label=i.label,
                notes=i.notes,
            )
            for n, i in enumerate(installments, start=1)
        ],
    )
