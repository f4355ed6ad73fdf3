"""/v1/bills - list, fetch, create and update bills"""

import time
import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from fastmoney.api.v1.schemas import (
    BillFormValues,
    BillListResponse,
    BillSchema,
    NotificationSchema,
    SubmitResponse,
)
from fastmoney.api.dependencies import Stores, build_form_controller, get_request_id, get_stores
from fastmoney.domain.amounts import format_amount, to_canonical
from fastmoney.domain.controller import BillFormController
from fastmoney.domain.exceptions import (
    DepositorNotFound,
    NotFound,
    ReferenceDataFetchFailed,
    RepositoryError,
    SubmitFailed,
    ValidationError,
)
from fastmoney.domain.formatters import bill_status_info, category_info, format_date
from fastmoney.domain.models import Bill, BillDirection, BillStatus
from fastmoney.infrastructure.notifications import CollectingNotifier, RedirectRecorder
from fastmoney.infrastructure.observability.logging import log_submission
from fastmoney.infrastructure.observability.metrics import record_submission, store_failures_counter

router = APIRouter()


def bill_to_schema(bill: Bill, today: Optional[date] = None) -> BillSchema:
    status_info = bill_status_info(bill.due_date, bill.status, today)
    return BillSchema(
        id=bill.id,
        vendor_name=bill.vendor_name,
        amount=to_canonical(bill.amount),
        amount_display=format_amount(bill.amount),
        due_date=bill.due_date,
        due_date_display=format_date(bill.due_date),
        payment_date=bill.payment_date,
        status=bill.status,
        status_code=status_info.code,
        status_text=status_info.text,
        direction=bill.direction,
        depositor_id=bill.depositor_id,
        category_id=bill.category_id,
        category=bill.category,
        category_icon=category_info(bill.category).icon,
        notes=bill.notes,
        invoice_number=bill.invoice_number,
    )


@router.get("/bills", response_model=BillListResponse)
async def list_bills(
    direction: Optional[BillDirection] = Query(None, description="pagar | receber"),
    status: Optional[BillStatus] = Query(None, description="paid | unpaid"),
    stores: Stores = Depends(get_stores),
):
    """Bills ordered by due date with display amounts and status"""
    try:
        bills = await stores.bills.list(direction=direction, status=status)
    except RepositoryError as e:
        store_failures_counter.labels(operation="list_bills").inc()
        logging.error(f"Bill listing failed: {e}")
        raise HTTPException(status_code=503, detail="Database unavailable")

    total = sum((b.amount for b in bills), Decimal("0"))
    return BillListResponse(bills=[bill_to_schema(b) for b in bills], total_display=format_amount(total))


@router.get("/bills/{bill_id}", response_model=BillSchema)
async def get_bill(bill_id: str, stores: Stores = Depends(get_stores)):
    try:
        bill = await stores.bills.get(bill_id)
    except RepositoryError as e:
        store_failures_counter.labels(operation="get_bill").inc()
        logging.error(f"Bill fetch failed: {e}")
        raise HTTPException(status_code=503, detail="Database unavailable")

    if bill is None:
        raise HTTPException(status_code=404, detail="Conta não encontrada")
    return bill_to_schema(bill)


def _apply_values(controller: BillFormController, values: BillFormValues) -> None:
    """Feed submitted form values through the draft reducers"""
    controller.update(
        depositor_id=values.depositor_id,
        amount=values.amount,
        due_date=values.due_date,
        payment_date=values.payment_date,
        status=values.status,
        direction=values.direction or controller.draft.direction,
        notes=values.notes,
        invoice_number=values.invoice_number,
    )

    controller.select_category(values.category_id)
    if controller.draft.category_id != values.category_id:
        raise ValidationError("Categoria não encontrada", field="category_id")

    controller.set_installments(
        values.has_installments, values.installments_count, values.installments_total
    )


def _notifications(notifier: CollectingNotifier) -> list:
    return [NotificationSchema(**n.__dict__).model_dump() for n in notifier.notifications]


async def _submit(
    values: BillFormValues, request: Request, stores: Stores, bill_id: Optional[str] = None
) -> SubmitResponse:
    """
    Run the bill form for one submission.

    Flow:
    1. Load reference data (and the bill in edit mode)
    2. Apply submitted values to the draft
    3. Validate and write a single bill or an installment batch
    4. Return saved bills, notifications and the redirect target
    """
    start_time = time.time()
    request_id = get_request_id(request)
    notifier = CollectingNotifier()
    navigator = RedirectRecorder()
    controller = build_form_controller(stores, notifier, navigator, bill_id=bill_id, path=values.path)

    if bill_id:
        mode = "update"
    else:
        mode = "installments" if values.has_installments else "create"

    try:
        await controller.load()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ReferenceDataFetchFailed as e:
        store_failures_counter.labels(operation="reference_data").inc()
        raise HTTPException(status_code=503, detail=str(e))

    try:
        _apply_values(controller, values)
        result = await controller.submit()

    except ValidationError as e:
        record_submission(mode, "invalid")
        field_errors = controller.field_errors or {e.field: e.message}
        logging.warning(f"Bill form rejected: {e.message}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=422,
            detail={"message": e.message, "field_errors": field_errors, "notifications": []},
        )

    except DepositorNotFound as e:
        record_submission(mode, "invalid")
        logging.warning(f"Depositor not found: {values.depositor_id}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=422,
            detail={
                "message": str(e),
                "field_errors": {"depositor_id": str(e)},
                "notifications": _notifications(notifier),
            },
        )

    except SubmitFailed as e:
        store_failures_counter.labels(operation=mode).inc()
        record_submission(mode, "failed", compensated=len(controller.compensated_ids))
        logging.error(f"Bill submission failed: {e}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=502,
            detail={"message": str(e), "field_errors": {}, "notifications": _notifications(notifier)},
        )

    duration_ms = (time.time() - start_time) * 1000
    record_submission(result.mode, "success", bill_count=len(result.bills))
    log_submission(request_id, result.mode, "success", len(result.bills), duration_ms, bill_id=bill_id)

    return SubmitResponse(
        mode=result.mode,
        bills=[bill_to_schema(b) for b in result.bills],
        redirect_to=navigator.path or result.redirect_to,
        notifications=_notifications(notifier),
    )


@router.post("/bills", response_model=SubmitResponse, status_code=201)
async def create_bill(
    values: BillFormValues,
    request: Request,
    stores: Stores = Depends(get_stores),
):
    """Create a bill, or one bill per installment when installments are enabled"""
    return await _submit(values, request, stores)


@router.put("/bills/{bill_id}", response_model=SubmitResponse)
async def update_bill(
    bill_id: str,
    values: BillFormValues,
    request: Request,
    stores: Stores = Depends(get_stores),
):
    """Replace every field of an existing bill"""
    return await _submit(values, request, stores, bill_id=bill_id)
