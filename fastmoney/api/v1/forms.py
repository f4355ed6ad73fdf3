"""GET /v1/bill-form - Seed the bill form in create or edit mode"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from fastmoney.api.v1.schemas import (
    BillFormResponse,
    CategorySchema,
    DepositorOption,
    DepositorSchema,
    DraftSchema,
)
from fastmoney.api.dependencies import Stores, build_form_controller, get_stores
from fastmoney.domain.exceptions import NotFound, ReferenceDataFetchFailed
from fastmoney.infrastructure.notifications import CollectingNotifier, RedirectRecorder
from fastmoney.infrastructure.observability.metrics import store_failures_counter

router = APIRouter()


@router.get("/bill-form", response_model=BillFormResponse)
async def get_bill_form(
    bill_id: Optional[str] = Query(None, description="Bill to edit; omit for a new bill"),
    path: str = Query("/bills", description="Path the form was opened from"),
    stores: Stores = Depends(get_stores),
):
    """
    Default form values plus reference data.

    Returns:
        Draft (amount in display format when editing), categories ordered by
        name, and depositor select options
    """
    controller = build_form_controller(
        stores, CollectingNotifier(), RedirectRecorder(), bill_id=bill_id, path=path
    )

    try:
        draft = await controller.load()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ReferenceDataFetchFailed as e:
        store_failures_counter.labels(operation="reference_data").inc()
        raise HTTPException(status_code=503, detail=str(e))

    selected = controller.selected_depositor
    return BillFormResponse(
        edit_mode=controller.is_edit_mode,
        state=controller.state.value,
        draft=DraftSchema(**draft.__dict__),
        categories=[CategorySchema(id=c.id, name=c.name) for c in controller.categories],
        depositor_options=[DepositorOption(value=d.id, label=d.name) for d in controller.depositors],
        selected_depositor=DepositorSchema(**selected.__dict__) if selected else None,
    )
