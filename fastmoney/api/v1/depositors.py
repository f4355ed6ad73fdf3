"""/v1/depositors - Bill counterparties"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from fastmoney.api.v1.schemas import DepositorCreateRequest, DepositorSchema
from fastmoney.api.dependencies import Stores, get_stores
from fastmoney.domain.exceptions import RepositoryError
from fastmoney.infrastructure.observability.metrics import store_failures_counter

router = APIRouter()


@router.get("/depositors", response_model=List[DepositorSchema])
async def list_depositors(stores: Stores = Depends(get_stores)):
    try:
        depositors = await stores.depositors.list_all()
    except RepositoryError as e:
        store_failures_counter.labels(operation="list_depositors").inc()
        logging.error(f"Depositor fetch failed: {e}")
        raise HTTPException(status_code=503, detail="Falha ao carregar depositantes")

    return [DepositorSchema(**d.__dict__) for d in depositors]


@router.post("/depositors", response_model=DepositorSchema, status_code=201)
async def create_depositor(body: DepositorCreateRequest, stores: Stores = Depends(get_stores)):
    try:
        depositor = await stores.depositors.create(body.name, city=body.city, state=body.state)
    except RepositoryError as e:
        store_failures_counter.labels(operation="create_depositor").inc()
        logging.error(f"Depositor create failed: {e}")
        raise HTTPException(status_code=502, detail="Falha ao salvar depositante")

    return DepositorSchema(**depositor.__dict__)
