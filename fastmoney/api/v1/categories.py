"""/v1/categories - Bill categories"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from fastmoney.api.v1.schemas import CategoryCreateRequest, CategorySchema
from fastmoney.api.dependencies import Stores, get_stores
from fastmoney.domain.exceptions import RepositoryError
from fastmoney.infrastructure.observability.metrics import store_failures_counter

router = APIRouter()


@router.get("/categories", response_model=List[CategorySchema])
async def list_categories(stores: Stores = Depends(get_stores)):
    """Categories ordered by name"""
    try:
        categories = await stores.categories.list_all()
    except RepositoryError as e:
        store_failures_counter.labels(operation="list_categories").inc()
        logging.error(f"Category fetch failed: {e}")
        raise HTTPException(status_code=503, detail="Falha ao carregar categorias")

    return [CategorySchema(id=c.id, name=c.name) for c in categories]


@router.post("/categories", response_model=CategorySchema, status_code=201)
async def create_category(body: CategoryCreateRequest, stores: Stores = Depends(get_stores)):
    try:
        category = await stores.categories.create(body.name)
    except RepositoryError as e:
        store_failures_counter.labels(operation="create_category").inc()
        logging.error(f"Category create failed: {e}")
        raise HTTPException(status_code=502, detail="Falha ao salvar categoria")

    return CategorySchema(id=category.id, name=category.name)
