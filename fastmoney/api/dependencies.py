"""Dependency injection for FastAPI endpoints"""

from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from fastmoney.config import settings
from fastmoney.domain.controller import BillFormController
from fastmoney.infrastructure.clients.supabase import (
    SupabaseBillRepository,
    SupabaseCategoryStore,
    SupabaseClient,
    SupabaseDepositorStore,
)
from fastmoney.infrastructure.database.repositories import (
    BillRepository,
    CategoryRepository,
    DepositorRepository,
)
from fastmoney.infrastructure.database.session import get_db
from fastmoney.infrastructure.notifications import CollectingNotifier, RedirectRecorder


@dataclass
class Stores:
    """Backing stores for one request"""

    bills: Any
    categories: Any
    depositors: Any


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_supabase_client() -> SupabaseClient:
    """Provide hosted database REST client instance"""
    return SupabaseClient()


def get_stores(
    db: Session = Depends(get_db),
    client: SupabaseClient = Depends(get_supabase_client),
) -> Stores:
    """Pick the store implementation configured by FASTMONEY_STORE_BACKEND"""
    if settings.store_backend == "supabase":
        return Stores(
            bills=SupabaseBillRepository(client),
            categories=SupabaseCategoryStore(client),
            depositors=SupabaseDepositorStore(client),
        )
    return Stores(
        bills=BillRepository(db),
        categories=CategoryRepository(db),
        depositors=DepositorRepository(db),
    )


def build_form_controller(
    stores: Stores,
    notifier: CollectingNotifier,
    navigator: RedirectRecorder,
    bill_id: Optional[str] = None,
    path: str = "/bills",
) -> BillFormController:
    """Bill form controller wired with configured installment options"""
    return BillFormController(
        bills=stores.bills,
        categories=stores.categories,
        depositors=stores.depositors,
        notifier=notifier,
        navigator=navigator,
        bill_id=bill_id,
        path=path,
        interval_days=settings.installment_interval_days,
        max_installments=settings.installment_max_count,
        absorb_remainder=settings.installment_absorb_remainder,
        compensate_on_failure=settings.installment_compensate_on_failure,
    )
