"""Unit tests for the hosted database REST stores"""

import json
import httpx
import pytest
from datetime import date
from decimal import Decimal
from fastmoney.domain.exceptions import NotFound, RepositoryError
from fastmoney.domain.models import Bill, BillDirection, BillStatus
from fastmoney.infrastructure.clients.supabase import (
    SupabaseBillRepository,
    SupabaseCategoryStore,
    SupabaseClient,
    SupabaseDepositorStore,
)

BILL_ROW = {
    "id": "9b1f0c1e-0000-0000-0000-000000000001",
    "vendor_name": "ACME Ltda",
    "amount": 1234.56,
    "due_date": "2024-05-10",
    "datapagamento": None,
    "status": "unpaid",
    "tipo": "receber",
    "id_depositante": "dep-acme",
    "id_categoria": None,
    "category": "",
    "notes": None,
    "numero_nota_fiscal": "NF 1",
}


def make_client(handler) -> SupabaseClient:
    return SupabaseClient(
        base_url="https://db.example.test",
        api_key="test-key",
        transport=httpx.MockTransport(handler),
    )


async def test_list_categories_ordered_by_name():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["apikey"] = request.headers["apikey"]
        return httpx.Response(200, json=[{"id": 1, "nome_categoria": "Aluguel"}])

    categories = await SupabaseCategoryStore(make_client(handler)).list_all()

    assert categories[0].id == "1"
    assert categories[0].name == "Aluguel"
    assert seen["url"].path == "/rest/v1/categories"
    assert seen["url"].params["order"] == "nome_categoria.asc"
    assert seen["apikey"] == "test-key"


async def test_list_depositors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": "d1", "descri": "ACME", "cidade": "Curitiba", "uf": "PR"}])

    depositors = await SupabaseDepositorStore(make_client(handler)).list_all()

    assert depositors[0].name == "ACME"
    assert depositors[0].state == "PR"


async def test_get_bill_parses_row():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["id"] == f"eq.{BILL_ROW['id']}"
        return httpx.Response(200, json=[BILL_ROW])

    bill = await SupabaseBillRepository(make_client(handler)).get(BILL_ROW["id"])

    assert bill.amount == Decimal("1234.56")
    assert bill.due_date == date(2024, 5, 10)
    assert bill.direction is BillDirection.RECEIVABLE
    assert bill.invoice_number == "NF 1"


async def test_get_missing_bill_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    assert await SupabaseBillRepository(make_client(handler)).get("x") is None


async def test_create_bill_sends_canonical_amount():
    sent = {}

    def handler(request: httpx.Request) -> httpx.Response:
        sent.update(json.loads(request.content))
        return httpx.Response(201, json=[{**BILL_ROW, **sent, "id": "new-id"}])

    bill = Bill(
        vendor_name="ACME Ltda",
        amount=Decimal("99.9"),
        due_date=date(2024, 1, 31),
        status=BillStatus.PAID,
        direction=BillDirection.PAYABLE,
    )
    saved = await SupabaseBillRepository(make_client(handler)).create(bill)

    assert sent["amount"] == "99.90"
    assert sent["due_date"] == "2024-01-31"
    assert sent["tipo"] == "pagar"
    assert saved.id == "new-id"
    assert saved.status is BillStatus.PAID


async def test_update_missing_bill_raises_not_found():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PATCH"
        return httpx.Response(200, json=[])

    bill = Bill(vendor_name="X", amount=Decimal("1"), due_date=date(2024, 1, 1))
    with pytest.raises(NotFound):
        await SupabaseBillRepository(make_client(handler)).update("missing", bill)


async def test_http_error_becomes_repository_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"message": "unavailable"})

    with pytest.raises(RepositoryError, match="503"):
        await SupabaseCategoryStore(make_client(handler)).list_all()


async def test_network_error_becomes_repository_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RepositoryError):
        await SupabaseBillRepository(make_client(handler)).delete("x")


async def test_malformed_row_becomes_repository_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": "1"}])

    with pytest.raises(RepositoryError):
        await SupabaseBillRepository(make_client(handler)).list()
