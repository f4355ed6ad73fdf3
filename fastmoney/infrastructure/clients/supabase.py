"""Hosted database REST client (PostgREST API) for bills and reference data"""

import httpx
from decimal import Decimal
from typing import Any, Dict, List, Optional
from fastmoney.config import settings
from fastmoney.domain.amounts import to_canonical
from fastmoney.domain.exceptions import NotFound, RepositoryError
from fastmoney.domain.models import Bill, BillDirection, BillStatus, Category, Depositor
from fastmoney.utils.date_utils import parse_iso_date


class SupabaseClient:
    """Thin async wrapper over the REST endpoint of the hosted database"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.supabase_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.supabase_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    async def request(
        self,
        method: str,
        table: str,
        params: Dict[str, str] | None = None,
        json: Any = None,
    ) -> Any:
        """
        Execute one REST call against a table.

        Raises:
            RepositoryError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(
            timeout=self.timeout, headers=self._headers(), transport=self.transport
        ) as client:
            try:
                response = await client.request(
                    method,
                    f"{self.base_url}/rest/v1/{table}",
                    params=params or {},
                    json=json,
                )
                response.raise_for_status()
                return response.json() if response.content else None

            except httpx.TimeoutException as e:
                raise RepositoryError(f"Database API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise RepositoryError(f"Database API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise RepositoryError(f"Database API unreachable: {e}") from e
            except ValueError as e:
                raise RepositoryError(f"Invalid response from database API: {e}") from e


def _bill_from_row(row: Dict[str, Any]) -> Bill:
    try:
        return Bill(
            id=str(row["id"]),
            vendor_name=row["vendor_name"],
            amount=Decimal(str(row["amount"])),
            due_date=parse_iso_date(row["due_date"]),
            payment_date=parse_iso_date(row["datapagamento"]) if row.get("datapagamento") else None,
            status=BillStatus(row["status"]),
            direction=BillDirection(row.get("tipo") or BillDirection.PAYABLE.value),
            depositor_id=row.get("id_depositante"),
            category_id=row.get("id_categoria"),
            category=row.get("category") or "",
            notes=row.get("notes"),
            invoice_number=row.get("numero_nota_fiscal"),
        )
    except (KeyError, ValueError, TypeError, ArithmeticError) as e:
        raise RepositoryError(f"Invalid bill data from database API: {e}") from e


def _bill_to_row(bill: Bill) -> Dict[str, Any]:
    return {
        "vendor_name": bill.vendor_name,
        "amount": to_canonical(bill.amount),
        "due_date": bill.due_date.isoformat(),
        "datapagamento": bill.payment_date.isoformat() if bill.payment_date else None,
        "status": BillStatus(bill.status).value,
        "tipo": BillDirection(bill.direction).value,
        "id_depositante": bill.depositor_id,
        "id_categoria": bill.category_id,
        "category": bill.category,
        "notes": bill.notes,
        "numero_nota_fiscal": bill.invoice_number,
    }


def _first(rows: Any) -> Optional[Dict[str, Any]]:
    if isinstance(rows, list):
        return rows[0] if rows else None
    return rows


class SupabaseBillRepository:
    """Bills table over REST"""

    table = "bills"

    def __init__(self, client: SupabaseClient):
        self.client = client

    async def get(self, bill_id: str) -> Optional[Bill]:
        row = _first(await self.client.request("GET", self.table, {"id": f"eq.{bill_id}", "select": "*"}))
        return _bill_from_row(row) if row else None

    async def list(self, direction: Optional[str] = None, status: Optional[str] = None) -> List[Bill]:
        params = {"select": "*", "order": "due_date.asc"}
        if direction:
            params["tipo"] = f"eq.{BillDirection(direction).value}"
        if status:
            params["status"] = f"eq.{BillStatus(status).value}"
        return [_bill_from_row(r) for r in await self.client.request("GET", self.table, params) or []]

    async def create(self, bill: Bill) -> Bill:
        row = _first(await self.client.request("POST", self.table, json=_bill_to_row(bill)))
        if not row:
            raise RepositoryError("Database API returned no row for insert")
        return _bill_from_row(row)

    async def update(self, bill_id: str, bill: Bill) -> Bill:
        row = _first(
            await self.client.request("PATCH", self.table, {"id": f"eq.{bill_id}"}, json=_bill_to_row(bill))
        )
        if not row:
            raise NotFound("Conta não encontrada")
        return _bill_from_row(row)

    async def delete(self, bill_id: str) -> None:
        await self.client.request("DELETE", self.table, {"id": f"eq.{bill_id}"})


class SupabaseCategoryStore:
    """Categories table over REST"""

    def __init__(self, client: SupabaseClient):
        self.client = client

    async def list_all(self) -> List[Category]:
        rows = await self.client.request(
            "GET", "categories", {"select": "*", "order": "nome_categoria.asc"}
        )
        try:
            return [Category(id=str(r["id"]), name=r["nome_categoria"]) for r in rows or []]
        except (KeyError, TypeError) as e:
            raise RepositoryError(f"Invalid category data from database API: {e}") from e

    async def create(self, name: str) -> Category:
        row = _first(await self.client.request("POST", "categories", json={"nome_categoria": name}))
        if not row:
            raise RepositoryError("Database API returned no row for insert")
        return Category(id=str(row["id"]), name=row["nome_categoria"])


class SupabaseDepositorStore:
    """Depositors table over REST"""

    def __init__(self, client: SupabaseClient):
        self.client = client

    async def list_all(self) -> List[Depositor]:
        rows = await self.client.request("GET", "depositantes", {"select": "*", "order": "descri.asc"})
        try:
            return [
                Depositor(id=str(r["id"]), name=r["descri"], city=r.get("cidade"), state=r.get("uf"))
                for r in rows or []
            ]
        except (KeyError, TypeError) as e:
            raise RepositoryError(f"Invalid depositor data from database API: {e}") from e

    async def create(self, name: str, city: Optional[str] = None, state: Optional[str] = None) -> Depositor:
        row = _first(
            await self.client.request("POST", "depositantes", json={"descri": name, "cidade": city, "uf": state})
        )
        if not row:
            raise RepositoryError("Database API returned no row for insert")
        return Depositor(id=str(row["id"]), name=row["descri"], city=row.get("cidade"), state=row.get("uf"))
