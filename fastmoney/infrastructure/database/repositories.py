"""Data access layer for bills, categories and depositors

Methods are coroutines so the SQL stores and the REST client are
interchangeable; the session work inside them is synchronous.
"""

import uuid
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from fastmoney.infrastructure.database.models import BillRecord, CategoryRecord, DepositorRecord
from fastmoney.domain.exceptions import NotFound, RepositoryError
from fastmoney.domain.models import Bill, BillDirection, BillStatus, Category, Depositor


def _uuid_or_none(value: Optional[str]) -> Optional[uuid.UUID]:
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError as e:
        raise RepositoryError(f"Invalid identifier: {value}") from e


def _to_bill(record: BillRecord) -> Bill:
    return Bill(
        id=str(record.id),
        vendor_name=record.vendor_name,
        amount=record.amount,
        due_date=record.due_date,
        payment_date=record.datapagamento,
        status=BillStatus(record.status),
        direction=BillDirection(record.tipo),
        depositor_id=str(record.id_depositante) if record.id_depositante else None,
        category_id=str(record.id_categoria) if record.id_categoria else None,
        category=record.category or "",
        notes=record.notes,
        invoice_number=record.numero_nota_fiscal,
    )


def _apply(record: BillRecord, bill: Bill) -> BillRecord:
    record.vendor_name = bill.vendor_name
    record.amount = bill.amount
    record.due_date = bill.due_date
    record.datapagamento = bill.payment_date
    record.status = BillStatus(bill.status).value
    record.tipo = BillDirection(bill.direction).value
    record.id_depositante = _uuid_or_none(bill.depositor_id)
    record.id_categoria = _uuid_or_none(bill.category_id)
    record.category = bill.category or ""
    record.notes = bill.notes
    record.numero_nota_fiscal = bill.invoice_number
    return record


class BillRepository:
    """Repository for bills"""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, bill_id: str) -> Optional[BillRecord]:
        try:
            key = uuid.UUID(str(bill_id))
        except ValueError:
            return None
        try:
            return self.db.query(BillRecord).filter(BillRecord.id == key).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error: {e}") from e

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error: {e}") from e

    async def get(self, bill_id: str) -> Optional[Bill]:
        """Fetch a bill, None when absent"""
        record = self._find(bill_id)
        return _to_bill(record) if record else None

    async def list(self, direction: Optional[str] = None, status: Optional[str] = None) -> List[Bill]:
        """Bills ordered by due date, optionally filtered"""
        query = self.db.query(BillRecord)
        if direction:
            query = query.filter(BillRecord.tipo == BillDirection(direction).value)
        if status:
            query = query.filter(BillRecord.status == BillStatus(status).value)
        try:
            return [_to_bill(r) for r in query.order_by(BillRecord.due_date.asc()).all()]
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error: {e}") from e

    async def create(self, bill: Bill) -> Bill:
        """Persist a new bill; each create commits on its own"""
        record = _apply(BillRecord(), bill)
        self.db.add(record)
        self._commit()
        return _to_bill(record)

    async def update(self, bill_id: str, bill: Bill) -> Bill:
        """Replace every field of an existing bill"""
        record = self._find(bill_id)
        if record is None:
            raise NotFound("Conta não encontrada")
        _apply(record, bill)
        self._commit()
        return _to_bill(record)

    async def delete(self, bill_id: str) -> None:
        record = self._find(bill_id)
        if record is None:
            return
        self.db.delete(record)
        self._commit()


class CategoryRepository:
    """Repository for categories"""

    def __init__(self, db: Session):
        self.db = db

    async def list_all(self) -> List[Category]:
        try:
            records = self.db.query(CategoryRecord).order_by(CategoryRecord.nome_categoria.asc()).all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error: {e}") from e
        return [Category(id=str(r.id), name=r.nome_categoria) for r in records]

    async def create(self, name: str) -> Category:
        record = CategoryRecord(nome_categoria=name)
        self.db.add(record)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error: {e}") from e
        return Category(id=str(record.id), name=record.nome_categoria)


class DepositorRepository:
    """Repository for depositors"""

    def __init__(self, db: Session):
        self.db = db

    async def list_all(self) -> List[Depositor]:
        try:
            records = self.db.query(DepositorRecord).order_by(DepositorRecord.descri.asc()).all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error: {e}") from e
        return [Depositor(id=str(r.id), name=r.descri, city=r.cidade, state=r.uf) for r in records]

    async def create(self, name: str, city: Optional[str] = None, state: Optional[str] = None) -> Depositor:
        record = DepositorRecord(descri=name, cidade=city, uf=state)
        self.db.add(record)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error: {e}") from e
        return Depositor(id=str(record.id), name=record.descri, city=record.cidade, state=record.uf)
