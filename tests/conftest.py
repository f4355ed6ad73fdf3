"""Pytest fixtures for testing"""

import uuid
import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fastmoney.api.main import create_app
from fastmoney.infrastructure.database.models import Base
from fastmoney.infrastructure.database.session import engine_options, get_db
from fastmoney.infrastructure.notifications import CollectingNotifier, RedirectRecorder
from fastmoney.domain.controller import BillFormController
from fastmoney.domain.exceptions import RepositoryError
from fastmoney.domain.models import Bill, BillDirection, BillStatus, Category, Depositor


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, **engine_options(TEST_DATABASE_URL))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


class InMemoryBillRepository:
    """Bill store double; fail_on lists 0-based create calls that raise fail_with"""

    def __init__(
        self,
        bills: Optional[List[Bill]] = None,
        fail_on: tuple = (),
        fail_with: Exception = RepositoryError("insert failed"),
    ):
        self.bills = {b.id: b for b in bills or []}
        self.fail_on = set(fail_on)
        self.fail_with = fail_with
        self.create_calls = 0
        self.calls: List[tuple] = []

    async def get(self, bill_id: str) -> Optional[Bill]:
        self.calls.append(("get", bill_id))
        return self.bills.get(bill_id)

    async def list(self, direction=None, status=None) -> List[Bill]:
        return sorted(self.bills.values(), key=lambda b: b.due_date)

    async def create(self, bill: Bill) -> Bill:
        call = self.create_calls
        self.create_calls += 1
        self.calls.append(("create", bill.vendor_name))
        if call in self.fail_on:
            raise self.fail_with
        saved = replace(bill, id=str(uuid.uuid4()))
        self.bills[saved.id] = saved
        return saved

    async def update(self, bill_id: str, bill: Bill) -> Bill:
        self.calls.append(("update", bill_id))
        saved = replace(bill, id=bill_id)
        self.bills[bill_id] = saved
        return saved

    async def delete(self, bill_id: str) -> None:
        self.calls.append(("delete", bill_id))
        self.bills.pop(bill_id, None)


class StaticStore:
    """Category or depositor store returning a fixed list"""

    def __init__(self, items: list, fail: bool = False):
        self.items = items
        self.fail = fail
        self.list_calls = 0

    async def list_all(self) -> list:
        self.list_calls += 1
        if self.fail:
            raise RepositoryError("connection refused")
        return list(self.items)


@pytest.fixture
def categories() -> List[Category]:
    return [
        Category(id="cat-aluguel", name="Aluguel"),
        Category(id="cat-impostos", name="Impostos"),
        Category(id="cat-utilities", name="Utilities"),
    ]


@pytest.fixture
def depositors() -> List[Depositor]:
    return [
        Depositor(id="dep-acme", name="ACME Ltda", city="Curitiba", state="PR"),
        Depositor(id="dep-luz", name="Companhia de Luz"),
    ]


@pytest.fixture
def stored_bill() -> Bill:
    return Bill(
        id="bill-1",
        vendor_name="ACME Ltda",
        amount=Decimal("1234.56"),
        due_date=date(2024, 5, 10),
        status=BillStatus.UNPAID,
        direction=BillDirection.PAYABLE,
        depositor_id="dep-acme",
        category_id="cat-aluguel",
        category="Aluguel",
        notes="Contrato anual",
        invoice_number="NF-e 123",
    )


@pytest.fixture
def bill_repo(stored_bill: Bill) -> InMemoryBillRepository:
    return InMemoryBillRepository([stored_bill])


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def navigator() -> RedirectRecorder:
    return RedirectRecorder()


@pytest.fixture
def bill_repo_factory():
    """Build a bill store double, e.g. bill_repo_factory(fail_on=(2,))"""
    return InMemoryBillRepository


@pytest.fixture
def make_controller(bill_repo, categories, depositors, notifier, navigator):
    """Build a BillFormController over in-memory stores"""

    def _make(
        bills=None,
        bill_id=None,
        path="/bills",
        categories_fail=False,
        depositors_fail=False,
        **options,
    ) -> BillFormController:
        return BillFormController(
            bills=bills if bills is not None else bill_repo,
            categories=StaticStore(categories, fail=categories_fail),
            depositors=StaticStore(depositors, fail=depositors_fail),
            notifier=notifier,
            navigator=navigator,
            bill_id=bill_id,
            path=path,
            today=date(2024, 1, 1),
            **options,
        )

    return _make
