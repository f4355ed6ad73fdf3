"""Interfaces the bill form depends on"""

from typing import List, Optional, Protocol

from fastmoney.domain.models import Bill, Category, Depositor


class BillRepository(Protocol):
    async def get(self, bill_id: str) -> Optional[Bill]: ...

    async def list(self, direction: Optional[str] = None, status: Optional[str] = None) -> List[Bill]: ...

    async def create(self, bill: Bill) -> Bill: ...

    async def update(self, bill_id: str, bill: Bill) -> Bill: ...

    async def delete(self, bill_id: str) -> None: ...


class CategoryStore(Protocol):
    async def list_all(self) -> List[Category]:
        """Categories ordered by name ascending"""
        ...


class DepositorStore(Protocol):
    async def list_all(self) -> List[Depositor]: ...


class NotificationSink(Protocol):
    def notify(self, kind: str, message: str, description: Optional[str] = None) -> None: ...


class Navigator(Protocol):
    def redirect(self, path: str) -> None: ...
