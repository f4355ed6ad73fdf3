"""Bill form orchestration: reference data, form state and submission"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from fastmoney.domain import form
from fastmoney.domain.amounts import parse_amount
from fastmoney.domain.exceptions import (
    BillFetchFailed,
    CategoryFetchFailed,
    DepositorFetchFailed,
    DepositorNotFound,
    InvalidAmount,
    InvalidFormState,
    InvalidInstallmentPlan,
    NotFound,
    RepositoryError,
    SubmitFailed,
    ValidationError,
)
from fastmoney.domain.installments import (
    DEFAULT_INTERVAL_DAYS,
    MAX_INSTALLMENTS,
    split_installments,
    validate_plan,
)
from fastmoney.domain.models import Bill, BillDirection, BillStatus, Category, Depositor
from fastmoney.domain.ports import BillRepository, CategoryStore, DepositorStore, Navigator, NotificationSink
from fastmoney.utils.date_utils import parse_iso_date

SUCCESS_MESSAGE = "Conta salva com sucesso!"
ERROR_TITLE = "Erro ao salvar conta"
GENERIC_ERROR = "Ocorreu um erro ao salvar a conta. Tente novamente."
INSTALLMENTS_ERROR = "Erro ao criar parcelas. Verifique os valores informados."


class FormState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class SubmitResult:
    """Outcome of a successful submit"""

    mode: str  # create | update | installments
    bills: List[Bill] = field(default_factory=list)
    redirect_to: str = "/bills"


class BillFormController:
    """
    Mediates between raw form input and the bill repository.

    One instance per form session:
        LOADING -> READY -> SUBMITTING -> SUCCESS | FAILED
    FAILED keeps the error message and accepts edits or a new submit,
    which move it back to READY. SUCCESS is terminal.
    """

    def __init__(
        self,
        bills: BillRepository,
        categories: CategoryStore,
        depositors: DepositorStore,
        notifier: NotificationSink,
        navigator: Navigator,
        bill_id: Optional[str] = None,
        path: str = "/bills",
        today: Optional[date] = None,
        interval_days: int = DEFAULT_INTERVAL_DAYS,
        max_installments: int = MAX_INSTALLMENTS,
        absorb_remainder: bool = False,
        compensate_on_failure: bool = True,
    ):
        self.bills = bills
        self.category_store = categories
        self.depositor_store = depositors
        self.notifier = notifier
        self.navigator = navigator
        self.bill_id = bill_id
        self.default_direction = BillDirection.from_path(path)
        self.interval_days = interval_days
        self.max_installments = max_installments
        self.absorb_remainder = absorb_remainder
        self.compensate_on_failure = compensate_on_failure

        self.state = FormState.LOADING
        self.draft = form.blank_draft(self.default_direction, today)
        self.bill: Optional[Bill] = None
        self.categories: List[Category] = []
        self.depositors: List[Depositor] = []
        self.error: Optional[str] = None
        self.field_errors: Dict[str, str] = {}
        self.compensated_ids: List[str] = []

    @property
    def is_edit_mode(self) -> bool:
        return bool(self.bill_id)

    @property
    def selected_depositor(self) -> Optional[Depositor]:
        return form.selected_depositor(self.draft, self.depositors)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> form.BillDraft:
        """
        Fetch reference data and seed the draft.

        Raises:
            CategoryFetchFailed / DepositorFetchFailed / BillFetchFailed: store unavailable
            NotFound: edit mode and the bill does not exist
        """
        if self.state is not FormState.LOADING:
            raise InvalidFormState(f"Form already loaded ({self.state.value})")

        try:
            self.categories = await self.category_store.list_all()
        except RepositoryError as e:
            self.error = "Falha ao carregar categorias"
            logging.error(f"Category fetch failed: {e}")
            raise CategoryFetchFailed(self.error) from e

        try:
            self.depositors = await self.depositor_store.list_all()
        except RepositoryError as e:
            self.error = "Falha ao carregar depositantes"
            logging.error(f"Depositor fetch failed: {e}")
            raise DepositorFetchFailed(self.error) from e

        if self.is_edit_mode:
            try:
                bill = await self.bills.get(self.bill_id)
            except RepositoryError as e:
                self.error = "Falha ao carregar conta"
                logging.error(f"Bill fetch failed: {e}", extra={"bill_id": self.bill_id})
                raise BillFetchFailed(self.error) from e
            if bill is None:
                self.error = "Conta não encontrada"
                raise NotFound(self.error)
            self.bill = bill
            self.draft = form.draft_from_bill(bill, self.default_direction)

        self.state = FormState.READY
        return self.draft

    # ------------------------------------------------------------------
    # Draft changes
    # ------------------------------------------------------------------

    def _ensure_editable(self) -> None:
        if self.state is FormState.FAILED:
            self.state = FormState.READY
        if self.state is not FormState.READY:
            raise InvalidFormState(f"Form cannot be changed while {self.state.value}")

    def update(self, **changes) -> form.BillDraft:
        self._ensure_editable()
        self.draft = form.edit(self.draft, **changes)
        return self.draft

    def select_category(self, category_id: Optional[str]) -> form.BillDraft:
        self._ensure_editable()
        self.draft = form.select_category(self.draft, self.categories, category_id)
        return self.draft

    def select_depositor(self, depositor_id: Optional[str]) -> form.BillDraft:
        self._ensure_editable()
        self.draft = form.select_depositor(self.draft, self.depositors, depositor_id)
        return self.draft

    def set_installments(self, enabled: bool, count: str = "", total: str = "") -> form.BillDraft:
        self._ensure_editable()
        if enabled and self.is_edit_mode:
            raise InvalidInstallmentPlan("Parcelamento não disponível na edição", field="has_installments")
        self.draft = form.set_installments(self.draft, enabled, count, total)
        return self.draft

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    def _parse_count(self, raw: str) -> int:
        try:
            return int(str(raw).strip())
        except ValueError as e:
            raise InvalidInstallmentPlan(
                f"Número de parcelas deve ser um número entre 1 e {self.max_installments}"
            ) from e

    def _parse_date(self, raw: str, field_name: str) -> Optional[date]:
        if not raw:
            return None
        try:
            return parse_iso_date(raw)
        except ValueError as e:
            message = "Data de vencimento inválida" if field_name == "due_date" else "Data inválida"
            raise ValidationError(message, field=field_name) from e

    def _resolve_category(self) -> form.BillDraft:
        """Re-derive the category name from the fetched list"""
        draft = self.draft
        if not draft.category_id:
            return replace(draft, category="")
        category = next((c for c in self.categories if c.id == draft.category_id), None)
        if category is None:
            logging.warning(f"Category {draft.category_id} no longer exists, clearing it from the bill")
            return replace(draft, category_id=None, category="")
        return replace(draft, category=category.name)

    def _build_bill(self, draft: form.BillDraft, depositor: Depositor, amount: Decimal, due: date) -> Bill:
        return Bill(
            id=self.bill_id,
            vendor_name=depositor.name,
            amount=amount,
            due_date=due,
            payment_date=self._parse_date(draft.payment_date, "payment_date"),
            status=BillStatus(draft.status),
            direction=BillDirection(draft.direction),
            depositor_id=depositor.id,
            category_id=draft.category_id,
            category=draft.category,
            notes=draft.notes or None,
            invoice_number=draft.invoice_number or None,
        )

    def _validate(self, draft: form.BillDraft) -> tuple:
        """Parse amounts, dates and the installment plan; raises ValidationError"""
        due = self._parse_date(draft.due_date, "due_date")
        if due is None:
            raise ValidationError("Data de vencimento inválida", field="due_date")
        self._parse_date(draft.payment_date, "payment_date")

        if draft.has_installments and not self.is_edit_mode:
            count = self._parse_count(draft.installments_count)
            try:
                total = parse_amount(draft.installments_total)
            except InvalidAmount as e:
                raise InvalidInstallmentPlan(
                    "Valor total deve ser um número maior que zero", field="installments_total"
                ) from e
            validate_plan(total, count, self.max_installments)
            return due, (total, count)

        amount = parse_amount(draft.amount)
        if amount <= 0:
            raise InvalidAmount("O valor deve ser um número maior que zero")
        return due, amount

    def _fail(self, message: str) -> None:
        self.state = FormState.FAILED
        self.error = message
        self.notifier.notify("error", ERROR_TITLE, message)

    async def submit(self) -> SubmitResult:
        """
        Validate the draft and write it.

        Raises:
            ValidationError (InvalidAmount, InvalidInstallmentPlan): field-level,
                nothing written, state stays READY
            DepositorNotFound: nothing written, state FAILED
            SubmitFailed: store or unexpected failure, state FAILED
        """
        self._ensure_editable()
        self.error = None
        self.field_errors = {}
        self.compensated_ids = []

        draft = self.draft
        try:
            due, payload = self._validate(draft)
        except ValidationError as e:
            self.field_errors[e.field] = e.message
            raise

        depositor = form.selected_depositor(draft, self.depositors)
        if depositor is None:
            self._fail("Depositante não encontrado")
            raise DepositorNotFound(self.error)

        draft = self._resolve_category()
        self.draft = draft
        self.state = FormState.SUBMITTING

        try:
            if isinstance(payload, tuple):
                total, count = payload
                plan = split_installments(
                    total,
                    count,
                    due,
                    counterparty=depositor.name,
                    notes=draft.notes or None,
                    interval_days=self.interval_days,
                    absorb_remainder=self.absorb_remainder,
                    max_count=self.max_installments,
                )
                result = await self._create_installments(draft, depositor, plan)
            else:
                result = await self._save_single(draft, depositor, payload, due)
        except SubmitFailed as e:
            self._fail(str(e))
            raise
        except Exception as e:
            logging.exception(f"Unexpected error while saving bill: {e}")
            self._fail(GENERIC_ERROR)
            raise SubmitFailed(GENERIC_ERROR) from e

        self.state = FormState.SUCCESS
        self.notifier.notify("success", SUCCESS_MESSAGE)
        self.navigator.redirect(result.redirect_to)
        return result

    async def _save_single(self, draft: form.BillDraft, depositor: Depositor, amount: Decimal, due: date) -> SubmitResult:
        bill = self._build_bill(draft, depositor, amount, due)
        try:
            if self.is_edit_mode:
                saved = await self.bills.update(self.bill_id, bill)
                mode = "update"
            else:
                saved = await self.bills.create(bill)
                mode = "create"
        except (RepositoryError, NotFound) as e:
            logging.error(f"Bill save failed: {e}", extra={"bill_id": self.bill_id})
            raise SubmitFailed(GENERIC_ERROR) from e

        return SubmitResult(mode=mode, bills=[saved], redirect_to=saved.direction.list_path)

    async def _create_installments(self, draft: form.BillDraft, depositor: Depositor, plan: list) -> SubmitResult:
        records = []
        for installment in plan:
            bill = self._build_bill(draft, depositor, installment.amount, installment.due_date)
            bill.vendor_name = installment.label
            bill.notes = installment.notes
            records.append(bill)

        # All creates are dispatched before any is awaited
        outcomes = await asyncio.gather(*(self.bills.create(b) for b in records), return_exceptions=True)

        created = [o for o in outcomes if isinstance(o, Bill)]
        failures = [o for o in outcomes if isinstance(o, BaseException)]

        if failures:
            logging.error(
                f"{len(failures)} of {len(records)} installments failed",
                extra={"created_count": len(created), "failed_count": len(failures)},
            )
            if self.compensate_on_failure:
                await self._compensate(created)
            raise SubmitFailed(INSTALLMENTS_ERROR) from failures[0]

        return SubmitResult(mode="installments", bills=created, redirect_to=BillDirection(draft.direction).list_path)

    async def _compensate(self, created: List[Bill]) -> None:
        """Delete installments that were persisted before the batch failed"""
        ids = [b.id for b in created if b.id]
        outcomes = await asyncio.gather(*(self.bills.delete(i) for i in ids), return_exceptions=True)
        for bill_id, outcome in zip(ids, outcomes):
            if isinstance(outcome, BaseException):
                logging.error(f"Compensating delete failed for bill {bill_id}: {outcome}")
            else:
                self.compensated_ids.append(bill_id)
