"""Invoice CRUD, listing with the overdue overlay, and dashboard totals."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from payforeman.calculators.clock import Clock
from payforeman.calculators.money import (
    displayed_status,
    payment_status_for,
    retainage_amount,
    round_currency,
)
from payforeman.calculators.types import PaymentStatus
from payforeman.database import transaction
from payforeman.errors import ValidationError
from payforeman.models import Invoice, Payment, Project
from payforeman.services.invoice_ledger import InvoiceLedger, InvoiceNotFoundError


@dataclass(frozen=True)
class InvoiceView:
    """An invoice as shown to the user, with its displayed status."""

    invoice: Invoice
    payment_status: str
    project_name: str | None = None
    general_contractor: str | None = None


@dataclass(frozen=True)
class DashboardTotals:
    total_outstanding: Decimal
    total_overdue: Decimal
    active_projects: int


class InvoiceService:
    """Service for a user's invoices.

    Balances only move through InvoiceLedger; this service never writes
    amount_paid. The stored payment_status is re-derived when the invoice
    amount is edited.
    """

    def __init__(self, session: AsyncSession, clock: Clock):
        self.session = session
        self.clock = clock

    async def list_for_user(self, user_id: UUID) -> list[InvoiceView]:
        result = await self.session.execute(
            self._with_project()
            .where(Invoice.user_id == user_id)
            .order_by(Invoice.created_at.desc())
        )
        return [self._view(inv, name, gc) for inv, name, gc in result.all()]

    async def get(self, invoice_id: UUID) -> InvoiceView:
        result = await self.session.execute(
            self._with_project().where(Invoice.id == invoice_id)
        )
        row = result.one_or_none()
        if row is None:
            raise InvoiceNotFoundError(invoice_id)
        invoice, name, gc = row
        return self._view(invoice, name, gc)

    async def get_with_payments(self, invoice_id: UUID) -> tuple[InvoiceView, list[Payment]]:
        view = await self.get(invoice_id)
        payments = await InvoiceLedger(self.session).payments_for(invoice_id)
        return view, payments

    async def create(self, user_id: UUID, fields: dict[str, Any]) -> Invoice:
        amount = fields["amount"]
        _require_positive(amount)
        percent = fields.get("retainage_percent") or Decimal("0")
        invoice = Invoice(
            user_id=user_id,
            **{**fields, "retainage_percent": percent},
            retainage_amount=retainage_amount(amount, percent),
            amount_paid=Decimal("0"),
            payment_status=payment_status_for(amount, Decimal("0")).value,
        )
        async with transaction(self.session):
            self.session.add(invoice)
        return invoice

    async def update(self, invoice_id: UUID, changes: dict[str, Any]) -> Invoice:
        """Apply a partial update.

        Supplying amount or retainage_percent recomputes retainage_amount
        with the stored value of whichever was omitted. Changing amount
        re-derives the stored status from amount_paid.
        """
        if "amount" in changes:
            _require_positive(changes["amount"])

        async with transaction(self.session):
            result = await self.session.execute(
                select(Invoice)
                .where(Invoice.id == invoice_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            invoice = result.scalar_one_or_none()
            if invoice is None:
                raise InvoiceNotFoundError(invoice_id)

            for name, value in changes.items():
                setattr(invoice, name, value)

            if "amount" in changes or "retainage_percent" in changes:
                invoice.retainage_amount = retainage_amount(
                    invoice.amount, invoice.retainage_percent
                )

            if "amount" in changes:
                was_paid = invoice.payment_status == PaymentStatus.PAID.value
                status = payment_status_for(invoice.amount, invoice.amount_paid)
                invoice.payment_status = status.value
                if status is PaymentStatus.PAID and not was_paid:
                    invoice.paid_date = self.clock.today()
                elif status is not PaymentStatus.PAID:
                    invoice.paid_date = None
        return invoice

    async def delete(self, invoice_id: UUID) -> None:
        async with transaction(self.session):
            await self.session.execute(delete(Payment).where(Payment.invoice_id == invoice_id))
            result = await self.session.execute(delete(Invoice).where(Invoice.id == invoice_id))
            if result.rowcount == 0:
                raise InvoiceNotFoundError(invoice_id)

    async def dashboard_totals(self, user_id: UUID) -> DashboardTotals:
        """Outstanding and overdue balances across unpaid invoices."""
        balance = func.coalesce(func.sum(Invoice.amount - Invoice.amount_paid), 0)
        unpaid = (
            Invoice.user_id == user_id,
            Invoice.payment_status != PaymentStatus.PAID.value,
        )

        outstanding = await self.session.scalar(select(balance).where(*unpaid))
        overdue = await self.session.scalar(
            select(balance).where(*unpaid, Invoice.due_date < self.clock.today())
        )
        active = await self.session.scalar(
            select(func.count())
            .select_from(Project)
            .where(Project.user_id == user_id, Project.project_status == "active")
        )

        return DashboardTotals(
            total_outstanding=round_currency(Decimal(str(outstanding or 0))),
            total_overdue=round_currency(Decimal(str(overdue or 0))),
            active_projects=active or 0,
        )

    def _view(
        self,
        invoice: Invoice,
        project_name: str | None,
        general_contractor: str | None,
    ) -> InvoiceView:
        status = displayed_status(invoice.payment_status, invoice.due_date, self.clock.today())
        return InvoiceView(
            invoice=invoice,
            payment_status=status.value,
            project_name=project_name,
            general_contractor=general_contractor,
        )

    @staticmethod
    def _with_project():
        return select(Invoice, Project.project_name, Project.general_contractor).outerjoin(
            Project, Invoice.project_id == Project.id
        )


def _require_positive(amount: Decimal | None) -> None:
    if amount is None or amount <= 0:
        raise ValidationError("Invoice amount must be greater than zero")
