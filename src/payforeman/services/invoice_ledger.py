"""Invoice payment ledger.

Recording a payment appends an immutable Payment row and moves the
invoice's running balance in the same transaction:

- amount_paid is incremented server-side (amount_paid = amount_paid + delta),
  never read-modify-written from Python, so concurrent payments cannot
  lose an update
- payment_status is derived in the same UPDATE from the new balance
- paid_date is stamped with the payment date only on the transition into paid
- over-payment is not clamped; any balance >= amount is "paid"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, and_, case, literal, select, update
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from payforeman.calculators.types import PaymentStatus
from payforeman.database import is_lock_conflict, transaction
from payforeman.errors import ConflictError, NotFoundError, ValidationError
from payforeman.models import Invoice, Payment

logger = logging.getLogger(__name__)


class InvoiceNotFoundError(NotFoundError):
    """Raised when an invoice id does not exist."""

    def __init__(self, invoice_id: UUID):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice {invoice_id} not found")


@dataclass(frozen=True)
class PaymentInput:
    """A payment as received from the client."""

    payment_date: date
    amount: Decimal
    payment_method: str | None = None
    check_number: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class LedgerPosting:
    """The appended payment and the invoice as it stands afterwards."""

    payment: Payment
    invoice: Invoice


class InvoiceLedger:
    """Posts payments against invoices."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record_payment(self, invoice_id: UUID, payment: PaymentInput) -> LedgerPosting:
        """Append a payment and update the invoice balance atomically.

        Raises:
            ValidationError: If the amount is not positive
            InvoiceNotFoundError: If the invoice does not exist
            ConflictError: If a concurrent writer held the invoice row
        """
        if payment.amount <= 0:
            raise ValidationError("Payment amount must be positive")

        try:
            async with transaction(self.session):
                await self._lock_invoice(invoice_id)

                row = Payment(
                    invoice_id=invoice_id,
                    payment_date=payment.payment_date,
                    amount=payment.amount,
                    payment_method=payment.payment_method,
                    check_number=payment.check_number,
                    notes=payment.notes,
                )
                self.session.add(row)
                await self.session.flush()

                result = await self.session.execute(
                    self._apply_payment_statement(invoice_id, payment),
                    execution_options={"synchronize_session": False},
                )
                if result.rowcount != 1:
                    # Invoice vanished between the lock and the update
                    raise ConflictError(f"Invoice {invoice_id} changed during payment")

                invoice = await self._reload(invoice_id)
        except DBAPIError as exc:
            if is_lock_conflict(exc):
                logger.warning("Payment on invoice %s lost a lock race: %s", invoice_id, exc)
                raise ConflictError(
                    f"Invoice {invoice_id} is being updated; retry the payment"
                ) from exc
            raise

        logger.info(
            "Recorded payment %s of %s on invoice %s (paid %s / %s, %s)",
            row.id, payment.amount, invoice_id,
            invoice.amount_paid, invoice.amount, invoice.payment_status,
        )
        return LedgerPosting(payment=row, invoice=invoice)

    async def payments_for(self, invoice_id: UUID) -> list[Payment]:
        """Payment history, most recent payment date first."""
        result = await self.session.execute(
            select(Payment)
            .where(Payment.invoice_id == invoice_id)
            .order_by(Payment.payment_date.desc(), Payment.created_at.desc())
        )
        return list(result.scalars().all())

    def _apply_payment_statement(self, invoice_id: UUID, payment: PaymentInput):
        new_paid = Invoice.amount_paid + payment.amount
        return (
            update(Invoice)
            .where(Invoice.id == invoice_id)
            .values(
                amount_paid=new_paid,
                payment_status=case(
                    (new_paid >= Invoice.amount, PaymentStatus.PAID.value),
                    (new_paid > 0, PaymentStatus.PARTIAL.value),
                    else_=PaymentStatus.PENDING.value,
                ),
                paid_date=case(
                    (
                        and_(
                            new_paid >= Invoice.amount,
                            Invoice.payment_status != PaymentStatus.PAID.value,
                        ),
                        literal(payment.payment_date, Date),
                    ),
                    else_=Invoice.paid_date,
                ),
            )
        )

    async def _lock_invoice(self, invoice_id: UUID) -> Invoice:
        result = await self.session.execute(
            select(Invoice).where(Invoice.id == invoice_id).with_for_update()
        )
        invoice = result.scalar_one_or_none()
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return invoice

    async def _reload(self, invoice_id: UUID) -> Invoice:
        result = await self.session.execute(
            select(Invoice)
            .where(Invoice.id == invoice_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
