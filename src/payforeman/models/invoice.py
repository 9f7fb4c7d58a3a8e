"""Invoice and payment ledger models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from payforeman.models.base import Base, Money, TimestampMixin, utcnow


class Invoice(Base, TimestampMixin):
    """A billed amount owed by a general contractor.

    amount_paid and payment_status are only moved by the invoice ledger;
    the stored status is one of pending/partial/paid. "overdue" is a
    read-time overlay computed from due_date.
    """

    __tablename__ = "invoices"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    project_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
    )
    invoice_number: Mapped[str] = mapped_column(String(100), nullable=False)
    invoice_date: Mapped[date] = mapped_column(nullable=False)
    due_date: Mapped[date] = mapped_column(nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    retainage_percent: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )
    retainage_amount: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )
    amount_paid: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )
    payment_status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="pending"
    )
    paid_date: Mapped[date | None] = mapped_column(nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="invoices_amount_check"),
        CheckConstraint("amount_paid >= 0", name="invoices_amount_paid_check"),
        CheckConstraint(
            "retainage_percent >= 0 AND retainage_percent <= 100",
            name="invoices_retainage_percent_check",
        ),
        CheckConstraint(
            "payment_status IN ('pending', 'partial', 'paid')",
            name="invoices_payment_status_check",
        ),
        Index("idx_invoices_user_id", "user_id"),
        Index("idx_invoices_project_id", "project_id"),
        Index("idx_invoices_status", "payment_status"),
    )


class Payment(Base):
    """Append-only ledger entry against one invoice."""

    __tablename__ = "payments"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    invoice_id: Mapped[UUID] = mapped_column(
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
    )
    payment_date: Mapped[date] = mapped_column(nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    check_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="payments_amount_check"),
        Index("idx_payments_invoice_id", "invoice_id"),
    )
