"""Invoice amount arithmetic: retainage and payment status."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from payforeman.calculators.types import PaymentStatus

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")


def round_currency(amount: Decimal) -> Decimal:
    """Round to cents, half up."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def retainage_amount(amount: Decimal, retainage_percent: Decimal) -> Decimal:
    """Withheld portion of an invoice amount."""
    if retainage_percent < 0 or retainage_percent > HUNDRED:
        raise ValueError("retainage_percent must be between 0 and 100")
    return round_currency(Decimal(amount) * Decimal(retainage_percent) / HUNDRED)


def payment_status_for(amount: Decimal, amount_paid: Decimal) -> PaymentStatus:
    """Stored status from the running balance.

    amount_paid is not clamped to amount; any paid >= amount is "paid".
    """
    if amount_paid >= amount:
        return PaymentStatus.PAID
    if amount_paid > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


def displayed_status(stored_status: str, due_date: date, today: date) -> PaymentStatus:
    """Overlay "overdue" onto unpaid invoices past their due date."""
    status = PaymentStatus(stored_status)
    if status in (PaymentStatus.PENDING, PaymentStatus.PARTIAL) and due_date < today:
        return PaymentStatus.OVERDUE
    return status
