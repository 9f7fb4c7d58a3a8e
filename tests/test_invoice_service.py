"""Tests for invoice CRUD, the overdue overlay and dashboard totals."""

from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from payforeman.errors import ValidationError
from payforeman.models import ChatMessage, Deadline, Invoice, Payment, Project
from payforeman.services.invoice_ledger import InvoiceLedger, InvoiceNotFoundError, PaymentInput
from payforeman.services.invoice_service import InvoiceService
from payforeman.services.project_service import ProjectNotFoundError, ProjectService

from .conftest import OTHER_USER_ID, TODAY, USER_ID


def invoice_fields(**overrides) -> dict:
    fields = {
        "invoice_number": "INV-100",
        "invoice_date": date(2026, 2, 1),
        "due_date": date(2026, 4, 1),
        "amount": Decimal("10000.00"),
        "retainage_percent": Decimal("10"),
    }
    fields.update(overrides)
    return fields


class TestCreateAndUpdate:
    """Test retainage and status bookkeeping on writes."""

    async def test_create_computes_retainage(self, session, clock):
        invoice = await InvoiceService(session, clock).create(USER_ID, invoice_fields())

        assert invoice.retainage_amount == Decimal("1000.00")
        assert invoice.amount_paid == Decimal("0")
        assert invoice.payment_status == "pending"

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1.00")])
    async def test_create_rejects_non_positive_amount(self, session, clock, amount):
        with pytest.raises(ValidationError, match="greater than zero"):
            await InvoiceService(session, clock).create(USER_ID, invoice_fields(amount=amount))

        count = await session.scalar(select(func.count()).select_from(Invoice))
        assert count == 0

    async def test_update_rejects_zero_amount(self, session, clock):
        service = InvoiceService(session, clock)
        invoice = await service.create(USER_ID, invoice_fields())

        with pytest.raises(ValidationError):
            await service.update(invoice.id, {"amount": Decimal("0")})

        stored = await session.get(Invoice, invoice.id, populate_existing=True)
        assert stored.amount == Decimal("10000.00")
        assert stored.payment_status == "pending"

    async def test_update_percent_uses_stored_amount(self, session, clock):
        service = InvoiceService(session, clock)
        invoice = await service.create(USER_ID, invoice_fields())

        updated = await service.update(invoice.id, {"retainage_percent": Decimal("5")})

        assert updated.retainage_amount == Decimal("500.00")

    async def test_update_amount_uses_stored_percent(self, session, clock):
        service = InvoiceService(session, clock)
        invoice = await service.create(USER_ID, invoice_fields())

        updated = await service.update(invoice.id, {"amount": Decimal("8000.00")})

        assert updated.retainage_amount == Decimal("800.00")

    async def test_unrelated_update_keeps_retainage(self, session, clock):
        service = InvoiceService(session, clock)
        invoice = await service.create(USER_ID, invoice_fields())

        updated = await service.update(invoice.id, {"notes": "sent reminder"})

        assert updated.retainage_amount == Decimal("1000.00")
        assert updated.notes == "sent reminder"

    async def test_amount_change_rederives_status(self, session, clock, make_invoice):
        """Raising the amount of a paid invoice reopens it as partial."""
        invoice = await make_invoice(amount=Decimal("1000.00"))
        await InvoiceLedger(session).record_payment(
            invoice.id, PaymentInput(payment_date=date(2026, 3, 1), amount=Decimal("1000.00"))
        )
        service = InvoiceService(session, clock)

        reopened = await service.update(invoice.id, {"amount": Decimal("1500.00")})
        assert reopened.payment_status == "partial"
        assert reopened.paid_date is None

        settled = await service.update(invoice.id, {"amount": Decimal("900.00")})
        assert settled.payment_status == "paid"
        assert settled.paid_date == TODAY

    async def test_update_unknown_invoice(self, session, clock, make_invoice):
        invoice = await make_invoice()
        await InvoiceService(session, clock).delete(invoice.id)

        with pytest.raises(InvoiceNotFoundError):
            await InvoiceService(session, clock).update(invoice.id, {"notes": "x"})

    async def test_delete_removes_payments(self, session, clock, make_invoice):
        invoice = await make_invoice()
        await InvoiceLedger(session).record_payment(
            invoice.id, PaymentInput(payment_date=date(2026, 3, 1), amount=Decimal("10.00"))
        )

        await InvoiceService(session, clock).delete(invoice.id)

        count = await session.scalar(select(func.count()).select_from(Payment))
        assert count == 0


class TestOverdueOverlay:
    """Test that overdue is reported but never stored."""

    async def test_list_reports_overdue(self, session, clock, make_invoice):
        past_due = await make_invoice(due_date=TODAY - timedelta(days=1))
        await make_invoice(due_date=TODAY + timedelta(days=1))
        await make_invoice(due_date=TODAY - timedelta(days=30), payment_status="paid")

        views = await InvoiceService(session, clock).list_for_user(USER_ID)

        statuses = {v.invoice.id: v.payment_status for v in views}
        assert statuses[past_due.id] == "overdue"
        assert sorted(statuses.values()) == ["overdue", "paid", "pending"]

        stored = await session.scalar(
            select(Invoice.payment_status).where(Invoice.id == past_due.id)
        )
        assert stored == "pending"

    async def test_get_with_payments(self, session, clock, make_invoice, project):
        invoice = await make_invoice(project_id=project.id, due_date=TODAY - timedelta(days=5))
        await InvoiceLedger(session).record_payment(
            invoice.id, PaymentInput(payment_date=date(2026, 3, 2), amount=Decimal("250.00"))
        )

        view, payments = await InvoiceService(session, clock).get_with_payments(invoice.id)

        assert view.payment_status == "overdue"
        assert view.project_name == "Riverside Lofts"
        assert [p.amount for p in payments] == [Decimal("250.00")]


class TestDashboardTotals:
    async def test_totals(self, session, clock, make_invoice, project):
        await make_invoice(amount=Decimal("1000.00"), amount_paid=Decimal("250.00"),
                           payment_status="partial", due_date=TODAY - timedelta(days=3))
        await make_invoice(amount=Decimal("500.00"), due_date=TODAY + timedelta(days=3))
        await make_invoice(amount=Decimal("700.00"), amount_paid=Decimal("700.00"),
                           payment_status="paid", due_date=TODAY - timedelta(days=9))
        await make_invoice(user_id=OTHER_USER_ID, amount=Decimal("999.00"))

        totals = await InvoiceService(session, clock).dashboard_totals(USER_ID)

        assert totals.total_outstanding == Decimal("1250.00")
        assert totals.total_overdue == Decimal("750.00")
        assert totals.active_projects == 1

    async def test_empty(self, session, clock):
        totals = await InvoiceService(session, clock).dashboard_totals(USER_ID)

        assert totals.total_outstanding == Decimal("0.00")
        assert totals.total_overdue == Decimal("0.00")
        assert totals.active_projects == 0


class TestProjectService:
    """Test project CRUD and detach-on-delete."""

    async def test_list_is_scoped_to_user(self, session, project):
        service = ProjectService(session)
        await service.create(OTHER_USER_ID, {"project_name": "Other", "general_contractor": "GC"})

        projects = await service.list_for_user(USER_ID)

        assert [p.id for p in projects] == [project.id]

    async def test_create_defaults(self, session):
        project = await ProjectService(session).create(
            USER_ID, {"project_name": "Depot", "general_contractor": "GC"}
        )

        assert project.project_state == "CO"
        assert project.project_status == "active"

    async def test_update_is_partial(self, session, project):
        updated = await ProjectService(session).update(project.id, {"project_status": "on_hold"})

        assert updated.project_status == "on_hold"
        assert updated.project_name == "Riverside Lofts"

    async def test_delete_detaches_children(self, session, project, make_invoice):
        invoice = await make_invoice(project_id=project.id)
        deadline = Deadline(
            user_id=USER_ID,
            project_id=project.id,
            deadline_type="custom",
            deadline_date=TODAY,
            title="Walkthrough",
        )
        message = ChatMessage(user_id=USER_ID, message="hi", role="user", project_id=project.id)
        session.add_all([deadline, message])
        await session.commit()

        await ProjectService(session).delete(project.id)

        for model, row_id in ((Invoice, invoice.id), (Deadline, deadline.id), (ChatMessage, message.id)):
            project_id = await session.scalar(select(model.project_id).where(model.id == row_id))
            assert project_id is None
        assert await session.get(Project, project.id, populate_existing=True) is None

    async def test_delete_unknown(self, session):
        with pytest.raises(ProjectNotFoundError):
            await ProjectService(session).delete(uuid4())
