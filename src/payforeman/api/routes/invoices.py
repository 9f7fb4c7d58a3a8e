"""Invoice and payment API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from payforeman.api.dependencies import ClockDep, DbSession, UserId
from payforeman.api.schemas import (
    DashboardStats,
    ErrorResponse,
    InvoiceCreate,
    InvoiceDetailResponse,
    InvoiceEnvelope,
    InvoiceListItem,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceUpdate,
    MessageResponse,
    PaymentCreate,
    PaymentEnvelope,
    PaymentResponse,
)
from payforeman.services.invoice_ledger import InvoiceLedger, PaymentInput
from payforeman.services.invoice_service import InvoiceService, InvoiceView

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _list_item(view: InvoiceView) -> InvoiceListItem:
    item = InvoiceListItem.model_validate(view.invoice)
    return item.model_copy(
        update={
            "payment_status": view.payment_status,
            "project_name": view.project_name,
            "general_contractor": view.general_contractor,
        }
    )


# ============================================================================
# Invoice CRUD
# ============================================================================


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    db: DbSession,
    clock: ClockDep,
    user_id: UserId,
) -> InvoiceListResponse:
    """List a user's invoices, newest first, flagging overdue ones."""
    views = await InvoiceService(db, clock).list_for_user(user_id)
    return InvoiceListResponse(invoices=[_list_item(v) for v in views])


@router.get("/stats/dashboard", response_model=DashboardStats)
async def dashboard_stats(
    db: DbSession,
    clock: ClockDep,
    user_id: UserId,
) -> DashboardStats:
    totals = await InvoiceService(db, clock).dashboard_totals(user_id)
    return DashboardStats(
        total_outstanding=totals.total_outstanding,
        total_overdue=totals.total_overdue,
        active_projects=totals.active_projects,
    )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    db: DbSession,
    clock: ClockDep,
    invoice_id: Annotated[UUID, Path()],
) -> InvoiceDetailResponse:
    """Get an invoice with its payment history."""
    view, payments = await InvoiceService(db, clock).get_with_payments(invoice_id)
    return InvoiceDetailResponse(
        invoice=_list_item(view),
        payments=[PaymentResponse.model_validate(p) for p in payments],
    )


@router.post(
    "",
    response_model=InvoiceEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    db: DbSession,
    clock: ClockDep,
    payload: InvoiceCreate,
) -> InvoiceEnvelope:
    invoice = await InvoiceService(db, clock).create(
        payload.user_id, payload.model_dump(exclude={"user_id"})
    )
    return InvoiceEnvelope(invoice=InvoiceResponse.model_validate(invoice))


@router.put(
    "/{invoice_id}",
    response_model=InvoiceEnvelope,
    responses={404: {"model": ErrorResponse}},
)
async def update_invoice(
    db: DbSession,
    clock: ClockDep,
    invoice_id: Annotated[UUID, Path()],
    payload: InvoiceUpdate,
) -> InvoiceEnvelope:
    invoice = await InvoiceService(db, clock).update(
        invoice_id, payload.model_dump(exclude_none=True)
    )
    return InvoiceEnvelope(invoice=InvoiceResponse.model_validate(invoice))


@router.delete(
    "/{invoice_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_invoice(
    db: DbSession,
    clock: ClockDep,
    invoice_id: Annotated[UUID, Path()],
) -> MessageResponse:
    await InvoiceService(db, clock).delete(invoice_id)
    return MessageResponse(message="Invoice deleted successfully")


# ============================================================================
# Payments
# ============================================================================


@router.post(
    "/{invoice_id}/payments",
    response_model=PaymentEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_payment(
    db: DbSession,
    invoice_id: Annotated[UUID, Path()],
    payload: PaymentCreate,
) -> PaymentEnvelope:
    """Record a payment and move the invoice balance."""
    posting = await InvoiceLedger(db).record_payment(
        invoice_id, PaymentInput(**payload.model_dump())
    )
    return PaymentEnvelope(payment=PaymentResponse.model_validate(posting.payment))
