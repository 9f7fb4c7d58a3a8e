"""Pydantic schemas for API request/response models.

Request bodies and computed responses use camelCase on the wire; stored
rows (projects, deadlines, invoices, payments, chat messages) are returned
with their snake_case column names.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from payforeman.calculators.types import (
    DeadlineStatus,
    DeadlineType,
    Priority,
    ProjectType,
)


# ============================================================================
# Base schemas
# ============================================================================


class CamelModel(BaseModel):
    """Base for camelCase request and response bodies."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )


class RowModel(BaseModel):
    """Base for responses built from ORM rows."""

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str


class MessageResponse(BaseModel):
    message: str


# ============================================================================
# Project schemas
# ============================================================================


class ProjectCreate(CamelModel):
    """Schema for creating a project."""

    user_id: UUID
    project_name: str = Field(min_length=1, max_length=255)
    general_contractor: str = Field(min_length=1, max_length=255)
    project_address: str | None = None
    project_city: str | None = None
    project_state: str = Field(default="CO", max_length=2)
    project_type: ProjectType | None = None
    work_start_date: date | None = None
    work_end_date: date | None = None
    notes: str | None = None


class ProjectUpdate(CamelModel):
    """Partial project update; omitted or null fields are left unchanged."""

    project_name: str | None = Field(default=None, min_length=1, max_length=255)
    general_contractor: str | None = Field(default=None, min_length=1, max_length=255)
    project_address: str | None = None
    project_city: str | None = None
    project_state: str | None = Field(default=None, max_length=2)
    project_type: ProjectType | None = None
    work_start_date: date | None = None
    work_end_date: date | None = None
    project_status: str | None = Field(
        default=None, pattern="^(active|completed|on_hold)$"
    )
    notes: str | None = None


class ProjectResponse(RowModel):
    id: UUID
    user_id: UUID
    project_name: str
    general_contractor: str
    project_address: str | None = None
    project_city: str | None = None
    project_state: str
    project_type: str | None = None
    work_start_date: date | None = None
    work_end_date: date | None = None
    project_status: str
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class ProjectEnvelope(BaseModel):
    project: ProjectResponse


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]


# ============================================================================
# Deadline schemas
# ============================================================================


class DeadlineCreate(CamelModel):
    """Schema for creating a deadline by hand."""

    user_id: UUID
    project_id: UUID | None = None
    deadline_type: DeadlineType
    deadline_date: date
    trigger_date: date | None = None
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    priority: Priority = Priority.NORMAL
    notes: str | None = None


class DeadlineUpdate(CamelModel):
    """Partial deadline update; omitted or null fields are left unchanged."""

    deadline_date: date | None = None
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: DeadlineStatus | None = None
    priority: Priority | None = None
    notes: str | None = None
    completed_date: date | None = None


class DeadlineCalculateRequest(CamelModel):
    """Types are free text; pairs without a seeded rule are a 404, not a 400."""

    deadline_type: str = Field(min_length=1)
    trigger_date: date
    project_type: str = Field(default=ProjectType.PRIVATE.value, min_length=1)


class DeadlineCalculateResponse(CamelModel):
    deadline_date: date
    deadline_days: int
    description: str
    trigger_event: str
    statutory_reference: str | None = None


class AutoCreateRequest(CamelModel):
    user_id: UUID
    project_id: UUID
    work_start_date: date | None = None
    work_end_date: date | None = None
    project_type: ProjectType | None = None


class DeadlineResponse(RowModel):
    id: UUID
    user_id: UUID
    project_id: UUID | None = None
    deadline_type: str
    deadline_date: date
    trigger_date: date | None = None
    title: str
    description: str | None = None
    status: str
    priority: str | None = None
    notes: str | None = None
    completed_date: date | None = None
    created_at: datetime
    updated_at: datetime


class DeadlineListItem(DeadlineResponse):
    """Deadline with project context and read-time urgency."""

    project_name: str | None = None
    general_contractor: str | None = None
    days_remaining: int | None = None
    calculated_priority: str | None = None


class DeadlineEnvelope(BaseModel):
    deadline: DeadlineResponse


class DeadlineListResponse(BaseModel):
    deadlines: list[DeadlineListItem]


class DeadlineBatchResponse(BaseModel):
    deadlines: list[DeadlineResponse]


# ============================================================================
# Invoice schemas
# ============================================================================


class InvoiceCreate(CamelModel):
    """Schema for creating an invoice."""

    user_id: UUID
    project_id: UUID | None = None
    invoice_number: str = Field(min_length=1, max_length=100)
    invoice_date: date
    due_date: date
    amount: Decimal = Field(gt=0, decimal_places=2)
    retainage_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    description: str | None = None
    notes: str | None = None


class InvoiceUpdate(CamelModel):
    """Partial invoice update; omitted or null fields are left unchanged.

    Payment status is not accepted here: it only moves through recorded
    payments or an amount change.
    """

    invoice_number: str | None = Field(default=None, min_length=1, max_length=100)
    invoice_date: date | None = None
    due_date: date | None = None
    amount: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    retainage_percent: Decimal | None = Field(default=None, ge=0, le=100)
    description: str | None = None
    notes: str | None = None


class InvoiceResponse(RowModel):
    id: UUID
    user_id: UUID
    project_id: UUID | None = None
    invoice_number: str
    invoice_date: date
    due_date: date
    amount: Decimal
    retainage_percent: Decimal
    retainage_amount: Decimal
    amount_paid: Decimal
    payment_status: str
    paid_date: date | None = None
    description: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class InvoiceListItem(InvoiceResponse):
    project_name: str | None = None
    general_contractor: str | None = None


class PaymentCreate(CamelModel):
    payment_date: date
    amount: Decimal = Field(decimal_places=2)
    payment_method: str | None = Field(default=None, max_length=50)
    check_number: str | None = Field(default=None, max_length=100)
    notes: str | None = None


class PaymentResponse(RowModel):
    id: UUID
    invoice_id: UUID
    payment_date: date
    amount: Decimal
    payment_method: str | None = None
    check_number: str | None = None
    notes: str | None = None
    created_at: datetime


class PaymentEnvelope(BaseModel):
    payment: PaymentResponse


class InvoiceEnvelope(BaseModel):
    invoice: InvoiceResponse


class InvoiceDetailResponse(BaseModel):
    invoice: InvoiceListItem
    payments: list[PaymentResponse]


class InvoiceListResponse(BaseModel):
    invoices: list[InvoiceListItem]


class DashboardStats(CamelModel):
    total_outstanding: Decimal
    total_overdue: Decimal
    active_projects: int


# ============================================================================
# Chat and LLM schemas
# ============================================================================


class ChatMessageResponse(RowModel):
    id: UUID
    user_id: UUID
    message: str
    role: str
    project_id: UUID | None = None
    invoice_id: UUID | None = None
    created_at: datetime


class ChatHistoryResponse(BaseModel):
    messages: list[ChatMessageResponse]


class ChatMessageRequest(CamelModel):
    user_id: UUID
    message: str = Field(min_length=1)
    project_id: UUID | None = None
    invoice_id: UUID | None = None


class ChatReply(CamelModel):
    message: str
    message_id: UUID


class SuggestActionRequest(CamelModel):
    user_id: UUID
    invoice_id: UUID


class SuggestActionResponse(BaseModel):
    suggestion: str


class CompletionRequest(CamelModel):
    prompt: str = Field(min_length=1)
    model: str
    max_tokens: int | None = Field(default=None, gt=0)
    temperature: float | None = Field(default=None, ge=0, le=2)


class CompletionResponse(BaseModel):
    completion: str | None = None
    model: str | None = None
    usage: dict[str, Any] | None = None


class BatchSubmitResponse(CamelModel):
    batch_job_id: str
    status: str


class BatchStatusResponse(BaseModel):
    status: str
    result: str | None = None
    error: str | None = None
