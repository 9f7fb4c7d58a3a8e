"""Deadline API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from payforeman.api.dependencies import ClockDep, DbSession, UserId
from payforeman.api.schemas import (
    AutoCreateRequest,
    DeadlineBatchResponse,
    DeadlineCalculateRequest,
    DeadlineCalculateResponse,
    DeadlineCreate,
    DeadlineEnvelope,
    DeadlineListItem,
    DeadlineListResponse,
    DeadlineResponse,
    DeadlineUpdate,
    ErrorResponse,
    MessageResponse,
)
from payforeman.calculators.types import DeadlineStatus
from payforeman.services.deadline_service import DeadlineService, DeadlineView

router = APIRouter(prefix="/deadlines", tags=["deadlines"])


def _list_item(view: DeadlineView) -> DeadlineListItem:
    item = DeadlineListItem.model_validate(view.deadline)
    extra = {
        "project_name": view.project_name,
        "general_contractor": view.general_contractor,
    }
    if view.urgency is not None:
        extra["days_remaining"] = view.urgency.days_remaining
        extra["calculated_priority"] = view.urgency.effective_priority.value
    return item.model_copy(update=extra)


# ============================================================================
# Listing
# ============================================================================


@router.get("", response_model=DeadlineListResponse)
async def list_deadlines(
    db: DbSession,
    clock: ClockDep,
    user_id: UserId,
    status_filter: Annotated[DeadlineStatus | None, Query(alias="status")] = None,
) -> DeadlineListResponse:
    """List deadlines soonest first, with days remaining and priority."""
    views = await DeadlineService(db, clock).list_for_user(user_id, status_filter)
    return DeadlineListResponse(deadlines=[_list_item(v) for v in views])


@router.get("/upcoming", response_model=DeadlineListResponse)
async def upcoming_deadlines(
    db: DbSession,
    clock: ClockDep,
    user_id: UserId,
) -> DeadlineListResponse:
    """Pending deadlines due in the next 30 days."""
    views = await DeadlineService(db, clock).upcoming(user_id)
    return DeadlineListResponse(deadlines=[_list_item(v) for v in views])


# ============================================================================
# Calculation
# ============================================================================


@router.post(
    "/calculate",
    response_model=DeadlineCalculateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def calculate_deadline(
    db: DbSession,
    clock: ClockDep,
    payload: DeadlineCalculateRequest,
) -> DeadlineCalculateResponse:
    """Compute a statutory deadline from the lien rule table."""
    calc = await DeadlineService(db, clock).calculate(
        payload.deadline_type, payload.trigger_date, payload.project_type
    )
    return DeadlineCalculateResponse(
        deadline_date=calc.deadline_date,
        deadline_days=calc.deadline_days,
        description=calc.description,
        trigger_event=calc.trigger_event,
        statutory_reference=calc.statutory_reference,
    )


@router.post(
    "/auto-create",
    response_model=DeadlineBatchResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def auto_create_deadlines(
    db: DbSession,
    clock: ClockDep,
    payload: AutoCreateRequest,
) -> DeadlineBatchResponse:
    """Create the preliminary notice and lien or bond claim deadlines."""
    created = await DeadlineService(db, clock).auto_create(
        user_id=payload.user_id,
        project_id=payload.project_id,
        work_start_date=payload.work_start_date,
        work_end_date=payload.work_end_date,
        project_type=payload.project_type,
    )
    return DeadlineBatchResponse(
        deadlines=[DeadlineResponse.model_validate(d) for d in created]
    )


# ============================================================================
# Deadline CRUD
# ============================================================================


@router.post(
    "",
    response_model=DeadlineEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_deadline(
    db: DbSession,
    clock: ClockDep,
    payload: DeadlineCreate,
) -> DeadlineEnvelope:
    deadline = await DeadlineService(db, clock).create(
        payload.user_id, payload.model_dump(exclude={"user_id"})
    )
    return DeadlineEnvelope(deadline=DeadlineResponse.model_validate(deadline))


@router.put(
    "/{deadline_id}",
    response_model=DeadlineEnvelope,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_deadline(
    db: DbSession,
    clock: ClockDep,
    deadline_id: Annotated[UUID, Path()],
    payload: DeadlineUpdate,
) -> DeadlineEnvelope:
    deadline = await DeadlineService(db, clock).update(
        deadline_id, payload.model_dump(exclude_none=True)
    )
    return DeadlineEnvelope(deadline=DeadlineResponse.model_validate(deadline))


@router.post(
    "/{deadline_id}/complete",
    response_model=DeadlineEnvelope,
    responses={404: {"model": ErrorResponse}},
)
async def complete_deadline(
    db: DbSession,
    clock: ClockDep,
    deadline_id: Annotated[UUID, Path()],
) -> DeadlineEnvelope:
    deadline = await DeadlineService(db, clock).complete(deadline_id)
    return DeadlineEnvelope(deadline=DeadlineResponse.model_validate(deadline))


@router.delete(
    "/{deadline_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_deadline(
    db: DbSession,
    clock: ClockDep,
    deadline_id: Annotated[UUID, Path()],
) -> MessageResponse:
    await DeadlineService(db, clock).delete(deadline_id)
    return MessageResponse(message="Deadline deleted successfully")
