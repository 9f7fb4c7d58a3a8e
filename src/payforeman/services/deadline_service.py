"""Deadline tracking: listing with read-time priority, CRUD and auto-creation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from payforeman.calculators.auto_generator import DeadlineAutoGenerator
from payforeman.calculators.clock import Clock
from payforeman.calculators.deadline_calculator import DeadlineCalculator
from payforeman.calculators.lien_rules import LienRuleTable
from payforeman.calculators.priority import derive_priority
from payforeman.calculators.types import (
    DeadlineCalculation,
    DeadlineStatus,
    PriorityResult,
    ProjectType,
)
from payforeman.database import transaction
from payforeman.errors import NotFoundError, ValidationError
from payforeman.models import Deadline, Project
from payforeman.services.project_service import ProjectService

logger = logging.getLogger(__name__)

UPCOMING_WINDOW_DAYS = 30
UPCOMING_LIMIT = 10


class DeadlineNotFoundError(NotFoundError):
    def __init__(self, deadline_id: UUID):
        self.deadline_id = deadline_id
        super().__init__(f"Deadline {deadline_id} not found")


@dataclass(frozen=True)
class DeadlineView:
    """A deadline as listed: the row, its project context and urgency."""

    deadline: Deadline
    project_name: str | None
    general_contractor: str | None
    urgency: PriorityResult | None = None


class DeadlineService:
    """Service for a user's lien and notice deadlines.

    days_remaining and the calculated priority are derived from the
    injected clock on every read and never written back.
    """

    def __init__(self, session: AsyncSession, clock: Clock):
        self.session = session
        self.clock = clock

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_for_user(
        self,
        user_id: UUID,
        status: DeadlineStatus | str | None = None,
    ) -> list[DeadlineView]:
        query = self._with_project().where(Deadline.user_id == user_id)
        if status:
            query = query.where(Deadline.status == DeadlineStatus(status).value)
        query = query.order_by(Deadline.deadline_date.asc())

        today = self.clock.today()
        result = await self.session.execute(query)
        return [
            DeadlineView(
                deadline=deadline,
                project_name=project_name,
                general_contractor=general_contractor,
                urgency=derive_priority(deadline.deadline_date, deadline.priority, today),
            )
            for deadline, project_name, general_contractor in result.all()
        ]

    async def upcoming(self, user_id: UUID) -> list[DeadlineView]:
        """Pending deadlines falling within the next 30 days, soonest first."""
        today = self.clock.today()
        result = await self.session.execute(
            self._with_project()
            .where(
                Deadline.user_id == user_id,
                Deadline.status == DeadlineStatus.PENDING.value,
                Deadline.deadline_date >= today,
                Deadline.deadline_date <= today + timedelta(days=UPCOMING_WINDOW_DAYS),
            )
            .order_by(Deadline.deadline_date.asc())
            .limit(UPCOMING_LIMIT)
        )
        return [
            DeadlineView(deadline=d, project_name=name, general_contractor=gc)
            for d, name, gc in result.all()
        ]

    async def get(self, deadline_id: UUID) -> Deadline:
        deadline = await self.session.get(Deadline, deadline_id)
        if deadline is None:
            raise DeadlineNotFoundError(deadline_id)
        return deadline

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------

    async def calculator(self) -> DeadlineCalculator:
        return DeadlineCalculator(await LienRuleTable.load(self.session))

    async def calculate(
        self,
        deadline_type: str,
        trigger_date: date,
        project_type: str = ProjectType.PRIVATE.value,
    ) -> DeadlineCalculation:
        calculator = await self.calculator()
        return calculator.calculate(deadline_type, trigger_date, project_type)

    async def auto_create(
        self,
        user_id: UUID,
        project_id: UUID,
        work_start_date: date | None = None,
        work_end_date: date | None = None,
        project_type: str | None = None,
    ) -> list[Deadline]:
        """Persist the standard deadline set for a project.

        Dates supplied by the caller take precedence over the project's
        stored work dates; the project type falls back to the project's own
        type, then private.
        """
        project = await ProjectService(self.session).get(project_id)
        generator = DeadlineAutoGenerator(await self.calculator())

        drafts = generator.plan(
            work_start_date=work_start_date or project.work_start_date,
            work_end_date=work_end_date or project.work_end_date,
            project_type=project_type or project.project_type or ProjectType.PRIVATE,
            project_name=project.project_name,
        )

        created: list[Deadline] = []
        async with transaction(self.session):
            for draft in drafts:
                deadline = Deadline(
                    user_id=user_id,
                    project_id=project_id,
                    deadline_type=draft.deadline_type.value,
                    deadline_date=draft.deadline_date,
                    trigger_date=draft.trigger_date,
                    title=draft.title,
                    description=draft.description,
                    priority=draft.priority.value,
                    status=DeadlineStatus.PENDING.value,
                )
                self.session.add(deadline)
                created.append(deadline)

        logger.info(
            "Auto-created %d deadline(s) for project %s: %s",
            len(created), project_id, [d.deadline_type for d in created],
        )
        return created

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, user_id: UUID, fields: dict[str, Any]) -> Deadline:
        deadline = Deadline(user_id=user_id, status=DeadlineStatus.PENDING.value, **fields)
        async with transaction(self.session):
            self.session.add(deadline)
        return deadline

    async def update(self, deadline_id: UUID, changes: dict[str, Any]) -> Deadline:
        """Apply a partial update, keeping completed_date in step with status.

        Moving to completed stamps completed_date (supplied or today); any
        other status clears it.
        """
        async with transaction(self.session):
            deadline = await self.get(deadline_id)
            completed_date = changes.pop("completed_date", None)
            new_status = changes.get("status", deadline.status)

            for name, value in changes.items():
                setattr(deadline, name, value)

            if new_status == DeadlineStatus.COMPLETED.value:
                if completed_date is not None:
                    deadline.completed_date = completed_date
                elif deadline.completed_date is None:
                    deadline.completed_date = self.clock.today()
            elif completed_date is not None:
                raise ValidationError(
                    "completedDate can only be set on a completed deadline"
                )
            else:
                deadline.completed_date = None
        return deadline

    async def complete(self, deadline_id: UUID) -> Deadline:
        return await self.update(
            deadline_id,
            {
                "status": DeadlineStatus.COMPLETED.value,
                "completed_date": self.clock.today(),
            },
        )

    async def delete(self, deadline_id: UUID) -> None:
        async with transaction(self.session):
            result = await self.session.execute(
                delete(Deadline).where(Deadline.id == deadline_id)
            )
            if result.rowcount == 0:
                raise DeadlineNotFoundError(deadline_id)

    @staticmethod
    def _with_project():
        return select(Deadline, Project.project_name, Project.general_contractor).outerjoin(
            Project, Deadline.project_id == Project.id
        )
