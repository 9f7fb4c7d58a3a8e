"""Project CRUD."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from payforeman.database import transaction
from payforeman.errors import NotFoundError
from payforeman.models import ChatMessage, Deadline, Invoice, Project


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: UUID):
        self.project_id = project_id
        super().__init__(f"Project {project_id} not found")


class ProjectService:
    """Service for managing a user's projects.

    Deleting a project detaches the deadlines, invoices and chat messages
    that reference it; they are never deleted with it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_user(self, user_id: UUID) -> list[Project]:
        result = await self.session.execute(
            select(Project)
            .where(Project.user_id == user_id)
            .order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, project_id: UUID) -> Project:
        project = await self.session.get(Project, project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    async def create(self, user_id: UUID, fields: dict[str, Any]) -> Project:
        project = Project(user_id=user_id, **fields)
        async with transaction(self.session):
            self.session.add(project)
        return project

    async def update(self, project_id: UUID, changes: dict[str, Any]) -> Project:
        """Apply a partial update; keys absent from changes are left as-is."""
        async with transaction(self.session):
            project = await self.get(project_id)
            for name, value in changes.items():
                setattr(project, name, value)
        return project

    async def delete(self, project_id: UUID) -> None:
        async with transaction(self.session):
            await self.get(project_id)
            for model in (Deadline, Invoice, ChatMessage):
                await self.session.execute(
                    update(model)
                    .where(model.project_id == project_id)
                    .values(project_id=None)
                    .execution_options(synchronize_session=False)
                )
            await self.session.execute(delete(Project).where(Project.id == project_id))
