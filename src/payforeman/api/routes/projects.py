"""Project API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from payforeman.api.dependencies import DbSession, UserId
from payforeman.api.schemas import (
    ErrorResponse,
    MessageResponse,
    ProjectCreate,
    ProjectEnvelope,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from payforeman.services.project_service import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=ProjectListResponse)
async def list_projects(db: DbSession, user_id: UserId) -> ProjectListResponse:
    """List a user's projects, newest first."""
    projects = await ProjectService(db).list_for_user(user_id)
    return ProjectListResponse(
        projects=[ProjectResponse.model_validate(p) for p in projects]
    )


@router.get(
    "/{project_id}",
    response_model=ProjectEnvelope,
    responses={404: {"model": ErrorResponse}},
)
async def get_project(
    db: DbSession,
    project_id: Annotated[UUID, Path()],
) -> ProjectEnvelope:
    project = await ProjectService(db).get(project_id)
    return ProjectEnvelope(project=ProjectResponse.model_validate(project))


@router.post(
    "",
    response_model=ProjectEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_project(db: DbSession, payload: ProjectCreate) -> ProjectEnvelope:
    project = await ProjectService(db).create(
        payload.user_id, payload.model_dump(exclude={"user_id"})
    )
    return ProjectEnvelope(project=ProjectResponse.model_validate(project))


@router.put(
    "/{project_id}",
    response_model=ProjectEnvelope,
    responses={404: {"model": ErrorResponse}},
)
async def update_project(
    db: DbSession,
    project_id: Annotated[UUID, Path()],
    payload: ProjectUpdate,
) -> ProjectEnvelope:
    """Update the supplied fields; omitted fields keep their stored values."""
    project = await ProjectService(db).update(
        project_id, payload.model_dump(exclude_none=True)
    )
    return ProjectEnvelope(project=ProjectResponse.model_validate(project))


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_project(
    db: DbSession,
    project_id: Annotated[UUID, Path()],
) -> MessageResponse:
    await ProjectService(db).delete(project_id)
    return MessageResponse(message="Project deleted successfully")
