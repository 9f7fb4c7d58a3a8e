"""Construction project model."""

from __future__ import annotations

from datetime import date
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from payforeman.models.base import Base, TimestampMixin


class Project(Base, TimestampMixin):
    """A job a subcontractor is furnishing labor or materials on."""

    __tablename__ = "projects"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    project_name: Mapped[str] = mapped_column(String(255), nullable=False)
    general_contractor: Mapped[str] = mapped_column(String(255), nullable=False)
    project_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    project_city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    project_state: Mapped[str] = mapped_column(String(2), nullable=False, default="CO")
    project_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    work_start_date: Mapped[date | None] = mapped_column(nullable=True)
    work_end_date: Mapped[date | None] = mapped_column(nullable=True)
    project_status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="active"
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "project_type IS NULL OR project_type IN ('private', 'public')",
            name="projects_type_check",
        ),
        CheckConstraint(
            "project_status IN ('active', 'completed', 'on_hold')",
            name="projects_status_check",
        ),
        Index("idx_projects_user_id", "user_id"),
    )
