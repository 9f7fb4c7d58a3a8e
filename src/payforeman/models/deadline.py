"""Lien and notice deadline model."""

from __future__ import annotations

from datetime import date
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from payforeman.models.base import Base, TimestampMixin


class Deadline(Base, TimestampMixin):
    """A dated filing obligation for one user, optionally tied to a project.

    Deleting the project detaches the deadline; it is never deleted with it.
    """

    __tablename__ = "deadlines"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    project_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
    )
    deadline_type: Mapped[str] = mapped_column(String(100), nullable=False)
    deadline_date: Mapped[date] = mapped_column(nullable=False)
    trigger_date: Mapped[date | None] = mapped_column(nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending")
    priority: Mapped[str | None] = mapped_column(String(20), nullable=True, default="normal")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_date: Mapped[date | None] = mapped_column(nullable=True)

    __table_args__ = (
        CheckConstraint(
            "deadline_type IN ('preliminary_notice', 'mechanics_lien', "
            "'retainage_release', 'payment_bond_claim', 'custom')",
            name="deadlines_type_check",
        ),
        CheckConstraint(
            "status IN ('pending', 'completed', 'cancelled')",
            name="deadlines_status_check",
        ),
        CheckConstraint(
            "priority IS NULL OR priority IN ('low', 'normal', 'high', 'critical')",
            name="deadlines_priority_check",
        ),
        CheckConstraint(
            "(status = 'completed') = (completed_date IS NOT NULL)",
            name="deadlines_completed_date_check",
        ),
        Index("idx_deadlines_user_id", "user_id"),
        Index("idx_deadlines_date", "deadline_date"),
        Index("idx_deadlines_status", "status"),
    )
