"""Statutory lien rule reference data."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payforeman.models.base import Base


class LienRule(Base):
    """Deadline rule for one (rule_type, project_type) pair.

    Seeded once by scripts/seed_lien_rules.py and read-only at runtime.
    """

    __tablename__ = "lien_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rule_type: Mapped[str] = mapped_column(String(100), nullable=False)
    project_type: Mapped[str] = mapped_column(String(20), nullable=False)
    deadline_days: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    trigger_event: Mapped[str] = mapped_column(String(255), nullable=False)
    statutory_reference: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint("rule_type", "project_type", name="lien_rules_type_unique"),
        CheckConstraint(
            "project_type IN ('private', 'public')",
            name="lien_rules_project_type_check",
        ),
        CheckConstraint("deadline_days >= 0", name="lien_rules_days_check"),
    )
