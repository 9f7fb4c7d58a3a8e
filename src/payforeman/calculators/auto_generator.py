"""Standard deadline set for a project's work dates."""

from __future__ import annotations

from datetime import date

from payforeman.calculators.deadline_calculator import DeadlineCalculator
from payforeman.calculators.types import DeadlineDraft, DeadlineType, Priority, ProjectType

_TITLES = {
    DeadlineType.PRELIMINARY_NOTICE: "Preliminary Notice",
    DeadlineType.MECHANICS_LIEN: "Mechanics Lien Filing",
    DeadlineType.PAYMENT_BOND_CLAIM: "Payment Bond Claim Filing",
}


class DeadlineAutoGenerator:
    """Plans the preliminary notice and lien/bond claim deadlines.

    Offsets come from the calculator's rule table, so generated deadlines
    always agree with POST /deadlines/calculate. Planning is pure; the
    caller persists the drafts.
    """

    def __init__(self, calculator: DeadlineCalculator):
        self.calculator = calculator

    def plan(
        self,
        work_start_date: date | None,
        work_end_date: date | None,
        project_type: ProjectType | str = ProjectType.PRIVATE,
        project_name: str = "",
    ) -> list[DeadlineDraft]:
        """Return 0-2 drafts, preliminary notice first."""
        project_type = ProjectType(project_type)
        drafts: list[DeadlineDraft] = []

        if work_start_date is not None and project_type == ProjectType.PRIVATE:
            drafts.append(
                self._draft(
                    DeadlineType.PRELIMINARY_NOTICE,
                    work_start_date,
                    project_type,
                    project_name,
                    Priority.HIGH,
                )
            )

        if work_end_date is not None:
            claim_type = (
                DeadlineType.MECHANICS_LIEN
                if project_type == ProjectType.PRIVATE
                else DeadlineType.PAYMENT_BOND_CLAIM
            )
            drafts.append(
                self._draft(
                    claim_type,
                    work_end_date,
                    project_type,
                    project_name,
                    Priority.CRITICAL,
                )
            )

        return drafts

    def _draft(
        self,
        deadline_type: DeadlineType,
        trigger_date: date,
        project_type: ProjectType,
        project_name: str,
        priority: Priority,
    ) -> DeadlineDraft:
        calc = self.calculator.calculate(deadline_type, trigger_date, project_type)
        title = _TITLES[deadline_type]
        if project_name:
            title = f"{title} - {project_name}"
        return DeadlineDraft(
            deadline_type=deadline_type,
            deadline_date=calc.deadline_date,
            trigger_date=trigger_date,
            title=title,
            description=calc.description,
            priority=priority,
        )
