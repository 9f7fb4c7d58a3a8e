"""Statutory deadline calculation against the lien rule table."""

from __future__ import annotations

from datetime import date, timedelta

from payforeman.calculators.lien_rules import LienRuleTable
from payforeman.calculators.types import DeadlineCalculation, DeadlineType, ProjectType
from payforeman.errors import NotFoundError


class LienRuleNotFoundError(NotFoundError):
    """Raised when no rule exists for a deadline type and project type."""

    def __init__(self, deadline_type: str, project_type: str):
        self.deadline_type = deadline_type
        self.project_type = project_type
        super().__init__(
            f"No Colorado lien law rule found for deadline type '{deadline_type}' "
            f"on {project_type} projects"
        )


class DeadlineCalculator:
    """Maps a trigger date to a concrete filing deadline.

    Deadlines are plain calendar dates: trigger date plus the rule's day
    count, with no business-day or timezone adjustment.
    """

    def __init__(self, rules: LienRuleTable):
        self.rules = rules

    def calculate(
        self,
        deadline_type: DeadlineType | str,
        trigger_date: date,
        project_type: ProjectType | str = ProjectType.PRIVATE,
    ) -> DeadlineCalculation:
        """Calculate the deadline for a trigger date.

        Raises:
            LienRuleNotFoundError: If the pair has no seeded rule
        """
        deadline_type = _value(deadline_type)
        project_type = _value(project_type)

        rule = self.rules.get(deadline_type, project_type)
        if rule is None:
            raise LienRuleNotFoundError(deadline_type, project_type)

        return DeadlineCalculation(
            deadline_date=trigger_date + timedelta(days=rule.deadline_days),
            deadline_days=rule.deadline_days,
            description=rule.description,
            trigger_event=rule.trigger_event,
            statutory_reference=rule.statutory_reference,
        )


def _value(member: DeadlineType | ProjectType | str) -> str:
    return member.value if isinstance(member, (DeadlineType, ProjectType)) else member
