"""Colorado lien law rule table."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payforeman.calculators.types import LienRuleSpec
from payforeman.models import LienRule


COLORADO_LIEN_RULES: tuple[LienRuleSpec, ...] = (
    LienRuleSpec(
        rule_type="preliminary_notice",
        project_type="private",
        deadline_days=10,
        description=(
            "Preliminary notice must be sent within 10 days of first "
            "furnishing labor or materials"
        ),
        trigger_event="first_work_date",
        statutory_reference="C.R.S. § 38-22-109",
    ),
    LienRuleSpec(
        rule_type="mechanics_lien",
        project_type="private",
        deadline_days=120,
        description=(
            "Mechanics lien must be filed within 4 months (120 days) from the "
            "last day labor or materials were furnished"
        ),
        trigger_event="last_work_date",
        statutory_reference="C.R.S. § 38-22-109",
    ),
    LienRuleSpec(
        rule_type="mechanics_lien",
        project_type="public",
        deadline_days=120,
        description="Payment bond claim must be made within 4 months from last furnishing",
        trigger_event="last_work_date",
        statutory_reference="C.R.S. § 38-26-107",
    ),
    LienRuleSpec(
        rule_type="payment_bond_claim",
        project_type="public",
        deadline_days=120,
        description="Payment bond claim must be made within 4 months from last furnishing",
        trigger_event="last_work_date",
        statutory_reference="C.R.S. § 38-26-107",
    ),
    LienRuleSpec(
        rule_type="retainage_release",
        project_type="private",
        deadline_days=60,
        description="Retainage typically released 30-60 days after project completion",
        trigger_event="project_completion",
        statutory_reference="Contract Terms",
    ),
)


class LienRuleTable:
    """Immutable lookup of rules keyed by (rule_type, project_type)."""

    def __init__(self, rules: Iterable[LienRuleSpec]):
        table: dict[tuple[str, str], LienRuleSpec] = {}
        for rule in rules:
            if rule.key in table:
                raise ValueError(f"Duplicate lien rule for {rule.key}")
            table[rule.key] = rule
        self._rules = table

    @classmethod
    def colorado(cls) -> LienRuleTable:
        return cls(COLORADO_LIEN_RULES)

    @classmethod
    def from_rows(cls, rows: Iterable[LienRule]) -> LienRuleTable:
        return cls(
            LienRuleSpec(
                rule_type=row.rule_type,
                project_type=row.project_type,
                deadline_days=row.deadline_days,
                description=row.description,
                trigger_event=row.trigger_event,
                statutory_reference=row.statutory_reference,
            )
            for row in rows
        )

    @classmethod
    async def load(cls, session: AsyncSession) -> LienRuleTable:
        """Read the persisted rule table."""
        result = await session.execute(select(LienRule))
        return cls.from_rows(result.scalars().all())

    def get(self, rule_type: str, project_type: str) -> LienRuleSpec | None:
        return self._rules.get((rule_type, project_type))

    def __iter__(self) -> Iterator[LienRuleSpec]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)
