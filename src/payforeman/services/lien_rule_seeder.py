"""Idempotent seeding of the lien rule reference table."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payforeman.calculators.lien_rules import COLORADO_LIEN_RULES
from payforeman.calculators.types import LienRuleSpec
from payforeman.models import LienRule


async def seed_lien_rules(
    session: AsyncSession,
    rules: Iterable[LienRuleSpec] = COLORADO_LIEN_RULES,
) -> int:
    """Insert rules whose (rule_type, project_type) is not already present.

    Existing rows are left untouched. Returns the number of rows added.
    """
    result = await session.execute(select(LienRule.rule_type, LienRule.project_type))
    existing = {(rule_type, project_type) for rule_type, project_type in result.all()}

    added = 0
    for rule in rules:
        if rule.key in existing:
            continue
        session.add(
            LienRule(
                rule_type=rule.rule_type,
                project_type=rule.project_type,
                deadline_days=rule.deadline_days,
                description=rule.description,
                trigger_event=rule.trigger_event,
                statutory_reference=rule.statutory_reference,
            )
        )
        existing.add(rule.key)
        added += 1

    await session.flush()
    return added
