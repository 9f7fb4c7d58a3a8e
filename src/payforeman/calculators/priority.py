"""Read-time urgency for deadlines."""

from __future__ import annotations

from datetime import date

from payforeman.calculators.types import Priority, PriorityResult

# (inclusive upper bound on days remaining, tier); first match wins
PRIORITY_TIERS: tuple[tuple[int, Priority], ...] = (
    (7, Priority.CRITICAL),
    (14, Priority.HIGH),
    (30, Priority.NORMAL),
)


def auto_priority(days_remaining: int) -> Priority:
    """Tier a deadline purely by how soon it falls. Overdue is critical."""
    for upper, tier in PRIORITY_TIERS:
        if days_remaining <= upper:
            return tier
    return Priority.LOW


def derive_priority(
    deadline_date: date,
    manual_priority: Priority | str | None,
    today: date,
) -> PriorityResult:
    """Compute days remaining and the priority to display.

    A manual priority other than "normal" overrides the computed tier.
    "normal" is the column default, so it is treated as unset.
    """
    days_remaining = (deadline_date - today).days

    if manual_priority and Priority(manual_priority) != Priority.NORMAL:
        effective = Priority(manual_priority)
    else:
        effective = auto_priority(days_remaining)

    return PriorityResult(days_remaining=days_remaining, effective_priority=effective)
