"""Type definitions for the deadline and ledger calculations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class DeadlineType(str, Enum):
    """Deadline kinds tracked for a project."""

    PRELIMINARY_NOTICE = "preliminary_notice"
    MECHANICS_LIEN = "mechanics_lien"
    RETAINAGE_RELEASE = "retainage_release"
    PAYMENT_BOND_CLAIM = "payment_bond_claim"
    CUSTOM = "custom"


class ProjectType(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"


class DeadlineStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    """Deadline priority tiers, lowest first."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"


class PaymentStatus(str, Enum):
    """Invoice payment status.

    OVERDUE is never stored; it is reported at read time for unpaid
    invoices past their due date.
    """

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class LienRuleSpec:
    """One row of the lien rule table."""

    rule_type: str
    project_type: str
    deadline_days: int
    description: str
    trigger_event: str
    statutory_reference: str | None = None

    def __post_init__(self) -> None:
        if self.deadline_days < 0:
            raise ValueError("deadline_days must be non-negative")

    @property
    def key(self) -> tuple[str, str]:
        return (self.rule_type, self.project_type)


@dataclass(frozen=True)
class DeadlineCalculation:
    """Concrete deadline produced from a rule and a trigger date."""

    deadline_date: date
    deadline_days: int
    description: str
    trigger_event: str
    statutory_reference: str | None


@dataclass(frozen=True)
class DeadlineDraft:
    """A deadline the auto-generator wants persisted."""

    deadline_type: DeadlineType
    deadline_date: date
    trigger_date: date
    title: str
    description: str
    priority: Priority


@dataclass(frozen=True)
class PriorityResult:
    """Read-time urgency of a deadline."""

    days_remaining: int
    effective_priority: Priority
