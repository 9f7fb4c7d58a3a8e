"""ORM models."""

from payforeman.models.base import Base, Money, TimestampMixin
from payforeman.models.chat import ChatMessage
from payforeman.models.deadline import Deadline
from payforeman.models.invoice import Invoice, Payment
from payforeman.models.lien_rule import LienRule
from payforeman.models.project import Project

__all__ = [
    "Base",
    "Money",
    "TimestampMixin",
    "ChatMessage",
    "Deadline",
    "Invoice",
    "Payment",
    "LienRule",
    "Project",
]
