"""Business logic services."""

from payforeman.services.chat_service import ChatService
from payforeman.services.deadline_service import DeadlineNotFoundError, DeadlineService
from payforeman.services.invoice_ledger import (
    InvoiceLedger,
    InvoiceNotFoundError,
    LedgerPosting,
    PaymentInput,
)
from payforeman.services.invoice_service import InvoiceService
from payforeman.services.lien_rule_seeder import seed_lien_rules
from payforeman.services.project_service import ProjectNotFoundError, ProjectService

__all__ = [
    "ChatService",
    "DeadlineNotFoundError",
    "DeadlineService",
    "InvoiceLedger",
    "InvoiceNotFoundError",
    "LedgerPosting",
    "PaymentInput",
    "InvoiceService",
    "seed_lien_rules",
    "ProjectNotFoundError",
    "ProjectService",
]
