"""Collections assistant: chat history and LLM-backed replies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from payforeman.calculators.clock import Clock
from payforeman.database import transaction
from payforeman.models import ChatMessage, Invoice, Project
from payforeman.services.invoice_ledger import InvoiceNotFoundError
from payforeman.upstream.llm import ChatTurn, CompletionParams, LlmClient

logger = logging.getLogger(__name__)

ASSISTANT_MODEL = "claude-3-5-sonnet-20241022"
CONTEXT_MESSAGES = 10
FALLBACK_REPLY = "Sorry, I could not generate a response."
FALLBACK_SUGGESTION = "Unable to generate suggestion"

SYSTEM_PROMPT = """You are an AI Collections Specialist for PayForeman AI, specifically helping Colorado subcontractors collect payment from general contractors. You are an expert in:

1. Colorado Mechanics Lien Law (C.R.S. § 38-22-101 et seq.)
2. Construction payment collection strategies
3. Preliminary notice requirements in Colorado
4. Payment bond claims on public projects
5. Retainage management and release

Key Colorado Lien Law Facts:
- Preliminary Notice: Must be sent within 10 days of first furnishing labor or materials on private projects
- Mechanics Lien Filing: Must file within 4 months (120 days) from last day of work
- Public Projects: Payment bond claims instead of liens
- Retainage: Typically 5-10%, released after project completion

Your Role:
- Provide accurate, actionable advice on Colorado construction payment issues
- Help subcontractors understand their lien rights
- Suggest next steps for overdue payments
- Calculate deadlines based on work dates
- Explain payment terms and contract clauses
- Be professional, empathetic, and solution-focused

Always:
- Reference specific Colorado statutes when relevant
- Provide clear step-by-step guidance
- Warn about critical deadlines
- Suggest documentation to preserve lien rights
- Recommend when to consult an attorney for complex issues

Never:
- Provide legal advice (you assist, not replace attorneys)
- Guarantee outcomes
- Suggest illegal or unethical collection tactics"""

ACKNOWLEDGEMENT = (
    "Understood. I am your AI Collections Specialist for Colorado construction "
    "payment issues."
)
CHAT_ACKNOWLEDGEMENT = ACKNOWLEDGEMENT + " How can I help you today?"

ASSISTANT_PARAMS = CompletionParams(model=ASSISTANT_MODEL, max_tokens=2048, temperature=0.7)


@dataclass(frozen=True)
class AssistantReply:
    message: str
    message_id: UUID


class ChatService:
    """Stores a user's conversation and relays it to the LLM service."""

    def __init__(self, session: AsyncSession, llm: LlmClient, clock: Clock):
        self.session = session
        self.llm = llm
        self.clock = clock

    async def history(self, user_id: UUID, limit: int = 50) -> list[ChatMessage]:
        """The most recent messages, oldest first."""
        result = await self.session.execute(
            select(ChatMessage)
            .where(ChatMessage.user_id == user_id)
            .order_by(ChatMessage.created_at.desc())
            .limit(limit)
        )
        return list(reversed(result.scalars().all()))

    async def send_message(
        self,
        user_id: UUID,
        message: str,
        project_id: UUID | None = None,
        invoice_id: UUID | None = None,
        *,
        auth_token: str | None = None,
    ) -> AssistantReply:
        """Store the user's message, ask the assistant, store its answer.

        The user's message is committed before the LLM call, so it stays in
        the history even when the upstream request fails.
        """
        async with transaction(self.session):
            self.session.add(
                ChatMessage(
                    user_id=user_id,
                    message=message,
                    role="user",
                    project_id=project_id,
                    invoice_id=invoice_id,
                )
            )

        context = await self.history(user_id, limit=CONTEXT_MESSAGES)
        turns = [
            ChatTurn("user", SYSTEM_PROMPT),
            ChatTurn("assistant", CHAT_ACKNOWLEDGEMENT),
            *(ChatTurn(m.role, m.message) for m in context),
        ]
        completion = await self.llm.complete(turns, ASSISTANT_PARAMS, auth_token=auth_token)
        answer = completion.content or FALLBACK_REPLY

        reply = ChatMessage(
            user_id=user_id,
            message=answer,
            role="assistant",
            project_id=project_id,
            invoice_id=invoice_id,
        )
        async with transaction(self.session):
            self.session.add(reply)

        return AssistantReply(message=answer, message_id=reply.id)

    async def suggest_action(
        self,
        invoice_id: UUID,
        *,
        auth_token: str | None = None,
    ) -> str:
        """Ask the assistant for next collection steps on one invoice."""
        result = await self.session.execute(
            select(Invoice, Project)
            .outerjoin(Project, Invoice.project_id == Project.id)
            .where(Invoice.id == invoice_id)
        )
        row = result.one_or_none()
        if row is None:
            raise InvoiceNotFoundError(invoice_id)
        invoice, project = row

        turns = [
            ChatTurn("user", SYSTEM_PROMPT),
            ChatTurn("assistant", ACKNOWLEDGEMENT),
            ChatTurn("user", self.invoice_prompt(invoice, project)),
        ]
        completion = await self.llm.complete(turns, ASSISTANT_PARAMS, auth_token=auth_token)
        return completion.content or FALLBACK_SUGGESTION

    async def clear(self, user_id: UUID) -> int:
        async with transaction(self.session):
            result = await self.session.execute(
                delete(ChatMessage).where(ChatMessage.user_id == user_id)
            )
        logger.info("Cleared %d chat message(s) for user %s", result.rowcount, user_id)
        return result.rowcount

    def invoice_prompt(self, invoice: Invoice, project: Project | None) -> str:
        days_overdue = (self.clock.today() - invoice.due_date).days
        label = "Overdue" if days_overdue > 0 else "Until Due"

        lines = [
            "I have an invoice with the following details:",
            f"- Invoice #{invoice.invoice_number}",
            f"- Amount: ${invoice.amount}",
            f"- Amount Paid: ${invoice.amount_paid}",
            f"- Balance Due: ${invoice.amount - invoice.amount_paid}",
            f"- Due Date: {invoice.due_date.isoformat()}",
            f"- Days {label}: {abs(days_overdue)}",
            f"- Status: {invoice.payment_status}",
        ]
        if project is not None:
            lines.append(f"- General Contractor: {project.general_contractor}")
            lines.append(f"- Project: {project.project_name}")
            if project.work_start_date:
                lines.append(f"- Work Start Date: {project.work_start_date.isoformat()}")
            if project.work_end_date:
                lines.append(f"- Work End Date: {project.work_end_date.isoformat()}")
        lines.append("")
        lines.append(
            "What should I do next to collect payment? "
            "Please provide specific, actionable steps."
        )
        return "\n".join(lines)
