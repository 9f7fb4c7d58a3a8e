"""Collections assistant chat endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from payforeman.api.dependencies import AuthToken, ClockDep, DbSession, LlmDep, UserId
from payforeman.api.schemas import (
    ChatHistoryResponse,
    ChatMessageRequest,
    ChatMessageResponse,
    ChatReply,
    ErrorResponse,
    MessageResponse,
    SuggestActionRequest,
    SuggestActionResponse,
)
from payforeman.services.chat_service import ChatService

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/history", response_model=ChatHistoryResponse)
async def chat_history(
    db: DbSession,
    llm: LlmDep,
    clock: ClockDep,
    user_id: UserId,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> ChatHistoryResponse:
    """The user's most recent messages, oldest first."""
    messages = await ChatService(db, llm, clock).history(user_id, limit)
    return ChatHistoryResponse(
        messages=[ChatMessageResponse.model_validate(m) for m in messages]
    )


@router.post(
    "/message",
    response_model=ChatReply,
    responses={502: {"model": ErrorResponse}},
)
async def send_message(
    db: DbSession,
    llm: LlmDep,
    clock: ClockDep,
    auth_token: AuthToken,
    payload: ChatMessageRequest,
) -> ChatReply:
    reply = await ChatService(db, llm, clock).send_message(
        payload.user_id,
        payload.message,
        project_id=payload.project_id,
        invoice_id=payload.invoice_id,
        auth_token=auth_token,
    )
    return ChatReply(message=reply.message, message_id=reply.message_id)


@router.post(
    "/suggest-action",
    response_model=SuggestActionResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def suggest_action(
    db: DbSession,
    llm: LlmDep,
    clock: ClockDep,
    auth_token: AuthToken,
    payload: SuggestActionRequest,
) -> SuggestActionResponse:
    """Ask the assistant for next collection steps on an invoice."""
    suggestion = await ChatService(db, llm, clock).suggest_action(
        payload.invoice_id, auth_token=auth_token
    )
    return SuggestActionResponse(suggestion=suggestion)


@router.delete("/history", response_model=MessageResponse)
async def clear_history(
    db: DbSession,
    llm: LlmDep,
    clock: ClockDep,
    user_id: UserId,
) -> MessageResponse:
    await ChatService(db, llm, clock).clear(user_id)
    return MessageResponse(message="Chat history cleared successfully")
