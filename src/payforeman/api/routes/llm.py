"""LLM completion and batch job endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path

from payforeman.api.dependencies import AuthToken, LlmDep
from payforeman.api.schemas import (
    BatchStatusResponse,
    BatchSubmitResponse,
    CompletionRequest,
    CompletionResponse,
    ErrorResponse,
)
from payforeman.upstream.llm import ChatTurn, CompletionParams

router = APIRouter(prefix="/llm", tags=["llm"])


def _params(payload: CompletionRequest) -> CompletionParams:
    return CompletionParams(
        model=payload.model,
        max_tokens=payload.max_tokens,
        temperature=payload.temperature,
    )


@router.post(
    "/completion",
    response_model=CompletionResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def completion(
    llm: LlmDep,
    auth_token: AuthToken,
    payload: CompletionRequest,
) -> CompletionResponse:
    """Run a single real-time completion."""
    result = await llm.complete(
        [ChatTurn("user", payload.prompt)], _params(payload), auth_token=auth_token
    )
    return CompletionResponse(completion=result.content, model=result.model, usage=result.usage)


@router.post(
    "/batch",
    response_model=BatchSubmitResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def submit_batch(
    llm: LlmDep,
    auth_token: AuthToken,
    payload: CompletionRequest,
) -> BatchSubmitResponse:
    job = await llm.submit_batch(payload.prompt, _params(payload), auth_token=auth_token)
    return BatchSubmitResponse(batch_job_id=job.batch_job_id, status=job.status)


@router.get(
    "/batch/{job_id}",
    response_model=BatchStatusResponse,
    responses={502: {"model": ErrorResponse}},
)
async def batch_status(
    llm: LlmDep,
    auth_token: AuthToken,
    job_id: Annotated[str, Path(min_length=1)],
) -> BatchStatusResponse:
    """Poll a batch job; completed jobs include the extracted result text."""
    outcome = await llm.batch_outcome(job_id, auth_token=auth_token)
    return BatchStatusResponse(status=outcome.status, result=outcome.result, error=outcome.error)
