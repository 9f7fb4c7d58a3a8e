"""LLM completion and batch job client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from payforeman.config import UpstreamSettings
from payforeman.errors import UpstreamError, ValidationError
from payforeman.upstream.client import PlatformClient

logger = logging.getLogger(__name__)

OPENAI = "openai"
ANTHROPIC = "anthropic"

# Terminal batch states that carry an error instead of results
BATCH_FAILURE_STATES = {"failed", "expired", "cancelled"}

UNEXPECTED_FORMAT_MESSAGE = (
    "Batch completed but result format is unexpected. Check the LLM Logs for details."
)
NO_RESULTS_MESSAGE = "Batch completed but no results were returned."
RESULTS_UNAVAILABLE_MESSAGE = (
    "Batch processing completed successfully, but there was an issue retrieving "
    "the results. Please check the LLM Logs in the Admin Dashboard to view your "
    "batch results, or try using real-time completion instead of batch processing."
)


def detect_provider(model: str) -> str:
    """Map a model name to the provider the platform should route it to."""
    name = model.lower()
    if "gpt" in name or "o1" in name:
        return OPENAI
    if any(token in name for token in ("claude", "sonnet", "haiku", "opus")):
        return ANTHROPIC
    raise ValidationError(
        f"Unknown model provider for model: {model}. Please use a GPT or Claude model."
    )


def extract_batch_text(results_payload: dict[str, Any]) -> str:
    """Pull the completion text out of the first batch result.

    Handles the OpenAI shape (response.body.choices[0].message.content) and
    the Anthropic shape (result.message.content[0].text).
    """
    results = results_payload.get("results") or []
    if not results:
        return NO_RESULTS_MESSAGE

    first = results[0]
    try:
        return first["response"]["body"]["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        pass
    try:
        return first["result"]["message"]["content"][0]["text"]
    except (KeyError, IndexError, TypeError):
        pass

    logger.warning("Unrecognised batch result shape: keys=%s", sorted(first))
    return UNEXPECTED_FORMAT_MESSAGE


@dataclass(frozen=True)
class Completion:
    content: str | None
    model: str | None = None
    usage: dict[str, Any] | None = None


@dataclass(frozen=True)
class BatchJob:
    batch_job_id: str
    status: str


@dataclass(frozen=True)
class BatchOutcome:
    status: str
    result: str | None = None
    error: str | None = None


@dataclass
class ChatTurn:
    role: str
    content: str

    def as_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class CompletionParams:
    model: str
    max_tokens: int | None = None
    temperature: float | None = None
    complexity_score: int = 50


class LlmClient(PlatformClient):
    """Client for the platform LLM service."""

    service_name = "LLM Service"

    @classmethod
    def from_settings(
        cls,
        settings: UpstreamSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> LlmClient:
        return cls(settings.llm_api_url, settings, transport=transport)

    async def complete(
        self,
        messages: list[ChatTurn],
        params: CompletionParams,
        *,
        auth_token: str | None = None,
    ) -> Completion:
        payload: dict[str, Any] = {
            "messages": [m.as_dict() for m in messages],
            "model": params.model,
            "providerType": detect_provider(params.model),
            "complexityScore": params.complexity_score,
        }
        if params.max_tokens is not None:
            payload["maxTokens"] = params.max_tokens
        if params.temperature is not None:
            payload["temperature"] = params.temperature

        data = await self.post_json("/v1/completion", payload, auth_token=auth_token)
        return Completion(
            content=data.get("content"),
            model=data.get("model"),
            usage=data.get("usage"),
        )

    async def submit_batch(
        self,
        prompt: str,
        params: CompletionParams,
        *,
        auth_token: str | None = None,
    ) -> BatchJob:
        provider = detect_provider(params.model)
        body: dict[str, Any] = {
            "messages": [{"role": "user", "content": prompt}],
            "model": params.model,
        }
        if params.max_tokens is not None:
            body["maxTokens"] = params.max_tokens
        # OpenAI batch models reject temperature
        if provider == ANTHROPIC and params.temperature is not None:
            body["temperature"] = params.temperature

        data = await self.post_json(
            "/v1/batch",
            {
                "providerType": provider,
                "requests": [{"customId": "batch-request-1", "body": body}],
            },
            auth_token=auth_token,
        )
        return BatchJob(batch_job_id=str(data["batchJobId"]), status=data["status"])

    async def batch_outcome(
        self,
        job_id: str,
        *,
        auth_token: str | None = None,
    ) -> BatchOutcome:
        """Poll a batch job and extract its text once it has completed."""
        data = await self.get_json(f"/v1/batch/{job_id}", auth_token=auth_token)
        status = data.get("status", "unknown")

        if status == "completed":
            try:
                results = await self.get_json(
                    f"/v1/batch/{job_id}/results", auth_token=auth_token
                )
            except UpstreamError:
                logger.warning("Batch %s completed but results could not be fetched", job_id)
                return BatchOutcome(status=status, result=RESULTS_UNAVAILABLE_MESSAGE)
            return BatchOutcome(status=status, result=extract_batch_text(results))

        if status in BATCH_FAILURE_STATES:
            return BatchOutcome(
                status=status, error=data.get("errorMessage") or f"Batch {status}"
            )

        return BatchOutcome(status=status)
