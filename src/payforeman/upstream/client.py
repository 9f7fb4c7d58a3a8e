"""HTTP client for the hosted platform services."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from payforeman.config import UpstreamSettings
from payforeman.errors import UpstreamError

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {502, 503, 504}


class PlatformClient:
    """Thin JSON client over httpx with a bounded timeout.

    Every call is attempted once, except GETs, which are idempotent and
    retried with exponential backoff on transport errors, timeouts and
    gateway failures.
    """

    service_name = "Platform"

    def __init__(
        self,
        base_url: str,
        settings: UpstreamSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self.http = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(settings.timeout_seconds),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def get_json(self, path: str, *, auth_token: str | None = None) -> Any:
        attempts = self.settings.read_retry_attempts
        for attempt in range(1, attempts + 1):
            try:
                response = await self.http.get(
                    path, headers=self.settings.headers(auth_token)
                )
            except httpx.TransportError as exc:
                if attempt == attempts:
                    raise self._transport_error(path, exc) from exc
                logger.warning(
                    "%s GET %s failed (%s), attempt %d/%d",
                    self.service_name, path, type(exc).__name__, attempt, attempts,
                )
            else:
                if response.status_code not in _RETRYABLE_STATUS or attempt == attempts:
                    return self._decode(path, response)
                logger.warning(
                    "%s GET %s returned %d, attempt %d/%d",
                    self.service_name, path, response.status_code, attempt, attempts,
                )
            await asyncio.sleep(self.settings.retry_backoff_seconds * 2 ** (attempt - 1))

        raise AssertionError("unreachable")

    async def post_json(
        self,
        path: str,
        payload: dict[str, Any],
        *,
        auth_token: str | None = None,
    ) -> Any:
        try:
            response = await self.http.post(
                path, json=payload, headers=self.settings.headers(auth_token)
            )
        except httpx.TransportError as exc:
            raise self._transport_error(path, exc) from exc
        return self._decode(path, response)

    def _decode(self, path: str, response: httpx.Response) -> Any:
        if response.is_error:
            logger.warning(
                "%s %s returned %d: %s",
                self.service_name, path, response.status_code, response.text[:500],
            )
            raise UpstreamError(
                self.service_name,
                f"{path} returned {response.status_code}",
                upstream_status=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                self.service_name,
                f"{path} returned a non-JSON body",
                upstream_status=response.status_code,
            ) from exc

    def _transport_error(self, path: str, exc: httpx.TransportError) -> UpstreamError:
        kind = "timed out" if isinstance(exc, httpx.TimeoutException) else "unreachable"
        logger.warning("%s %s %s: %s", self.service_name, path, kind, exc)
        return UpstreamError(self.service_name, f"{path} {kind}")
