"""Error taxonomy shared by services and the API layer."""

from __future__ import annotations


class PayForemanError(Exception):
    """Base class for errors that map to a client-facing HTTP status."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(PayForemanError):
    """A required field is missing or malformed."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(PayForemanError):
    """The requested rule, record or resource does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(PayForemanError):
    """A concurrent write won the race; the request is safe to retry."""

    status_code = 409
    code = "CONFLICT"


class UpstreamError(PayForemanError):
    """A hosted platform service failed, timed out or was unreachable.

    The upstream message is kept on the instance for logging only; clients
    receive a generic description.
    """

    status_code = 502
    code = "UPSTREAM_ERROR"

    def __init__(
        self,
        service: str,
        message: str,
        upstream_status: int | None = None,
    ):
        self.service = service
        self.upstream_status = upstream_status
        super().__init__(message)

    @property
    def public_message(self) -> str:
        return f"{self.service} request failed"
