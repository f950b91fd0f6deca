"""
Webhook value types for the hookbridge pipeline.

Defines the inbound payload envelope, validation and processing results,
and the delivery records kept by the processor.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Union

from hookbridge.models.contracts.integrations import IntegrationContext, IntegrationError
from hookbridge.models.enums import DeliveryStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class WebhookPayload:
    """
    One inbound webhook call.

    raw_body must be the exact bytes received; signatures are computed over
    it, never over a re-serialized body.
    """

    headers: dict[str, str]
    """Request headers (lowercase keys)"""

    body: Any
    """Parsed body, opaque to the pipeline"""

    raw_body: bytes | str
    """Raw request body"""

    timestamp: datetime = field(default_factory=utcnow)
    """When the call was received"""

    signature: str | None = None
    """Signature extracted from the configured header"""

    @property
    def raw_bytes(self) -> bytes:
        if isinstance(self.raw_body, bytes):
            return self.raw_body
        return self.raw_body.encode("utf-8")

    @property
    def json_body(self) -> Any:
        """Body as parsed JSON; falls back to decoding raw_body."""
        if self.body is not None and not isinstance(self.body, (bytes, str)):
            return self.body
        try:
            return json.loads(self.raw_bytes.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None


@dataclass
class WebhookValidationResult:
    """Verdict of WebhookValidator.validate()"""

    is_valid: bool
    error: str | None = None
    event: str | None = None


@dataclass
class WebhookProcessingResult:
    """
    Outcome of processing one webhook.

    Returned by handlers, by WebhookProcessor and by WebhookManager.
    """

    success: bool
    event: str | None = None
    data: Any = None
    error: IntegrationError | None = None
    should_retry: bool = False

    delivery_id: str | None = None
    """Delivery record id, filled in by the processor when a handler ran."""

    @classmethod
    def failure(
        cls,
        code: str,
        message: str,
        retryable: bool = False,
        details: Any = None,
    ) -> "WebhookProcessingResult":
        return cls(
            success=False,
            error=IntegrationError(
                code=code,
                message=message,
                retryable=retryable,
                details=details,
            ),
            should_retry=retryable,
        )


@dataclass
class RetryAttempt:
    """One processing attempt of a delivery. Append-only."""

    attempt: int
    """1-based attempt number"""

    timestamp: datetime
    error: str = ""
    next_retry: datetime | None = None


@dataclass
class WebhookDelivery:
    """
    Delivery record, kept for the lifetime of the processor.

    len(attempts) always equals the number of processing attempts made.
    """

    id: str
    url: str
    event: str
    payload: Any
    headers: dict[str, str]
    timestamp: datetime
    status: DeliveryStatus
    attempts: list[RetryAttempt] = field(default_factory=list)


WebhookHandler = Callable[
    [WebhookPayload, IntegrationContext],
    Union[Awaitable[WebhookProcessingResult], WebhookProcessingResult],
]
"""Handler for one webhook event. May be async or plain."""
