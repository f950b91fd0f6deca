"""
Webhook configuration contract models.
"""

from pydantic import BaseModel, ConfigDict, Field

from hookbridge.models.enums import BackoffStrategy, SignatureMethod

DEFAULT_SIGNATURE_HEADER = "x-hub-signature-256"


class RetryPolicy(BaseModel):
    """
    Backoff policy for retrying failed deliveries or requests.

    Delays are in milliseconds. max_retries bounds the retry attempts only,
    so the total number of attempts is max_retries + 1.
    """
    max_retries: int = Field(..., ge=0, le=10)
    backoff_strategy: BackoffStrategy = BackoffStrategy.EXPONENTIAL
    base_delay: int = Field(..., ge=100, description="Base delay (ms)")
    max_delay: int = Field(..., ge=1000, description="Hard cap on any delay (ms)")

    model_config = ConfigDict(frozen=True)


class WebhookConfig(BaseModel):
    """
    Per-integration webhook binding.

    Supplied once when the integration is constructed and never mutated.
    """
    endpoint: str = Field(
        ...,
        pattern=r"^https?://",
        description="Endpoint URL the sender posts to (descriptive only)"
    )
    secret: str | None = Field(
        default=None,
        description="Shared HMAC secret; signatures are only checked when set"
    )
    events: list[str] = Field(
        default_factory=list,
        description="Accepted event names; empty accepts any event"
    )
    signature_header: str = Field(
        default=DEFAULT_SIGNATURE_HEADER,
        description="Header carrying the signature"
    )
    signature_method: SignatureMethod = SignatureMethod.HMAC_SHA256
    retry_policy: RetryPolicy | None = None

    model_config = ConfigDict(frozen=True)
