"""
Retry backoff shared by the webhook processor and the API client.

All delays are milliseconds.
"""

import random

from hookbridge.config import get_settings
from hookbridge.models.contracts.webhooks import RetryPolicy
from hookbridge.models.enums import BackoffStrategy

JITTER_RATIO = 0.1


def calculate_retry_delay(policy: RetryPolicy, attempt: int) -> float:
    """
    Compute the delay before a retry.

    Linear: base_delay * (attempt + 1).
    Exponential: base_delay * 2**attempt plus up to 10% positive jitter,
    drawn fresh on every call.
    Both are capped at max_delay.

    Args:
        policy: Retry policy to apply
        attempt: 0-based attempt index

    Returns:
        Delay in milliseconds
    """
    if policy.backoff_strategy == BackoffStrategy.LINEAR:
        return min(policy.base_delay * (attempt + 1), policy.max_delay)

    exponential_delay = policy.base_delay * (2 ** attempt)
    jitter = random.uniform(0, JITTER_RATIO * exponential_delay)
    return min(exponential_delay + jitter, policy.max_delay)


def default_webhook_retry_policy() -> RetryPolicy:
    """Retry policy for webhook deliveries without an explicit policy (60s cap)."""
    settings = get_settings()
    return RetryPolicy(
        max_retries=settings.webhook_max_retries,
        backoff_strategy=BackoffStrategy.EXPONENTIAL,
        base_delay=settings.webhook_base_delay_ms,
        max_delay=settings.webhook_max_delay_ms,
    )


def default_api_retry_policy() -> RetryPolicy:
    """Retry policy for API client requests without an explicit policy (30s cap)."""
    settings = get_settings()
    return RetryPolicy(
        max_retries=settings.api_max_retries,
        backoff_strategy=BackoffStrategy.EXPONENTIAL,
        base_delay=settings.api_base_delay_ms,
        max_delay=settings.api_max_delay_ms,
    )
