"""
Webhook services for hookbridge.

This package provides:
- HMAC signature validators (sha256, sha1)
- WebhookValidator for signature/event/allow-list checks
- WebhookProcessor for handler dispatch, delivery tracking and retries
- WebhookManager, the per-integration façade
"""

from hookbridge.services.webhooks.manager import WebhookManager
from hookbridge.services.webhooks.processor import WebhookProcessor
from hookbridge.services.webhooks.protocol import (
    RetryAttempt,
    WebhookDelivery,
    WebhookHandler,
    WebhookPayload,
    WebhookProcessingResult,
    WebhookValidationResult,
)
from hookbridge.services.webhooks.signatures import (
    HmacSha1Validator,
    HmacSha256Validator,
    SignatureValidator,
    get_signature_validator,
)
from hookbridge.services.webhooks.validator import WebhookValidator

__all__ = [
    "WebhookManager",
    "WebhookProcessor",
    "WebhookValidator",
    "WebhookPayload",
    "WebhookValidationResult",
    "WebhookProcessingResult",
    "WebhookDelivery",
    "WebhookHandler",
    "RetryAttempt",
    "SignatureValidator",
    "HmacSha256Validator",
    "HmacSha1Validator",
    "get_signature_validator",
]
