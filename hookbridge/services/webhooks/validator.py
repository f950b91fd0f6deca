"""
Webhook validation: signature check, event classification, allow-listing.
"""

import logging
from typing import Any

from hookbridge.core.exceptions import HookbridgeError
from hookbridge.models.contracts.webhooks import WebhookConfig
from hookbridge.models.enums import SignatureMethod
from hookbridge.services.webhooks.protocol import WebhookPayload, WebhookValidationResult
from hookbridge.services.webhooks.signatures import get_signature_validator

logger = logging.getLogger(__name__)

# Platform event-name headers, checked in order
EVENT_HEADERS = (
    "x-github-event",
    "x-gitlab-event",
    "x-event-key",
    "x-event-type",
    "event-type",
)

# Body fields holding the event name, checked in order
EVENT_BODY_FIELDS = ("event_type", "type", "action", "event")


class WebhookValidator:
    """
    Validates inbound webhook payloads against an integration's config.

    Checks run in order and stop at the first failure:
    1. Required payload data present
    2. Signature (only when a secret is configured and a signature was sent)
    3. Event classification
    4. Event allow-list
    """

    def validate(self, payload: WebhookPayload, config: WebhookConfig) -> WebhookValidationResult:
        try:
            # Empty objects and lists are valid bodies (e.g. ping events).
            if payload.body in (None, "", b"") or payload.headers is None:
                return WebhookValidationResult(
                    is_valid=False,
                    error="Missing required payload data",
                )

            # A configured secret with no signature on the request is let through.
            if config.secret and payload.signature:
                validator = get_signature_validator(config.signature_method)
                if not validator.verify(payload.raw_body, payload.signature, config.secret):
                    logger.warning(
                        "Webhook signature mismatch",
                        extra={"endpoint": config.endpoint},
                    )
                    return WebhookValidationResult(
                        is_valid=False,
                        error="Invalid signature",
                    )

            event = self.extract_event_type(payload)

            if config.events and event and event not in config.events:
                return WebhookValidationResult(
                    is_valid=False,
                    error=f"Unsupported event type: {event}",
                )

            return WebhookValidationResult(is_valid=True, event=event)

        except HookbridgeError as e:
            return WebhookValidationResult(
                is_valid=False,
                error=f"Validation error: {e.message}",
            )

    @staticmethod
    def extract_event_type(payload: WebhookPayload) -> str | None:
        """
        Classify a payload's event name.

        Well-known headers win; otherwise conventional body fields are used.
        """
        headers = payload.headers or {}
        for header in EVENT_HEADERS:
            event = headers.get(header)
            if event:
                return event

        body: Any = payload.body
        if isinstance(body, dict):
            for name in EVENT_BODY_FIELDS:
                value = body.get(name)
                if value:
                    return str(value)

        return None

    def generate_signature(
        self,
        payload: bytes | str,
        secret: str,
        method: SignatureMethod | str = SignatureMethod.HMAC_SHA256,
    ) -> str:
        return get_signature_validator(method).generate(payload, secret)
