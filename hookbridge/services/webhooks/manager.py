"""
Webhook Manager

Binds integration names to their webhook configuration, turns raw inbound
HTTP materials into WebhookPayloads, drives the WebhookProcessor and emits
webhook lifecycle events to integration subscribers.
"""

import logging
from typing import Any

from hookbridge.core.exceptions import HookbridgeError
from hookbridge.models.contracts.integrations import IntegrationContext
from hookbridge.models.contracts.webhooks import WebhookConfig
from hookbridge.models.enums import IntegrationEvent
from hookbridge.services.events import EventEmitter, EventHandler
from hookbridge.services.webhooks.processor import WebhookProcessor
from hookbridge.services.webhooks.protocol import (
    WebhookDelivery,
    WebhookHandler,
    WebhookPayload,
    WebhookProcessingResult,
)
from hookbridge.services.webhooks.signatures import get_signature_validator

logger = logging.getLogger(__name__)


class WebhookManager:
    """
    Façade over webhook validation, processing and delivery tracking.

    Each instance owns its configs, handlers, deliveries and subscribers.
    """

    def __init__(
        self,
        processor: WebhookProcessor | None = None,
        events: EventEmitter | None = None,
    ):
        self.processor = processor or WebhookProcessor()
        self.events = events or EventEmitter()
        self._configs: dict[str, WebhookConfig] = {}

    # ==================== CONFIGURATION ====================

    def register(self, integration_id: str, config: WebhookConfig | dict[str, Any]) -> None:
        """Register (or replace) an integration's webhook configuration."""
        if not isinstance(config, WebhookConfig):
            config = WebhookConfig.model_validate(config)
        self._configs[integration_id] = config
        logger.debug(f"Registered webhook config: {integration_id}")

    def unregister(self, integration_id: str) -> None:
        self._configs.pop(integration_id, None)

    def get_config(self, integration_id: str) -> WebhookConfig | None:
        return self._configs.get(integration_id)

    # ==================== INBOUND ====================

    async def handle_webhook(
        self,
        integration_id: str,
        headers: dict[str, str],
        body: Any,
        raw_body: bytes | str,
        context: IntegrationContext,
    ) -> WebhookProcessingResult:
        """
        Handle an incoming webhook request.

        Args:
            integration_id: Name the config was registered under
            headers: Request headers (any case)
            body: Parsed request body
            raw_body: Exact bytes received, used for signature checks
            context: Caller context passed to handlers

        Returns:
            WebhookProcessingResult; NO_CONFIG if the integration is unknown
        """
        config = self._configs.get(integration_id)
        if config is None:
            return self._no_config(integration_id)

        payload = self._build_payload(headers, body, raw_body, config)
        result = await self.processor.process(payload, config, context)
        await self._emit_result(result, context)
        return result

    async def retry_webhook(
        self,
        integration_id: str,
        delivery_id: str,
        headers: dict[str, str],
        body: Any,
        raw_body: bytes | str,
        context: IntegrationContext,
    ) -> WebhookProcessingResult:
        """Re-run a recorded delivery with the original request materials."""
        config = self._configs.get(integration_id)
        if config is None:
            return self._no_config(integration_id)

        payload = self._build_payload(headers, body, raw_body, config)
        result = await self.processor.retry(delivery_id, payload, config, context)
        await self._emit_result(result, context)
        return result

    # ==================== HANDLERS & SUBSCRIBERS ====================

    def on_webhook_event(self, event: str, handler: WebhookHandler) -> None:
        """Register a webhook handler ("*" for the catch-all)."""
        self.processor.on(event, handler)

    def off_webhook_event(self, event: str) -> None:
        self.processor.off(event)

    def on(self, event: IntegrationEvent | str, handler: EventHandler) -> None:
        """Subscribe to webhook.received / webhook.failed."""
        self.events.on(event, handler)

    def off(self, event: IntegrationEvent | str, handler: EventHandler) -> None:
        self.events.off(event, handler)

    # ==================== SIGNATURE UTILITIES ====================

    def validate_signature(self, integration_id: str, payload: bytes | str, signature: str) -> bool:
        """
        Check a signature against an integration's secret without processing.

        Returns False when there is no config or no secret.
        """
        config = self._configs.get(integration_id)
        if config is None or not config.secret:
            return False

        try:
            validator = get_signature_validator(config.signature_method)
            return validator.verify(payload, signature, config.secret)
        except HookbridgeError:
            return False

    def generate_signature(self, integration_id: str, payload: bytes | str) -> str | None:
        """
        Sign an outbound or test payload with an integration's secret.

        Returns None when there is no config or no secret.
        """
        config = self._configs.get(integration_id)
        if config is None or not config.secret:
            return None

        try:
            return get_signature_validator(config.signature_method).generate(payload, config.secret)
        except HookbridgeError:
            return None

    # ==================== DELIVERIES ====================

    def get_deliveries(self) -> list[WebhookDelivery]:
        return self.processor.get_all_deliveries()

    def get_delivery(self, delivery_id: str) -> WebhookDelivery | None:
        return self.processor.get_delivery(delivery_id)

    # ==================== INTERNALS ====================

    @staticmethod
    def normalize_headers(headers: dict[str, Any] | None) -> dict[str, str]:
        return {str(k).lower(): v for k, v in (headers or {}).items()}

    def _build_payload(
        self,
        headers: dict[str, str],
        body: Any,
        raw_body: bytes | str,
        config: WebhookConfig,
    ) -> WebhookPayload:
        normalized = self.normalize_headers(headers)
        return WebhookPayload(
            headers=normalized,
            body=body,
            raw_body=raw_body,
            signature=normalized.get(config.signature_header.lower()),
        )

    async def _emit_result(self, result: WebhookProcessingResult, context: IntegrationContext) -> None:
        if result.success:
            await self.events.emit(
                IntegrationEvent.WEBHOOK_RECEIVED,
                {"event": result.event, "data": result.data},
                context,
            )
        else:
            await self.events.emit(
                IntegrationEvent.WEBHOOK_FAILED,
                {"error": result.error},
                context,
            )

    @staticmethod
    def _no_config(integration_id: str) -> WebhookProcessingResult:
        logger.warning(f"No webhook configuration for integration: {integration_id}")
        return WebhookProcessingResult.failure(
            "NO_CONFIG",
            f"No webhook configuration found for integration: {integration_id}",
        )
