"""
Webhook Processor

Handles the core webhook processing logic:
1. Validate the payload (signature, event type, allow-list)
2. Resolve the handler for the event (specific, then catch-all)
3. Invoke the handler
4. Record a WebhookDelivery with its attempt history
5. Retry failed deliveries with linear or exponential backoff

Retries are driven by the caller: the processor computes delays and keeps
attempt bookkeeping but never schedules anything itself.
"""

import asyncio
import inspect
import logging
import uuid
from datetime import timedelta

from hookbridge.core.retry import calculate_retry_delay, default_webhook_retry_policy
from hookbridge.models.contracts.integrations import IntegrationContext
from hookbridge.models.contracts.webhooks import RetryPolicy, WebhookConfig
from hookbridge.models.enums import DeliveryStatus
from hookbridge.services.webhooks.protocol import (
    RetryAttempt,
    WebhookDelivery,
    WebhookHandler,
    WebhookPayload,
    WebhookProcessingResult,
    utcnow,
)
from hookbridge.services.webhooks.validator import WebhookValidator

logger = logging.getLogger(__name__)

CATCH_ALL = "*"


class WebhookProcessor:
    """
    Dispatches validated webhooks to handlers and tracks deliveries.

    Delivery records live in memory for the lifetime of the processor.
    retry() must not run concurrently for the same delivery id.
    """

    def __init__(self, validator: WebhookValidator | None = None):
        self.validator = validator or WebhookValidator()
        self._handlers: dict[str, WebhookHandler] = {}
        self._catch_all: WebhookHandler | None = None
        self._deliveries: dict[str, WebhookDelivery] = {}

    # ==================== HANDLER REGISTRATION ====================

    def on(self, event: str, handler: WebhookHandler) -> None:
        """
        Register the handler for an event. "*" registers the catch-all.

        Re-registering an event replaces its handler.
        """
        if event == CATCH_ALL:
            self._catch_all = handler
        else:
            self._handlers[event] = handler

    def off(self, event: str) -> None:
        if event == CATCH_ALL:
            self._catch_all = None
        else:
            self._handlers.pop(event, None)

    def get_handler(self, event: str) -> WebhookHandler | None:
        return self._handlers.get(event) or self._catch_all

    # ==================== PROCESSING ====================

    async def process(
        self,
        payload: WebhookPayload,
        config: WebhookConfig,
        context: IntegrationContext,
    ) -> WebhookProcessingResult:
        """
        Process an incoming webhook payload.

        A delivery is recorded whenever a handler ran, whatever its outcome.
        Validation, classification and handler lookup failures are reported
        without a delivery.

        Returns:
            The handler's result (with delivery_id set), or a failure result
        """
        resolved = self._resolve(payload, config)
        if isinstance(resolved, WebhookProcessingResult):
            return resolved
        event, handler = resolved

        result, error_message = await self._invoke(handler, event, payload, context)

        delivery = WebhookDelivery(
            id=str(uuid.uuid4()),
            url=config.endpoint,
            event=event,
            payload=payload.body,
            headers=payload.headers,
            timestamp=payload.timestamp,
            status=DeliveryStatus.DELIVERED if result.success else DeliveryStatus.FAILED,
            attempts=[
                RetryAttempt(
                    attempt=1,
                    timestamp=utcnow(),
                    error=error_message,
                )
            ],
        )
        self._deliveries[delivery.id] = delivery
        result.delivery_id = delivery.id

        logger.info(
            f"Webhook delivery {delivery.id} {delivery.status.value}",
            extra={
                "delivery_id": delivery.id,
                "event": event,
                "status": delivery.status.value,
            },
        )
        return result

    async def retry(
        self,
        delivery_id: str,
        payload: WebhookPayload,
        config: WebhookConfig,
        context: IntegrationContext,
    ) -> WebhookProcessingResult:
        """
        Retry a recorded delivery after the backoff delay.

        Appends exactly one attempt per call that gets past the checks.

        Returns:
            The attempt's result, or DELIVERY_NOT_FOUND /
            DELIVERY_ALREADY_DELIVERED / MAX_RETRIES_EXCEEDED
        """
        delivery = self._deliveries.get(delivery_id)
        if delivery is None:
            return WebhookProcessingResult.failure(
                "DELIVERY_NOT_FOUND",
                f"Delivery {delivery_id} not found",
            )

        policy = self.get_retry_policy(config)
        attempt_count = len(delivery.attempts)

        if delivery.status == DeliveryStatus.DELIVERED:
            return WebhookProcessingResult.failure(
                "DELIVERY_ALREADY_DELIVERED",
                f"Delivery {delivery_id} was already delivered",
            )

        if attempt_count - 1 >= policy.max_retries:
            delivery.status = DeliveryStatus.FAILED
            logger.warning(
                f"Delivery {delivery_id} exhausted {policy.max_retries} retries",
                extra={"delivery_id": delivery_id, "attempts": attempt_count},
            )
            return WebhookProcessingResult.failure(
                "MAX_RETRIES_EXCEEDED",
                f"Maximum retry attempts ({policy.max_retries}) exceeded",
            )

        delay_ms = calculate_retry_delay(policy, attempt_count)
        logger.debug(f"Retrying delivery {delivery_id} in {delay_ms:.0f}ms")
        await asyncio.sleep(delay_ms / 1000)

        delivery.status = DeliveryStatus.RETRYING

        resolved = self._resolve(payload, config)
        if isinstance(resolved, WebhookProcessingResult):
            result = resolved
            error_message = result.error.message if result.error else ""
        else:
            event, handler = resolved
            result, error_message = await self._invoke(handler, event, payload, context)

        next_retry = None
        retries_left = attempt_count < policy.max_retries
        if not result.success and result.should_retry and retries_left:
            next_delay_ms = calculate_retry_delay(policy, attempt_count + 1)
            next_retry = utcnow() + timedelta(milliseconds=next_delay_ms)

        delivery.attempts.append(
            RetryAttempt(
                attempt=attempt_count + 1,
                timestamp=utcnow(),
                error=error_message,
                next_retry=next_retry,
            )
        )

        if result.success:
            delivery.status = DeliveryStatus.DELIVERED
        elif not result.should_retry:
            delivery.status = DeliveryStatus.FAILED

        result.delivery_id = delivery.id

        logger.info(
            f"Webhook delivery {delivery.id} attempt {attempt_count + 1}: {delivery.status.value}",
            extra={
                "delivery_id": delivery.id,
                "attempt": attempt_count + 1,
                "status": delivery.status.value,
            },
        )
        return result

    # ==================== DELIVERY RECORDS ====================

    def get_delivery(self, delivery_id: str) -> WebhookDelivery | None:
        return self._deliveries.get(delivery_id)

    def get_all_deliveries(self) -> list[WebhookDelivery]:
        return list(self._deliveries.values())

    @staticmethod
    def get_retry_policy(config: WebhookConfig) -> RetryPolicy:
        return config.retry_policy or default_webhook_retry_policy()

    # ==================== INTERNALS ====================

    def _resolve(
        self,
        payload: WebhookPayload,
        config: WebhookConfig,
    ) -> tuple[str, WebhookHandler] | WebhookProcessingResult:
        """Validate the payload and find its handler."""
        validation = self.validator.validate(payload, config)
        if not validation.is_valid:
            return WebhookProcessingResult.failure(
                "VALIDATION_FAILED",
                validation.error or "Webhook validation failed",
            )

        event = validation.event
        if not event:
            return WebhookProcessingResult.failure(
                "NO_EVENT_TYPE",
                "Could not determine event type from webhook payload",
            )

        handler = self.get_handler(event)
        if handler is None:
            return WebhookProcessingResult.failure(
                "NO_HANDLER",
                f"No handler registered for event: {event}",
            )

        return event, handler

    async def _invoke(
        self,
        handler: WebhookHandler,
        event: str,
        payload: WebhookPayload,
        context: IntegrationContext,
    ) -> tuple[WebhookProcessingResult, str]:
        """
        Run a handler.

        A handler that raises or returns something other than a
        WebhookProcessingResult yields PROCESSING_ERROR. Results without an
        event get the classified event.

        Returns:
            Tuple of (result, error message for the attempt record)
        """
        try:
            result = handler(payload, context)
            if inspect.isawaitable(result):
                result = await result
            if not isinstance(result, WebhookProcessingResult):
                raise TypeError(
                    f"Handler returned {type(result).__name__}, expected WebhookProcessingResult"
                )
            error_message = result.error.message if result.error else ""
        except Exception as e:
            logger.error(f"Webhook handler for {event} raised: {e}", exc_info=True)
            message = str(e) or "Unknown processing error"
            return (
                WebhookProcessingResult.failure(
                    "PROCESSING_ERROR",
                    message,
                    retryable=True,
                    details={"exception": type(e).__name__},
                ),
                message,
            )

        if result.event is None:
            result.event = event
        return result, error_message
