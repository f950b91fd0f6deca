"""
Unit tests for WebhookManager.

Covers config registration, header normalization, end-to-end handling and
lifecycle event emission.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from hookbridge.models.enums import DeliveryStatus, IntegrationEvent
from hookbridge.services.events import EventEmitter
from hookbridge.services.webhooks.manager import WebhookManager
from hookbridge.services.webhooks.protocol import WebhookProcessingResult
from hookbridge.services.webhooks.signatures import HmacSha256Validator

INTEGRATION = "github"


@pytest.fixture
def manager(webhook_config_data):
    manager = WebhookManager()
    manager.register(INTEGRATION, webhook_config_data)
    return manager


class TestRegistration:
    """Tests for register/unregister"""

    def test_register_validates_dict(self, manager):
        config = manager.get_config(INTEGRATION)

        assert config.endpoint == "https://example.com/hooks/github"
        assert config.signature_header == "x-hub-signature-256"

    def test_register_replaces(self, manager):
        manager.register(INTEGRATION, {"endpoint": "https://example.com/other"})
        assert manager.get_config(INTEGRATION).endpoint == "https://example.com/other"

    def test_unregister(self, manager):
        manager.unregister(INTEGRATION)
        manager.unregister("never-registered")
        assert manager.get_config(INTEGRATION) is None

    def test_normalize_headers(self):
        assert WebhookManager.normalize_headers({"X-GitHub-Event": "push"}) == {"x-github-event": "push"}
        assert WebhookManager.normalize_headers(None) == {}


class TestHandleWebhook:
    """Tests for end-to-end webhook handling"""

    @pytest.mark.asyncio
    async def test_signed_push_delivered(self, manager, github_push, context):
        headers, body, raw_body = github_push
        handler = AsyncMock(return_value=WebhookProcessingResult(success=True, event="push", data={"ok": 1}))
        manager.on_webhook_event("push", handler)

        result = await manager.handle_webhook(INTEGRATION, headers, body, raw_body, context)

        assert result.success is True
        assert result.data == {"ok": 1}

        payload = handler.await_args.args[0]
        assert payload.headers["x-github-event"] == "push"
        assert payload.signature == headers["X-Hub-Signature-256"]

        deliveries = manager.get_deliveries()
        assert len(deliveries) == 1
        assert deliveries[0].status == DeliveryStatus.DELIVERED
        assert len(deliveries[0].attempts) == 1
        assert manager.get_delivery(result.delivery_id) is deliveries[0]

    @pytest.mark.asyncio
    async def test_tampered_body_rejected(self, manager, github_push, context):
        headers, body, raw_body = github_push
        handler = AsyncMock()
        manager.on_webhook_event("push", handler)

        result = await manager.handle_webhook(
            INTEGRATION, headers, body, raw_body.replace("main", "evil"), context
        )

        assert result.success is False
        assert result.error.code == "VALIDATION_FAILED"
        assert manager.get_deliveries() == []
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_custom_signature_header(self, context):
        manager = WebhookManager()
        manager.register(
            "custom",
            {
                "endpoint": "https://example.com/hooks",
                "secret": "abc",
                "signature_header": "X-Custom-Signature",
            },
        )
        manager.on_webhook_event("*", AsyncMock(return_value=WebhookProcessingResult(success=True)))

        result = await manager.handle_webhook(
            "custom",
            {"x-custom-signature": "sha256=bad"},
            {"type": "ping"},
            '{"type": "ping"}',
            context,
        )

        assert result.error.code == "VALIDATION_FAILED"

    @pytest.mark.asyncio
    async def test_unknown_integration(self, manager, github_push, context):
        headers, body, raw_body = github_push

        result = await manager.handle_webhook("gitlab", headers, body, raw_body, context)

        assert result.success is False
        assert result.error.code == "NO_CONFIG"
        assert "gitlab" in result.error.message

    @pytest.mark.asyncio
    async def test_retry_webhook(self, manager, github_push, context):
        headers, body, raw_body = github_push
        handler = AsyncMock(
            side_effect=[
                WebhookProcessingResult.failure("DOWN", "down", retryable=True),
                WebhookProcessingResult(success=True, event="push"),
            ]
        )
        manager.on_webhook_event("push", handler)
        manager.register(
            INTEGRATION,
            {
                "endpoint": "https://example.com/hooks/github",
                "secret": "s3cr3t",
                "retry_policy": {"max_retries": 2, "base_delay": 100, "max_delay": 1000},
            },
        )

        first = await manager.handle_webhook(INTEGRATION, headers, body, raw_body, context)
        assert first.success is False

        with patch("hookbridge.services.webhooks.processor.asyncio.sleep", new_callable=AsyncMock):
            retried = await manager.retry_webhook(
                INTEGRATION, first.delivery_id, headers, body, raw_body, context
            )

        assert retried.success is True
        assert manager.get_delivery(first.delivery_id).status == DeliveryStatus.DELIVERED
        assert retried.event == "push"

    @pytest.mark.asyncio
    async def test_off_webhook_event(self, manager, github_push, context):
        headers, body, raw_body = github_push
        manager.on_webhook_event("push", AsyncMock())
        manager.off_webhook_event("push")

        result = await manager.handle_webhook(INTEGRATION, headers, body, raw_body, context)

        assert result.error.code == "NO_HANDLER"


class TestEvents:
    """Tests for webhook lifecycle emission"""

    @pytest.mark.asyncio
    async def test_received_emitted_on_success(self, manager, github_push, context):
        headers, body, raw_body = github_push
        manager.on_webhook_event("push", AsyncMock(return_value=WebhookProcessingResult(success=True, event="push", data=1)))
        subscriber = AsyncMock()
        manager.on(IntegrationEvent.WEBHOOK_RECEIVED, subscriber)

        await manager.handle_webhook(INTEGRATION, headers, body, raw_body, context)

        subscriber.assert_awaited_once_with(
            IntegrationEvent.WEBHOOK_RECEIVED,
            {"event": "push", "data": 1},
            context,
        )

    @pytest.mark.asyncio
    async def test_received_carries_classified_event(self, manager, github_push, context):
        headers, body, raw_body = github_push
        manager.on_webhook_event("push", AsyncMock(return_value=WebhookProcessingResult(success=True, data=1)))
        subscriber = AsyncMock()
        manager.on(IntegrationEvent.WEBHOOK_RECEIVED, subscriber)

        await manager.handle_webhook(INTEGRATION, headers, body, raw_body, context)

        subscriber.assert_awaited_once_with(
            IntegrationEvent.WEBHOOK_RECEIVED,
            {"event": "push", "data": 1},
            context,
        )

    @pytest.mark.asyncio
    async def test_handler_returning_none_is_recorded(self, manager, github_push, context):
        headers, body, raw_body = github_push
        manager.on_webhook_event("push", AsyncMock(return_value=None))

        result = await manager.handle_webhook(INTEGRATION, headers, body, raw_body, context)

        assert result.error.code == "PROCESSING_ERROR"
        assert len(manager.get_deliveries()) == 1
        assert manager.get_deliveries()[0].status == DeliveryStatus.FAILED

    @pytest.mark.asyncio
    async def test_failed_emitted_on_failure(self, manager, github_push, context):
        headers, body, raw_body = github_push
        subscriber = MagicMock()
        manager.on("webhook.failed", subscriber)

        result = await manager.handle_webhook(INTEGRATION, headers, body, raw_body, context)

        subscriber.assert_called_once_with(IntegrationEvent.WEBHOOK_FAILED, {"error": result.error}, context)

    @pytest.mark.asyncio
    async def test_subscriber_exception_swallowed(self, manager, github_push, context):
        headers, body, raw_body = github_push
        manager.on_webhook_event("push", AsyncMock(return_value=WebhookProcessingResult(success=True)))
        manager.on(IntegrationEvent.WEBHOOK_RECEIVED, AsyncMock(side_effect=ValueError("boom")))
        healthy = AsyncMock()
        manager.on(IntegrationEvent.WEBHOOK_RECEIVED, healthy)

        result = await manager.handle_webhook(INTEGRATION, headers, body, raw_body, context)

        assert result.success is True
        healthy.assert_awaited_once()

    def test_shared_emitter(self):
        events = EventEmitter()
        manager = WebhookManager(events=events)
        assert manager.events is events


class TestSignatureUtilities:
    """Tests for validate_signature / generate_signature"""

    def test_generate_then_validate(self, manager):
        signature = manager.generate_signature(INTEGRATION, b"payload")

        assert signature == HmacSha256Validator().generate(b"payload", "s3cr3t")
        assert manager.validate_signature(INTEGRATION, b"payload", signature) is True
        assert manager.validate_signature(INTEGRATION, b"payload!", signature) is False

    def test_unknown_integration(self, manager):
        assert manager.generate_signature("nope", b"x") is None
        assert manager.validate_signature("nope", b"x", "sha256=00") is False

    def test_no_secret(self, manager):
        manager.register("open", {"endpoint": "https://example.com/open"})

        assert manager.generate_signature("open", b"x") is None
        assert manager.validate_signature("open", b"x", "sha256=00") is False
