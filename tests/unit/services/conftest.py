"""
Pytest fixtures for service unit tests.

Provides:
- Webhook configs and payload builders
- httpx clients backed by MockTransport
- Patched backoff sleeps
"""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from hookbridge.models.contracts.webhooks import WebhookConfig
from hookbridge.services.webhooks.protocol import WebhookPayload, WebhookProcessingResult


@pytest.fixture
def webhook_config(webhook_config_data):
    return WebhookConfig.model_validate(webhook_config_data)


@pytest.fixture
def make_payload():
    """Build a WebhookPayload from a body and headers (lowercase keys)."""

    def _make(body, headers=None, signature=None, raw_body=None):
        return WebhookPayload(
            headers=headers if headers is not None else {"content-type": "application/json"},
            body=body,
            raw_body=raw_body if raw_body is not None else json.dumps(body),
            signature=signature,
        )

    return _make


@pytest.fixture
def ok_handler():
    """Handler that always succeeds"""
    return AsyncMock(
        side_effect=lambda payload, context: WebhookProcessingResult(
            success=True,
            event="push",
            data={"processed": True},
        )
    )


@pytest.fixture
def no_sleep():
    """Skip webhook retry backoff sleeps"""
    with patch(
        "hookbridge.services.webhooks.processor.asyncio.sleep",
        new_callable=AsyncMock,
    ) as mock_sleep:
        yield mock_sleep


@pytest.fixture
def requests_log():
    return []


@pytest.fixture
def mock_http(requests_log):
    """
    Build an httpx.AsyncClient routed to a handler.

    Every request is appended to requests_log.
    """
    clients = []

    def _make(handler):
        def _record(request):
            requests_log.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        clients.append(client)
        return client

    return _make
