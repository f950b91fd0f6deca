"""
Pytest fixtures shared by the hookbridge test suite.

This module provides:
1. Settings isolation (cached settings cleared between tests)
2. Common contexts and configurations
"""

import json

import pytest

from hookbridge.config import get_settings
from hookbridge.models.contracts.integrations import IntegrationContext
from hookbridge.models.contracts.webhooks import RetryPolicy
from hookbridge.models.enums import BackoffStrategy
from hookbridge.services.webhooks.signatures import HmacSha256Validator

WEBHOOK_SECRET = "s3cr3t"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test see the environment it sets up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def context():
    return IntegrationContext(
        user_id="user-1",
        organization_id="org-1",
        installation_id="install-1",
        metadata={"source": "test"},
    )


@pytest.fixture
def linear_policy():
    """3 retries, 1s linear steps capped at 5s"""
    return RetryPolicy(
        max_retries=3,
        backoff_strategy=BackoffStrategy.LINEAR,
        base_delay=1000,
        max_delay=5000,
    )


@pytest.fixture
def webhook_config_data():
    """Raw webhook config for a GitHub-style integration"""
    return {
        "endpoint": "https://example.com/hooks/github",
        "secret": WEBHOOK_SECRET,
        "events": ["push", "pull_request"],
    }


@pytest.fixture
def github_push():
    """A signed GitHub push delivery: (headers, body, raw_body)"""
    body = {"ref": "refs/heads/main", "commits": [{"id": "abc123"}]}
    raw_body = json.dumps(body)
    headers = {
        "Content-Type": "application/json",
        "X-GitHub-Event": "push",
        "X-Hub-Signature-256": HmacSha256Validator().generate(raw_body, WEBHOOK_SECRET),
    }
    return headers, body, raw_body
